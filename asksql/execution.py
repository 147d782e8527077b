"""Execution targets and dispatch.

A target is resolved once into one of two kinds:

- ``TYPED``: a model-like accessor bound to one table that runs raw SQL and
  returns domain records
- ``GENERIC``: an untyped connection that returns rows as mappings

Both paths collapse a single-row ``count`` aggregate to its scalar value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import inspect
import logging
from typing import Any, Mapping, Optional, Protocol, Sequence

from .security.sanitizer import is_select_statement

logger = logging.getLogger(__name__)

COUNT_KEY = "count"


class TypedAccessor(Protocol):
    def table_name(self) -> str: ...

    def execute_typed_sql(self, sql: str) -> Sequence[Any]: ...


class GenericConnection(Protocol):
    def select_rows(self, sql: str) -> Sequence[Mapping[str, Any]]: ...

    def execute(self, sql: str) -> Any: ...


class TargetKind(str, Enum):
    TYPED = "typed"
    GENERIC = "generic"


@dataclass(frozen=True)
class ExecutionTarget:
    kind: TargetKind
    handle: Any
    table_name: Optional[str] = None


def _table_name_of(handle: Any) -> Optional[str]:
    """Table name from a ``table_name`` method or attribute, if any."""
    name = getattr(handle, "table_name", None)
    if callable(name):
        name = name()
    if isinstance(name, str) and name:
        return name
    return None


def resolve_target(handle: Any) -> ExecutionTarget:
    """Classify an accessor or connection. Anything that is not a typed
    accessor with a table name is treated as a generic connection."""
    if isinstance(handle, ExecutionTarget):
        return handle
    if callable(getattr(handle, "execute_typed_sql", None)):
        table_name = _table_name_of(handle)
        if table_name:
            return ExecutionTarget(TargetKind.TYPED, handle, table_name)
    return ExecutionTarget(TargetKind.GENERIC, handle)


def _takes_no_arguments(method: Any) -> bool:
    """True if the method can be called without arguments (not Sequence.count)."""
    try:
        inspect.signature(method).bind()
    except (TypeError, ValueError):
        return False
    return True


def _unwrap_record_count(records: Any) -> Any:
    # TODO: restrict collapsing to COUNT(*) aggregates; a selected column named "count" collapses too
    if not isinstance(records, Sequence) or isinstance(records, (str, bytes)) or len(records) != 1:
        return records
    accessor = getattr(records[0], COUNT_KEY, None)
    if inspect.ismethod(accessor):
        if _takes_no_arguments(accessor):
            return accessor()
        return records
    if accessor is not None and not callable(accessor):
        return accessor
    return records


def _unwrap_row_count(rows: Any) -> Any:
    if not isinstance(rows, Sequence) or isinstance(rows, (str, bytes)) or len(rows) != 1:
        return rows
    row = rows[0]
    if isinstance(row, Mapping) and len(row) == 1 and COUNT_KEY in row:
        return row[COUNT_KEY]
    return rows


def dispatch(target: ExecutionTarget, sql: str) -> Any:
    """Run SQL on the target. Driver errors propagate to the caller."""
    if target.kind is TargetKind.TYPED:
        logger.debug(f"Executing on typed accessor for {target.table_name}")
        return _unwrap_record_count(target.handle.execute_typed_sql(sql))

    if is_select_statement(sql):
        logger.debug("Executing SELECT on generic connection")
        result = target.handle.select_rows(sql)
    else:
        logger.debug("Executing statement on generic connection")
        result = target.handle.execute(sql)
    return _unwrap_row_count(result)
