"""SELECT-only policy checks.

These are prefix checks on the statement text, not SQL parsing. Text is never
rewritten except for dropping a single trailing terminator after generation.
"""

from __future__ import annotations

from ..core.exceptions import SanitizationError

SELECT_ONLY_MESSAGE = "Query sanitization failed: Only SELECT statements are allowed by default."


def is_select_statement(sql: str) -> bool:
    """True if the trimmed, case-insensitive text starts with ``select``."""
    return sql.strip().lower().startswith("select")


def strip_terminator(sql: str) -> str:
    """Drop exactly one trailing ``;``."""
    sql = sql.strip()
    if sql.endswith(";"):
        sql = sql[:-1]
    return sql


def check_select_only(sql: str) -> str:
    """Return the SQL unchanged, or raise SanitizationError for non-SELECT text."""
    if not is_select_statement(sql):
        raise SanitizationError(SELECT_ONLY_MESSAGE)
    return sql
