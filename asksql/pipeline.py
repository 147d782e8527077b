"""Question -> Query pipeline.

Flow: schema resolution -> SQL generation -> Query bound to the target.
Each call makes at most one LLM request (two with ``answer``) and at most one
database round trip.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .core.config import Settings, get_settings
from .execution import TargetKind, resolve_target
from .llm.client import CompletionClient
from .llm.prompts import PromptMode
from .llm.sql_generator import SqlGenerator
from .query import Query
from .schema.resolver import SchemaResolver, ensure_schema_not_empty

logger = logging.getLogger(__name__)


class AskPipeline:
    def __init__(
        self,
        settings: Settings,
        completion_client: Optional[CompletionClient] = None,
        schema_resolver: Optional[SchemaResolver] = None,
    ) -> None:
        self.settings = settings
        # Raises ConfigurationError right away when the API key is missing
        self.client = completion_client or CompletionClient(settings)
        self.schema_resolver = schema_resolver or SchemaResolver.from_settings(settings)
        self.generator = SqlGenerator(self.client)

    def ask(
        self,
        question: str,
        target: Any,
        table_name: Optional[str] = None,
        schema: Optional[str] = None,
    ) -> Query:
        """Generate SQL for the question and wrap it in an unsanitized Query.

        The scoped prompt is used when a table name is given or the target is
        a typed accessor; otherwise the generator may use any table.
        """
        if schema is None:
            schema = self.schema_resolver.resolve()
        else:
            ensure_schema_not_empty(schema)

        resolved = resolve_target(target)
        scope = table_name or (resolved.table_name if resolved.kind is TargetKind.TYPED else None)
        mode = PromptMode.SCOPED if scope else PromptMode.OPEN

        sql = self.generator.generate(question, schema, mode, table_name=scope)
        logger.info(f"Generated query for '{question[:100]}': {sql[:200]}")

        return Query(question, sql, resolved, completion_client=self.client)

    def answer(
        self,
        question: str,
        target: Any,
        table_name: Optional[str] = None,
        schema: Optional[str] = None,
    ) -> Optional[str]:
        """Ask, sanitize with the SELECT-only policy, execute, and answer."""
        query = self.ask(question, target, table_name=table_name, schema=schema)
        return query.sanitize().answer()


def ask(
    question: str,
    target: Any,
    settings: Optional[Settings] = None,
    table_name: Optional[str] = None,
) -> Query:
    """One-off convenience: build a pipeline from settings (or the environment) and ask."""
    pipeline = AskPipeline(settings or get_settings())
    return pipeline.ask(question, target, table_name=table_name)
