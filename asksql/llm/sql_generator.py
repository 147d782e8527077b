"""SQL generation: prompt, completion, and the SELECT-only output contract."""

from __future__ import annotations

import logging
from typing import Optional

from ..core.exceptions import QueryGenerationError
from ..security.sanitizer import is_select_statement, strip_terminator
from .client import CompletionClient
from .prompts import PromptMode, build_sql_prompt

logger = logging.getLogger(__name__)


class SqlGenerator:
    def __init__(self, client: CompletionClient) -> None:
        self.client = client

    def generate(
        self,
        question: str,
        schema: str,
        mode: PromptMode = PromptMode.OPEN,
        table_name: Optional[str] = None,
    ) -> str:
        """Generate a single SELECT statement for the question.

        Args:
            question: Natural-language question
            schema: Schema description used as grounding context
            mode: Scoped (one target table) or open (any table)
            table_name: Target table, required in scoped mode

        Raises:
            QueryGenerationError: If the LLM returns nothing or a non-SELECT statement
            ApiError: If the completion provider fails
        """
        if mode is PromptMode.SCOPED and not table_name:
            raise QueryGenerationError("A table name is required for scoped SQL generation")

        logger.info(f"Generating SQL ({mode.value}) for question: {question[:100]}")
        prompt = build_sql_prompt(question, schema, mode, table_name)

        sql = self.client.complete(prompt)

        if not sql:
            raise QueryGenerationError("LLM did not return a SQL query.")
        if not is_select_statement(sql):
            logger.warning(f"Rejected non-SELECT completion: {sql[:200]}")
            raise QueryGenerationError(f"LLM generated a non-SELECT query: {sql}")

        sql = strip_terminator(sql)
        logger.debug(f"Generated SQL: {sql[:200]}")
        return sql
