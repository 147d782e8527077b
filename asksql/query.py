"""The Query entity: generated SQL plus its sanitize/execute/answer lifecycle."""

from __future__ import annotations

from enum import Enum
import logging
from typing import Any, Optional

from .core.exceptions import ConfigurationError, QueryExecutionError
from .execution import ExecutionTarget, dispatch, resolve_target
from .llm.answer_composer import compose_answer
from .llm.client import CompletionClient
from .security.sanitizer import check_select_only

logger = logging.getLogger(__name__)


class QueryState(str, Enum):
    FRESH = "fresh"
    SANITIZED = "sanitized"
    EXECUTED = "executed"
    ANSWERED = "answered"


class Query:
    """SQL generated for a question, bound to the target it will run on.

    ``sanitized_sql`` starts equal to ``raw_sql``; it can be assigned directly,
    and ``None`` blocks execution.
    """

    def __init__(
        self,
        natural_question: Optional[str],
        raw_sql: str,
        target: Any,
        completion_client: Optional[CompletionClient] = None,
    ) -> None:
        self.natural_question = natural_question
        self.raw_sql = raw_sql
        self.sanitized_sql: Optional[str] = raw_sql
        self.target: ExecutionTarget = resolve_target(target)
        self.completion_client = completion_client
        self.state = QueryState.FRESH

    def sanitize(self, allow_only_select: bool = True) -> "Query":
        """Apply the pre-execution policy and return self for chaining.

        Raises:
            SanitizationError: If only SELECT is allowed and the SQL is not a SELECT
        """
        sql = self.sanitized_sql if self.sanitized_sql is not None else self.raw_sql
        if allow_only_select:
            check_select_only(sql)
        self.sanitized_sql = sql
        self.state = QueryState.SANITIZED
        return self

    def execute(self) -> Any:
        """Run the sanitized SQL on the target.

        Raises:
            QueryExecutionError: If nothing is sanitized or the database call fails
        """
        if self.sanitized_sql is None:
            raise QueryExecutionError(
                "Cannot execute raw SQL. Call sanitize() first or work with sanitized_sql."
            )

        logger.info(f"Executing SQL on {self.target.kind.value} target: {self.sanitized_sql[:200]}")
        try:
            result = dispatch(self.target, self.sanitized_sql)
        except Exception as e:
            logger.error(f"SQL execution failed: {e}")
            raise QueryExecutionError(f"Failed to execute SQL query: {e}") from e

        self.state = QueryState.EXECUTED
        return result

    def answer(self) -> Optional[str]:
        """Execute the query and ask the LLM to phrase the result as an answer.

        Errors from ``execute`` propagate unchanged.
        """
        if self.completion_client is None:
            raise ConfigurationError("A completion client is required to answer questions.")

        result = self.execute()
        answer = compose_answer(
            self.completion_client,
            self.natural_question or "",
            self.sanitized_sql,
            result,
        )
        self.state = QueryState.ANSWERED
        return answer

    def __str__(self) -> str:
        return self.sanitized_sql if self.sanitized_sql is not None else self.raw_sql

    def __repr__(self) -> str:
        return f"<Query state={self.state.value} sql={str(self)!r}>"
