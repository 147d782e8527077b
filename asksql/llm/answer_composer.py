"""Answer composition using LLM."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .client import CompletionClient
from .prompts import build_answer_prompt

logger = logging.getLogger(__name__)


def result_to_text(result: Any) -> str:
    """Render an execution result the way it would print in a console.

    Falls back to ``str`` when the object's ``repr`` fails.
    """
    try:
        return repr(result)
    except Exception:
        return str(result)


def compose_answer(client: CompletionClient, question: str, sql: str, result: Any) -> Optional[str]:
    """Compose natural language answer from query results."""
    result_text = result_to_text(result)

    logger.info(f"Composing answer for question: {question[:100]}")
    logger.debug(f"SQL: {sql[:200]} | result: {result_text[:200]}")

    answer = client.complete(build_answer_prompt(question, sql, result_text))
    logger.info(f"Composed answer length: {len(answer) if answer else 0} chars")

    return answer
