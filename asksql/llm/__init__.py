"""LLM interaction module.

Contains the completion client, prompts, and specialized LLM operations:
- SQL generation
- Answer composition
"""

from .answer_composer import compose_answer, result_to_text
from .client import MISSING_API_KEY_MESSAGE, CompletionClient
from .prompts import (
    ANSWER_COMPOSITION,
    SQL_GENERATION_OPEN,
    SQL_GENERATION_SCOPED,
    PromptMode,
    build_answer_prompt,
    build_open_prompt,
    build_scoped_prompt,
    build_sql_prompt,
)
from .sql_generator import SqlGenerator

__all__ = [
    "compose_answer",
    "result_to_text",
    "MISSING_API_KEY_MESSAGE",
    "CompletionClient",
    "ANSWER_COMPOSITION",
    "SQL_GENERATION_OPEN",
    "SQL_GENERATION_SCOPED",
    "PromptMode",
    "build_answer_prompt",
    "build_open_prompt",
    "build_scoped_prompt",
    "build_sql_prompt",
    "SqlGenerator",
]
