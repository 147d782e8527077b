"""AskSQL: natural-language questions answered through LLM-generated SQL.

Package Structure:
    core/       - Core infrastructure (config, DB-API adapter, models, exceptions)
    schema/     - Schema description resolution and materializers
    llm/        - LLM interaction (client, prompts, SQL generation, answers)
    security/   - SELECT-only sanitization policy
    execution   - Execution targets and dispatch
    query       - The Query entity and its lifecycle
    pipeline    - Question -> Query facade
    main        - FastAPI app (import ``asksql.main`` explicitly)
"""

from .core.config import Settings, get_settings, load_settings_file
from .core.db import DbApiConnection, open_connection
from .core.exceptions import (
    ApiError,
    AskSqlError,
    ConfigurationError,
    QueryExecutionError,
    QueryGenerationError,
    SanitizationError,
)
from .execution import ExecutionTarget, GenericConnection, TargetKind, TypedAccessor, resolve_target
from .llm import CompletionClient, PromptMode, SqlGenerator
from .pipeline import AskPipeline, ask
from .query import Query, QueryState
from .schema import CommandMaterializer, SchemaResolver

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "get_settings",
    "load_settings_file",
    "DbApiConnection",
    "open_connection",
    "ApiError",
    "AskSqlError",
    "ConfigurationError",
    "QueryExecutionError",
    "QueryGenerationError",
    "SanitizationError",
    "ExecutionTarget",
    "GenericConnection",
    "TargetKind",
    "TypedAccessor",
    "resolve_target",
    "CompletionClient",
    "PromptMode",
    "SqlGenerator",
    "AskPipeline",
    "ask",
    "Query",
    "QueryState",
    "CommandMaterializer",
    "SchemaResolver",
]
