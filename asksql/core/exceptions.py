"""Custom exceptions for the query pipeline."""

from __future__ import annotations


class AskSqlError(Exception):
    """Base class for every error raised across the pipeline boundaries."""

    pass


class ConfigurationError(AskSqlError):
    """Raised when setup is missing or invalid (API key, schema source)."""

    pass


class ApiError(AskSqlError):
    """Raised when the completion provider fails at the transport or auth level."""

    pass


class QueryGenerationError(AskSqlError):
    """Raised when the LLM returns no SQL, invalid SQL, or generation fails."""

    pass


class SanitizationError(AskSqlError):
    """Raised when a query is rejected by the pre-execution policy."""

    pass


class QueryExecutionError(AskSqlError):
    """Raised when the database layer fails or a query is executed unsanitized."""

    pass
