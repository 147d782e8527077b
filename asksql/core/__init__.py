"""Core infrastructure module.

Contains configuration, the DB-API connection adapter, API models, and exceptions.
"""

from .config import (
    PROVIDERS,
    ProviderInfo,
    Settings,
    get_settings,
    load_settings_file,
)
from .db import DbApiConnection, open_connection
from .exceptions import (
    ApiError,
    AskSqlError,
    ConfigurationError,
    QueryExecutionError,
    QueryGenerationError,
    SanitizationError,
)
from .models import AskRequest, AskResponse, ErrorDetail

__all__ = [
    # Config
    "PROVIDERS",
    "ProviderInfo",
    "Settings",
    "get_settings",
    "load_settings_file",
    # Database
    "DbApiConnection",
    "open_connection",
    # Exceptions
    "ApiError",
    "AskSqlError",
    "ConfigurationError",
    "QueryExecutionError",
    "QueryGenerationError",
    "SanitizationError",
    # Models
    "AskRequest",
    "AskResponse",
    "ErrorDetail",
]
