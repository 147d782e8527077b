"""Pipeline configuration loaded from the environment or a YAML file."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
import os
from typing import Any, Optional

from dotenv import find_dotenv, load_dotenv
import yaml

from .exceptions import ConfigurationError

ENV_PREFIX = "ASKSQL_"

DEFAULT_SCHEMA_PATH = os.path.join("db", "schema.sql")


@dataclass(frozen=True)
class ProviderInfo:
    """Display label and default endpoint of a completion provider."""
    label: str
    base_url: str


PROVIDERS: dict[str, ProviderInfo] = {
    "openai": ProviderInfo(label="OpenAI", base_url="https://api.openai.com/v1"),
    "openrouter": ProviderInfo(label="OpenRouter", base_url="https://openrouter.ai/api/v1"),
    "ollama": ProviderInfo(label="Ollama", base_url="http://localhost:11434/v1"),
}


@dataclass(frozen=True)
class Settings:
    """Pipeline settings."""
    # Completion provider
    llm_provider: str = "openai"
    llm_api_key: Optional[str] = None
    llm_model_name: str = "gpt-3.5-turbo"
    llm_base_url: Optional[str] = None
    temperature: float = 0.2
    max_tokens: int = 250
    request_timeout: float = 30.0

    # Schema grounding
    db_schema_path: str = DEFAULT_SCHEMA_PATH
    skip_dump_schema: bool = False

    # Bundled ODBC connection (optional)
    db_connection_string: Optional[str] = None

    @property
    def provider(self) -> ProviderInfo:
        """Provider info; unknown providers are labelled by their own name."""
        info = PROVIDERS.get(self.llm_provider.lower())
        if info:
            return info
        return ProviderInfo(label=self.llm_provider, base_url="")

    @property
    def completions_url(self) -> str:
        base = (self.llm_base_url or self.provider.base_url).rstrip("/")
        if not base:
            raise ConfigurationError(
                f"No base URL known for LLM provider '{self.llm_provider}'. Set llm_base_url."
            )
        return f"{base}/chat/completions"

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "y", "on")


def _env_number(name: str, default: str, parse: Any) -> Any:
    value = os.getenv(name, default)
    try:
        return parse(value)
    except ValueError as e:
        raise ConfigurationError(f"Invalid value for {name}: {value!r}") from e


def get_settings() -> Settings:
    """Load settings from ASKSQL_* environment variables (and a .env file)."""
    load_dotenv(find_dotenv(usecwd=True))

    return Settings(
        # Completion provider
        llm_provider=os.getenv(f"{ENV_PREFIX}LLM_PROVIDER", "openai").lower(),
        llm_api_key=os.getenv(f"{ENV_PREFIX}LLM_API_KEY") or None,
        llm_model_name=os.getenv(f"{ENV_PREFIX}LLM_MODEL_NAME", "gpt-3.5-turbo"),
        llm_base_url=os.getenv(f"{ENV_PREFIX}LLM_BASE_URL") or None,
        temperature=_env_number(f"{ENV_PREFIX}TEMPERATURE", "0.2", float),
        max_tokens=_env_number(f"{ENV_PREFIX}MAX_TOKENS", "250", int),
        request_timeout=_env_number(f"{ENV_PREFIX}REQUEST_TIMEOUT", "30", float),

        # Schema
        db_schema_path=os.getenv(f"{ENV_PREFIX}DB_SCHEMA_PATH", DEFAULT_SCHEMA_PATH),
        skip_dump_schema=_env_bool(f"{ENV_PREFIX}SKIP_DUMP_SCHEMA", False),

        # Database
        db_connection_string=os.getenv(f"{ENV_PREFIX}DB_CONNECTION_STRING") or None,
    )


def load_settings_file(path: str) -> Settings:
    """Load settings from a YAML mapping of Settings field names.

    Raises:
        ConfigurationError: If the file is unreadable, not a mapping, or has unknown keys
    """
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
    except OSError as e:
        raise ConfigurationError(f"Error reading settings file at {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in settings file at {path}: {e}") from e

    if not isinstance(payload, dict):
        raise ConfigurationError(f"Settings file at {path} must contain a mapping")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(payload) - known)
    if unknown:
        raise ConfigurationError(f"Unknown settings in {path}: {', '.join(unknown)}")

    return Settings(**payload)
