"""Schema description resolution with an ordered fallback chain.

Order (first success wins):
1. The configured schema file
2. A schema dump through the materializer (host framework only, unless
   skipped), followed by one more read of the configured file
3. The structure dump at ``db/structure.sql``

Whatever is found must contain more than whitespace.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from ..core.config import Settings
from ..core.exceptions import ConfigurationError
from .materializer import SchemaMaterializer, detect_materializer

logger = logging.getLogger(__name__)

STRUCTURE_DUMP_PATH = os.path.join("db", "structure.sql")

EMPTY_SCHEMA_MESSAGE = "Schema content is empty. Cannot proceed without database schema context."


def ensure_schema_not_empty(schema: Optional[str]) -> str:
    """Return the schema unchanged, or raise if it is blank."""
    if schema is None or not schema.strip():
        raise ConfigurationError(EMPTY_SCHEMA_MESSAGE)
    return schema


class SchemaResolver:
    def __init__(
        self,
        schema_path: str,
        materializer: Optional[SchemaMaterializer] = None,
        skip_dump: bool = False,
        root: Optional[str] = None,
    ) -> None:
        self.schema_path = schema_path
        self.materializer = materializer
        self.skip_dump = skip_dump
        self.root = root

    @classmethod
    def from_settings(cls, settings: Settings, root: Optional[str] = None) -> "SchemaResolver":
        """Build a resolver, detecting the host framework under root."""
        return cls(
            settings.db_schema_path,
            materializer=detect_materializer(settings.db_schema_path, root=root),
            skip_dump=settings.skip_dump_schema,
            root=root,
        )

    def _full_path(self, path: str) -> str:
        if self.root and not os.path.isabs(path):
            return os.path.join(self.root, path)
        return path

    def _read_if_exists(self, path: str) -> Optional[str]:
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Error reading schema file at {path}: {e}") from e

    def _dump_schema(self) -> Optional[str]:
        """Run the materializer; return the failure detail, or None on success."""
        try:
            self.materializer.materialize()
        except Exception as e:
            logger.error(f"Schema dump failed: {e}")
            return str(e)
        return None

    def load(self) -> str:
        """Return the raw schema text without the emptiness check."""
        primary = self._full_path(self.schema_path)
        content = self._read_if_exists(primary)
        if content is not None:
            return content

        logger.warning(f"Schema file not found at {primary}. Attempting to generate it.")

        dump_failure: Optional[str] = None
        if self.materializer is not None and not self.skip_dump:
            dump_failure = self._dump_schema()
            content = self._read_if_exists(primary)
            if content is not None:
                return content

        alternate = self._full_path(STRUCTURE_DUMP_PATH)
        content = self._read_if_exists(alternate)
        if content is not None:
            logger.info(f"Using schema from {alternate}")
            return content

        message = (
            f"Database schema file not found at {primary} or {alternate}. "
            "Configure db_schema_path or generate the schema file."
        )
        if dump_failure is not None:
            message += f" Schema dump command failed: {dump_failure}"
        raise ConfigurationError(message)

    def resolve(self) -> str:
        """Return the schema description, rejecting files that are found but blank."""
        return ensure_schema_not_empty(self.load())
