"""Schema grounding module.

Contains the schema resolver and the schema materializers.
"""

from .materializer import (
    DUMP_COMMAND,
    HOST_FRAMEWORK_MARKER,
    CommandMaterializer,
    SchemaDumpError,
    SchemaMaterializer,
    detect_materializer,
)
from .resolver import EMPTY_SCHEMA_MESSAGE, STRUCTURE_DUMP_PATH, SchemaResolver, ensure_schema_not_empty

__all__ = [
    "DUMP_COMMAND",
    "HOST_FRAMEWORK_MARKER",
    "CommandMaterializer",
    "SchemaDumpError",
    "SchemaMaterializer",
    "detect_materializer",
    "EMPTY_SCHEMA_MESSAGE",
    "STRUCTURE_DUMP_PATH",
    "SchemaResolver",
    "ensure_schema_not_empty",
]
