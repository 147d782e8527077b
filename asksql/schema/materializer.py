"""Schema materializers: regenerate the schema file from the host project.

The only host framework recognised is an Alembic project (an ``alembic.ini``
next to the code). Its offline migration SQL is the full DDL of the database,
which is exactly the grounding text the generator needs.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Optional, Protocol

from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DUMP_COMMAND = ("alembic", "upgrade", "head", "--sql")
HOST_FRAMEWORK_MARKER = "alembic.ini"


class SchemaDumpError(ConfigurationError):
    """Raised when the schema dump command fails."""

    pass


class SchemaMaterializer(Protocol):
    def materialize(self) -> None:
        """Write the schema file, raising on failure."""
        ...


class CommandMaterializer:
    """Runs the fixed dump command and writes its output to the schema path."""

    def __init__(self, schema_path: str, root: Optional[str] = None) -> None:
        self.schema_path = schema_path
        self.root = root

    @property
    def command_line(self) -> str:
        return " ".join(DUMP_COMMAND)

    def materialize(self) -> None:
        logger.info(f"Dumping schema with '{self.command_line}' into {self.schema_path}")
        try:
            completed = subprocess.run(
                list(DUMP_COMMAND),
                cwd=self.root,
                check=True,
                capture_output=True,
                text=True,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise SchemaDumpError(
                f"'{self.command_line}' exited with status {e.returncode}: {stderr[:200]}"
            ) from e
        except OSError as e:
            raise SchemaDumpError(f"'{self.command_line}' could not be started: {e}") from e

        target = self.schema_path
        if self.root and not os.path.isabs(target):
            target = os.path.join(self.root, target)
        directory = os.path.dirname(target)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(target, "w", encoding="utf-8") as handle:
            handle.write(completed.stdout)


def detect_materializer(schema_path: str, root: Optional[str] = None) -> Optional[CommandMaterializer]:
    """Return a CommandMaterializer when running inside an Alembic project."""
    marker = os.path.join(root or os.getcwd(), HOST_FRAMEWORK_MARKER)
    if not os.path.exists(marker):
        return None
    return CommandMaterializer(schema_path, root=root)
