"""DB-API connection adapter used as a generic execution target."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
import logging
from typing import Any, Generator

from .config import Settings
from .exceptions import ConfigurationError, QueryExecutionError

logger = logging.getLogger(__name__)


def _normalize_value(value: Any) -> Any:
    """Normalize database values for JSON serialization."""
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, bytes):
        # Try to decode as UTF-8, otherwise return hex representation
        try:
            return value.decode('utf-8')
        except UnicodeDecodeError:
            return value.hex()
    if isinstance(value, memoryview):
        return bytes(value).hex()
    return value


class DbApiConnection:
    """Generic connection over any DB-API 2.0 connection (pyodbc, sqlite3, ...).

    Errors raised by the driver propagate unchanged; the Query boundary
    re-wraps them.
    """

    def __init__(self, connection: Any) -> None:
        self.connection = connection

    def select_rows(self, sql: str) -> list[dict[str, Any]]:
        """Run a query and return its rows as column -> value mappings."""
        logger.debug(f"Selecting rows: {sql[:200]}")
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql)
            columns = [col[0] for col in cursor.description] if cursor.description else []
            rows = [
                {column: _normalize_value(value) for column, value in zip(columns, row)}
                for row in cursor.fetchall()
            ]
        finally:
            cursor.close()

        logger.debug(f"Query returned {len(rows)} rows")
        return rows

    def execute(self, sql: str) -> int:
        """Run a statement without a typed result and return the affected row count."""
        logger.debug(f"Executing statement: {sql[:200]}")
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql)
            rowcount = cursor.rowcount
            self.connection.commit()
        finally:
            cursor.close()

        logger.debug(f"Statement affected {rowcount} rows")
        return rowcount

    def close(self) -> None:
        self.connection.close()


@contextmanager
def open_connection(settings: Settings) -> Generator[DbApiConnection, None, None]:
    """Open an ODBC connection from settings and close it on exit.

    Requires the ``odbc`` extra (pyodbc).

    Example:
        with open_connection(settings) as conn:
            query = pipeline.ask("how many users are there?", conn)
    """
    if not settings.db_connection_string:
        raise ConfigurationError("Database connection string is not configured (ASKSQL_DB_CONNECTION_STRING).")

    import pyodbc

    try:
        raw = pyodbc.connect(settings.db_connection_string, timeout=int(settings.request_timeout))
    except pyodbc.Error as e:
        logger.error(f"Failed to connect to database: {e}")
        raise QueryExecutionError(f"Failed to connect to database: {e}") from e

    conn = DbApiConnection(raw)
    try:
        yield conn
    finally:
        conn.close()
