from __future__ import annotations

import sqlite3

import httpx
import pytest

from asksql import CompletionClient, DbApiConnection, Settings
from fakes import USERS_SCHEMA, ScriptedProvider


@pytest.fixture
def settings() -> Settings:
    return Settings(llm_api_key="test-key")


@pytest.fixture
def make_client(settings):
    """Factory: CompletionClient wired to a ScriptedProvider."""

    def _make(*replies, client_settings: Settings | None = None):
        provider = ScriptedProvider(*replies)
        http = httpx.Client(transport=httpx.MockTransport(provider))
        return CompletionClient(client_settings or settings, http_client=http), provider

    return _make


@pytest.fixture
def schema_root(tmp_path):
    """Project root holding db/schema.sql with the users table."""
    (tmp_path / "db").mkdir()
    (tmp_path / "db" / "schema.sql").write_text(USERS_SCHEMA, encoding="utf-8")
    return tmp_path


@pytest.fixture
def sqlite_connection():
    raw = sqlite3.connect(":memory:", check_same_thread=False)
    raw.execute("CREATE TABLE users (id INTEGER, name VARCHAR(255))")
    raw.executemany("INSERT INTO users (id, name) VALUES (?, ?)", [(1, "Ada"), (2, "Grace"), (3, "Linus")])
    raw.commit()
    conn = DbApiConnection(raw)
    yield conn
    conn.close()
