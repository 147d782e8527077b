"""Unit tests for the Query lifecycle."""

from __future__ import annotations

import pytest

from asksql import (
    ConfigurationError,
    Query,
    QueryExecutionError,
    QueryState,
    SanitizationError,
    TargetKind,
)
from fakes import CountRecord, FakeCompletionClient, RecordingConnection, UserModel, UserRecord

RAW_SQL = "SELECT * FROM users WHERE id = 1"
UPDATE_SQL = "UPDATE users SET name = 'Test' WHERE id = 1"


class TestInit:
    """Tests for a fresh Query."""

    def test_stores_question_sql_and_target(self):
        model = UserModel()
        query = Query("who is user 1?", RAW_SQL, model)
        assert query.natural_question == "who is user 1?"
        assert query.raw_sql == RAW_SQL
        assert query.target.handle is model
        assert query.target.kind is TargetKind.TYPED
        assert query.state is QueryState.FRESH

    def test_sanitized_sql_starts_as_raw_sql(self):
        assert Query(None, RAW_SQL, UserModel()).sanitized_sql == RAW_SQL

    def test_question_is_optional(self):
        assert Query(None, RAW_SQL, RecordingConnection()).natural_question is None


class TestSanitize:
    """Tests for the SELECT-only sanitization policy."""

    def test_select_accepted_unchanged(self):
        query = Query(None, RAW_SQL, UserModel())
        query.sanitize(allow_only_select=True)
        assert query.sanitized_sql == RAW_SQL
        assert query.state is QueryState.SANITIZED

    def test_returns_self_for_chaining(self):
        query = Query(None, RAW_SQL, UserModel())
        assert query.sanitize() is query

    def test_non_select_rejected(self):
        query = Query(None, UPDATE_SQL, UserModel())
        with pytest.raises(SanitizationError, match="Only SELECT statements are allowed by default"):
            query.sanitize(allow_only_select=True)

    def test_rejection_leaves_state_unchanged(self):
        query = Query(None, UPDATE_SQL, UserModel())
        with pytest.raises(SanitizationError):
            query.sanitize()
        assert query.state is QueryState.FRESH
        assert query.sanitized_sql == UPDATE_SQL

    def test_non_select_allowed_when_policy_relaxed(self):
        query = Query(None, UPDATE_SQL, UserModel())
        query.sanitize(allow_only_select=False)
        assert query.sanitized_sql == UPDATE_SQL

    def test_restores_cleared_sanitized_sql_from_raw(self):
        query = Query(None, RAW_SQL, UserModel())
        query.sanitized_sql = None
        query.sanitize()
        assert query.sanitized_sql == RAW_SQL

    @pytest.mark.parametrize(
        "sql,accepted",
        [
            ("SELECT 1", True),
            ("select 1", True),
            ("   SeLeCt * FROM users", True),
            ("\n\tselect id from users", True),
            ("selection", True),
            ("", False),
            ("   ", False),
            ("INSERT INTO users VALUES (1)", False),
            ("DELETE FROM users", False),
            ("WITH x AS (SELECT 1) SELECT * FROM x", False),
            ("-- comment\nSELECT 1", False),
            ("(SELECT 1)", False),
        ],
    )
    def test_accepts_iff_trimmed_lowercase_starts_with_select(self, sql, accepted):
        query = Query(None, sql, RecordingConnection())
        if accepted:
            assert query.sanitize() is query
        else:
            with pytest.raises(SanitizationError):
                query.sanitize()


class TestExecute:
    """Tests for execution and dispatch."""

    def test_requires_sanitized_sql(self):
        model = UserModel()
        query = Query(None, RAW_SQL, model)
        query.sanitized_sql = None
        with pytest.raises(QueryExecutionError) as excinfo:
            query.execute()
        assert str(excinfo.value) == "Cannot execute raw SQL. Call sanitize() first or work with sanitized_sql."
        assert model.executed == []

    def test_executes_after_sanitize(self):
        model = UserModel()
        query = Query(None, RAW_SQL, model).sanitize()
        results = query.execute()
        assert model.executed == [RAW_SQL]
        assert isinstance(results[0], UserRecord)
        assert query.state is QueryState.EXECUTED

    def test_typed_accessor_count_unwrapped(self):
        model = UserModel(records=[CountRecord(5)])
        assert Query(None, "SELECT COUNT(*) AS count FROM users", model).sanitize().execute() == 5

    def test_generic_select_uses_select_rows(self):
        conn = RecordingConnection()
        results = Query(None, RAW_SQL, conn).sanitize().execute()
        assert conn.calls == [("select_rows", RAW_SQL)]
        assert results == [{"id": 1, "name": "Test Result"}]

    def test_generic_non_select_uses_execute(self):
        conn = RecordingConnection(execute_result=1)
        result = Query(None, UPDATE_SQL, conn).sanitize(allow_only_select=False).execute()
        assert conn.calls == [("execute", UPDATE_SQL)]
        assert result == 1

    def test_generic_count_unwrapped(self):
        conn = RecordingConnection(rows=[{"count": 5}])
        assert Query(None, "SELECT COUNT(*) AS count FROM users", conn).sanitize().execute() == 5

    @pytest.mark.parametrize(
        "rows",
        [
            [{"count": 5}, {"count": 7}],
            [{"count": 5, "name": "Ada"}],
            [{"total": 5}],
            [],
        ],
    )
    def test_other_shapes_not_collapsed(self, rows):
        conn = RecordingConnection(rows=rows)
        assert Query(None, "SELECT 1", conn).sanitize().execute() == rows

    def test_database_error_wrapped(self):
        model = UserModel(error=RuntimeError("Database error"))
        query = Query(None, RAW_SQL, model).sanitize()
        with pytest.raises(QueryExecutionError) as excinfo:
            query.execute()
        assert str(excinfo.value) == "Failed to execute SQL query: Database error"
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_generic_error_wrapped(self):
        conn = RecordingConnection(error=ValueError("no such table: users"))
        with pytest.raises(QueryExecutionError, match="^Failed to execute SQL query: no such table: users$"):
            Query(None, RAW_SQL, conn).sanitize().execute()

    def test_target_without_operations_wrapped(self):
        """Should wrap the failure when the target supports neither path."""
        with pytest.raises(QueryExecutionError, match="^Failed to execute SQL query: "):
            Query(None, RAW_SQL, object()).sanitize().execute()

    def test_executes_unsanitized_fresh_query(self):
        """A fresh query still carries sanitized_sql, so the guard does not fire."""
        conn = RecordingConnection()
        Query(None, RAW_SQL, conn).execute()
        assert conn.calls == [("select_rows", RAW_SQL)]


class TestAnswer:
    """Tests for answer composition."""

    def test_answer_sends_result_repr(self):
        client = FakeCompletionClient("The user is called Test Result.")
        query = Query("What is the user's name?", RAW_SQL, RecordingConnection(), client).sanitize()

        assert query.answer() == "The user is called Test Result."
        prompt = client.prompts[0]
        assert "[{'id': 1, 'name': 'Test Result'}]" in prompt
        assert RAW_SQL in prompt
        assert '"What is the user\'s name?"' in prompt
        assert query.state is QueryState.ANSWERED

    def test_answer_with_scalar_result(self):
        client = FakeCompletionClient("There are 5 users.")
        query = Query("How many users?", "SELECT COUNT(*) AS count FROM users",
                      RecordingConnection(rows=[{"count": 5}]), client).sanitize()
        assert query.answer() == "There are 5 users."
        assert "the database returned:\n5\n" in client.prompts[0]

    def test_answer_uses_str_when_repr_fails(self):
        class Opaque:
            def __repr__(self):
                raise TypeError("no repr")

            def __str__(self):
                return "opaque result"

        model = UserModel(records=Opaque())
        client = FakeCompletionClient("ok")
        Query("q", RAW_SQL, model, client).sanitize().answer()
        assert "the database returned:\nopaque result\n" in client.prompts[0]

    def test_execute_errors_propagate_unchanged(self):
        client = FakeCompletionClient("unused")
        model = UserModel(error=RuntimeError("fail"))
        query = Query("q", RAW_SQL, model, client).sanitize()
        with pytest.raises(QueryExecutionError) as excinfo:
            query.answer()
        assert str(excinfo.value) == "Failed to execute SQL query: fail"
        assert client.prompts == []

    def test_use_before_sanitize_error_propagates(self):
        query = Query("q", RAW_SQL, UserModel(), FakeCompletionClient("unused"))
        query.sanitized_sql = None
        with pytest.raises(QueryExecutionError, match="Cannot execute raw SQL"):
            query.answer()

    def test_answer_requires_client(self):
        with pytest.raises(ConfigurationError, match="completion client is required"):
            Query("q", RAW_SQL, UserModel()).sanitize().answer()


class TestStr:
    """Tests for the string form."""

    def test_raw_sql_before_sanitize(self):
        assert str(Query(None, RAW_SQL, UserModel())) == RAW_SQL

    def test_sanitized_sql_after_sanitize(self):
        assert str(Query(None, RAW_SQL, UserModel()).sanitize()) == RAW_SQL

    def test_prefers_sanitized_sql(self):
        query = Query(None, RAW_SQL, UserModel())
        query.sanitized_sql = "SELECT id FROM users"
        assert str(query) == "SELECT id FROM users"

    def test_falls_back_to_raw_sql(self):
        query = Query(None, RAW_SQL, UserModel())
        query.sanitized_sql = None
        assert str(query) == RAW_SQL

    def test_repr_mentions_state(self):
        assert repr(Query(None, RAW_SQL, UserModel())) == f"<Query state=fresh sql={RAW_SQL!r}>"
