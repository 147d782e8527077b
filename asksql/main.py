"""HTTP surface for the question -> SQL -> answer pipeline.

Run with: ``uvicorn asksql.main:create_app --factory``
"""

from __future__ import annotations

from contextlib import AbstractContextManager
import logging
from typing import Any, Callable, NoReturn, Optional

from fastapi import FastAPI, HTTPException

from .core import (
    ApiError,
    AskRequest,
    AskResponse,
    AskSqlError,
    ConfigurationError,
    ErrorDetail,
    QueryExecutionError,
    QueryGenerationError,
    SanitizationError,
    get_settings,
    open_connection,
)
from .llm import compose_answer
from .pipeline import AskPipeline

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[], AbstractContextManager]

# Status code and error code per failure kind
ERROR_RESPONSES: dict[type, tuple[int, str]] = {
    SanitizationError: (400, "sanitization_error"),
    QueryGenerationError: (422, "generation_error"),
    ApiError: (502, "llm_error"),
    QueryExecutionError: (500, "database_error"),
    ConfigurationError: (500, "configuration_error"),
}


def raise_error(status_code: int, error_code: str, message: str, details: dict | None = None) -> NoReturn:
    """Raise HTTPException with structured error detail."""
    raise HTTPException(
        status_code=status_code,
        detail=ErrorDetail(error_code=error_code, message=message, details=details).model_dump()
    )


def _raise_for(exc: AskSqlError) -> NoReturn:
    for error_type, (status_code, error_code) in ERROR_RESPONSES.items():
        if isinstance(exc, error_type):
            raise_error(status_code, error_code, str(exc))
    raise_error(500, "internal_error", str(exc))


def create_app(
    pipeline: Optional[AskPipeline] = None,
    connection_factory: Optional[ConnectionFactory] = None,
) -> FastAPI:
    """Build the app. Defaults come from ASKSQL_* settings and an ODBC connection."""
    if pipeline is None:
        pipeline = AskPipeline(get_settings())
    if connection_factory is None:
        def connection_factory() -> AbstractContextManager:
            return open_connection(pipeline.settings)

    app = FastAPI(title="AskSQL", version="0.1.0")

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/ask", response_model=AskResponse)
    def ask(request: AskRequest) -> AskResponse:
        """
        Answer a natural-language question from the database.

        - **question**: The question (any language)
        - **table_name**: Restrict generation to one table
        - **answer**: Compose a natural-language answer (default true)
        - **allow_only_select**: Reject non-SELECT SQL before execution (default true)
        """
        question = request.question.strip()
        if not question:
            raise_error(400, "empty_question", "Field 'question' must not be blank")

        logger.info(f"Ask request: {question[:100]} (table={request.table_name})")

        answer: Optional[str] = None
        try:
            with connection_factory() as target:
                query = pipeline.ask(question, target, table_name=request.table_name)
                query.sanitize(allow_only_select=request.allow_only_select)
                result: Any = query.execute()
            # Not query.answer(): that re-executes, and the connection is closed here.
            # Keep in step with Query.answer().
            if request.answer:
                answer = compose_answer(pipeline.client, question, str(query), result)
        except AskSqlError as exc:
            logger.error(f"Ask request failed: {exc}")
            _raise_for(exc)

        return AskResponse(question=question, sql=str(query), result=result, answer=answer)

    return app
