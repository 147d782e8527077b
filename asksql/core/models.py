from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class AskRequest(BaseModel):
    question: str = Field(..., min_length=1, max_length=2000)
    table_name: Optional[str] = None
    answer: bool = True
    allow_only_select: bool = True


class AskResponse(BaseModel):
    question: str
    sql: str
    result: Any = None
    answer: Optional[str] = None


class ErrorDetail(BaseModel):
    error_code: str
    message: str
    details: dict[str, Any] | None = None
