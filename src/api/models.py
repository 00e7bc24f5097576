"""
Request and response models for the QA API.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("Question is required")
    return value


class ChatRequest(BaseModel):
    """Request body for POST /api/chat."""

    question: str = Field(..., min_length=1, description="User question")
    user_id: Optional[str] = Field(None, description="Caller identifier, echoed back")
    include_context: bool = Field(False, description="Return the retrieved passages used as context")

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class ChatResponse(BaseModel):
    """Response for POST /api/chat."""

    user_id: Optional[str] = None
    question: str
    answer: str
    context: Optional[str] = None
    has_context: bool = False
    hit_count: int = 0
    top_score: float = 0.0
    processing_time_ms: int = 0


class ErrorResponse(BaseModel):
    """Error body for failed requests."""

    error: str
    code: str
    details: Optional[str] = None


class SearchRequest(BaseModel):
    """Request body for POST /api/search."""

    question: str = Field(..., min_length=1)
    top_k: int = Field(10, ge=1, le=50)

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class SearchHit(BaseModel):
    """Single search result with its first-stage score breakdown."""

    id: str
    table: str
    source: str
    metadata: str
    content: str
    score: float
    vec_score: float
    lex_score: float
    exact_boost: float
    meta_boost: float
    content_boost: float


class SearchResponse(BaseModel):
    """Response for POST /api/search."""

    question: str
    results: List[SearchHit] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Response for GET /health."""

    status: str = "healthy"
    timestamp: dt.datetime
    version: str
