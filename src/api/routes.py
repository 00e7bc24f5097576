"""
API routes: health, chat, search.
"""

from __future__ import annotations

import datetime as dt
import time
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.rag.errors import EmbeddingError, RetrievalError

from .models import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    SearchHit,
    SearchRequest,
    SearchResponse,
)

API_VERSION = "1.0.0"

health_router = APIRouter(tags=["system"])
router = APIRouter(prefix="/api", tags=["api"])


def _get_state(request: Request) -> tuple[Any, Any]:
    agent = getattr(request.app.state, "agent", None)
    searcher = getattr(request.app.state, "searcher", None)
    return agent, searcher


def _error(status_code: int, error: str, code: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, code=code, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@health_router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check."""
    return HealthResponse(
        status="healthy",
        timestamp=dt.datetime.now(dt.timezone.utc),
        version=API_VERSION,
    )


@router.post("/chat", response_model=ChatResponse)
async def chat(request: Request, body: ChatRequest) -> ChatResponse | JSONResponse:
    """Answer a question from the regulation corpus (or general knowledge when nothing matches)."""
    agent, _ = _get_state(request)
    if agent is None:
        return _error(503, "Service unavailable: agent not initialized.", "SERVICE_UNAVAILABLE")

    started = time.perf_counter()
    result = await agent.answer(body.question, show_context=body.include_context)
    elapsed_ms = int((time.perf_counter() - started) * 1000)

    if result.error:
        return _error(500, "Failed to process question", "PROCESSING_ERROR", result.error)

    return ChatResponse(
        user_id=body.user_id,
        question=body.question,
        answer=result.answer,
        context=result.context if body.include_context else None,
        has_context=result.has_context,
        hit_count=result.hit_count,
        top_score=result.top_score,
        processing_time_ms=elapsed_ms,
    )


@router.post("/search", response_model=SearchResponse)
async def search_endpoint(request: Request, body: SearchRequest) -> SearchResponse | JSONResponse:
    """Direct hybrid search (no generation), with per-hit score breakdown."""
    _, searcher = _get_state(request)
    if searcher is None:
        return _error(503, "Service unavailable: searcher not initialized.", "SERVICE_UNAVAILABLE")
    try:
        hits = await searcher.search(body.question, body.top_k)
    except (EmbeddingError, RetrievalError) as e:
        return _error(500, "Search failed", "PROCESSING_ERROR", str(e))

    results = [
        SearchHit(
            id=h.id,
            table=h.table,
            source=h.metadata.source_name(),
            metadata=h.metadata.serialize(),
            content=h.content,
            score=h.score,
            vec_score=h.vec_score,
            lex_score=h.lex_score,
            exact_boost=h.exact_boost,
            meta_boost=h.meta_boost,
            content_boost=h.content_boost,
        )
        for h in hits
    ]
    return SearchResponse(question=body.question, results=results)
