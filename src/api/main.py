"""
FastAPI application for the regulation QA API.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .deps import build_agent
from .routes import API_VERSION, health_router, router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build searcher and agent on startup; clear on shutdown."""
    agent, searcher = await build_agent()
    app.state.agent = agent
    app.state.searcher = searcher
    logger.info("QA API ready (chat %s)", "enabled" if agent is not None else "disabled")
    yield
    app.state.agent = None
    app.state.searcher = None


app = FastAPI(
    title="Quy chế QA API",
    description="Hybrid-retrieval Q&A over academic regulations and database records",
    version=API_VERSION,
    lifespan=lifespan,
)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
app.include_router(health_router)
app.include_router(router)
