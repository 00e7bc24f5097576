"""
Build the QA agent and searcher for the API (used in lifespan).
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from src.generation import AnswerGenerator, GenerationConfig
from src.llm import create_client
from src.orchestrator import QAAgent
from src.rag import (
    HybridSearcher,
    InMemoryPassageStore,
    PassageStore,
    RAGConfig,
    SentenceTransformerEmbedder,
    load_passages,
)
from src.rag.config import DB_TABLE, DOC_TABLE
from src.settings import env_str

logger = logging.getLogger(__name__)

STORE_PG = "pg"
STORE_MEMORY = "memory"


async def build_memory_store(config: RAGConfig, embedder: SentenceTransformerEmbedder) -> InMemoryPassageStore:
    """Load the JSONL corpus into an in-memory store, embedding passages that lack a vector."""
    store = InMemoryPassageStore(config)
    passages = load_passages()
    missing = [p for p in passages if p.embedding is None]
    if missing:
        logger.info("Embedding %d passages without stored vectors", len(missing))
        vectors = await embedder.embed_batch([p.content for p in missing])
        by_id = {p.id: v for p, v in zip(missing, vectors)}
        passages = [p if p.embedding is not None else p.with_embedding(by_id[p.id]) for p in passages]
    doc_rows = [p for p in passages if not p.metadata.is_database()]
    db_rows = [p for p in passages if p.metadata.is_database()]
    await store.upsert(DOC_TABLE, doc_rows)
    await store.upsert(DB_TABLE, db_rows)
    return store


def build_pg_store(config: RAGConfig) -> PassageStore:
    from src.rag.pg_store import PgVectorPassageStore

    return PgVectorPassageStore(config=config)


async def build_agent() -> Tuple[Optional[QAAgent], Optional[HybridSearcher]]:
    """
    Build store, embedder, HybridSearcher, LLM client, generator and agent.

    Returns (agent, searcher). The agent is None when no LLM key is configured;
    the searcher alone still serves /api/search.
    """
    config = RAGConfig.from_env()
    embedder = SentenceTransformerEmbedder()
    backend = env_str("RAG_STORE", STORE_PG)
    if backend == STORE_MEMORY:
        store: PassageStore = await build_memory_store(config, embedder)
    else:
        store = build_pg_store(config)
    searcher = HybridSearcher(store=store, embedder=embedder, config=config)

    try:
        client = create_client()
    except ValueError as e:
        logger.warning("LLM client not configured, chat disabled: %s", e)
        return None, searcher
    generator = AnswerGenerator(client, GenerationConfig.from_env())
    agent = QAAgent(retriever=searcher, generator=generator, config=generator.config)
    return agent, searcher
