"""
In-process passage store with the same scoring as the PostgreSQL store.

Vector similarity is a numpy dot product over normalized embeddings, lexical
relevance comes from BM25 (rank_bm25) normalized to [0, 1), and the boost
tables, blend and filter are shared with the SQL backend through ``scoring``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np

from .bm25 import BM25Index
from .config import RAGConfig
from .dense import normalize
from .errors import RetrievalError
from .index import Passage, last_by_id
from .retriever import Hit
from .scoring import passes_filter, score_candidate

logger = logging.getLogger(__name__)


@dataclass
class _Table:
    passages: Dict[str, Passage] = field(default_factory=dict)
    bm25: BM25Index | None = None

    def lexical_index(self) -> BM25Index:
        if self.bm25 is None:
            self.bm25 = BM25Index.from_passages(list(self.passages.values()))
        return self.bm25

    def invalidate(self) -> None:
        self.bm25 = None


class InMemoryPassageStore:
    """PassageStore over Python dicts; used by tests, the debug script and offline corpora."""

    def __init__(self, config: RAGConfig | None = None, tables: Sequence[str] | None = None):
        self.config = config or RAGConfig()
        names = tables if tables is not None else self.config.tables
        self._tables: Dict[str, _Table] = {name: _Table() for name in names}

    def _table(self, table: str) -> _Table:
        try:
            return self._tables[table]
        except KeyError:
            raise RetrievalError(f"unknown passage table {table!r}", table=table) from None

    async def upsert(self, table: str, passages: Sequence[Passage]) -> int:
        # A bad vector anywhere in the batch leaves the table untouched.
        records = [
            Passage(
                id=p.id,
                content=p.content,
                metadata=p.metadata,
                embedding=normalize(p.embedding) if p.embedding is not None else None,
            )
            for p in last_by_id(passages)
        ]
        t = self._tables.setdefault(table, _Table())
        for p in records:
            # Whole-record replacement; an existing id keeps its position.
            t.passages[p.id] = p
        t.invalidate()
        return len(records)

    async def clear(self, table: str) -> None:
        t = self._table(table)
        t.passages.clear()
        t.invalidate()

    async def count(self, table: str) -> int:
        return len(self._table(table).passages)

    async def get(self, table: str, passage_id: str) -> Passage | None:
        return self._table(table).passages.get(passage_id)

    def _vector_scores(self, passages: List[Passage], query_vector: Sequence[float], table: str) -> List[float]:
        q = np.asarray(normalize(query_vector), dtype=np.float32)
        scores: List[float] = []
        for p in passages:
            if p.embedding is None:
                scores.append(0.0)
                continue
            emb = np.asarray(p.embedding, dtype=np.float32)
            if emb.shape != q.shape:
                raise RetrievalError(
                    f"query vector has dimension {q.shape[0]}, passage {p.id} has {emb.shape[0]}",
                    table=table,
                )
            scores.append(float(np.dot(emb, q)))
        return scores

    async def search(
        self,
        table: str,
        raw_question: str,
        expanded_question: str,
        query_vector: Sequence[float],
        k: int,
    ) -> List[Hit]:
        if k < 1:
            raise ValueError("k must be >= 1")
        t = self._table(table)
        passages = list(t.passages.values())
        if not passages:
            return []

        vec_scores = self._vector_scores(passages, query_vector, table)
        lex_scores = t.lexical_index().scores(expanded_question)

        hits: List[Hit] = []
        for p, vec, lex in zip(passages, vec_scores, lex_scores):
            b = score_candidate(
                raw_question, p.content, p.metadata.serialize(), vec, lex, self.config,
            )
            if not passes_filter(b, self.config):
                continue
            hits.append(
                Hit(
                    id=p.id,
                    content=p.content,
                    metadata=p.metadata,
                    score=b.final(self.config),
                    vec_score=b.vec_score,
                    lex_score=b.lex_score,
                    exact_boost=b.exact_boost,
                    meta_boost=b.meta_boost,
                    content_boost=b.content_boost,
                    table=table,
                )
            )

        hits.sort(key=lambda h: h.score, reverse=True)
        logger.debug("memory store %s: %d/%d candidates passed the filter", table, len(hits), len(passages))
        return hits[: 2 * k]
