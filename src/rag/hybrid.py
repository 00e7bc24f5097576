"""
Hybrid searcher: query expansion, one blended store query per table,
rule-based re-ranking, and concurrent fan-out over the passage tables.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .config import FANOUT_DROP, RAGConfig
from .dense import QUERY, Embedder, normalize
from .errors import EmbeddingError, RetrievalError
from .merge import merge_hits
from .query_rewriter import QueryExpander
from .reranker import RuleBasedReranker
from .retriever import Hit
from .store import PassageStore

logger = logging.getLogger(__name__)


@dataclass
class HybridSearcher:
    """Implements the Retriever protocol over a PassageStore and an Embedder."""

    store: PassageStore
    embedder: Embedder
    config: RAGConfig = field(default_factory=RAGConfig)
    expander: QueryExpander | None = None
    reranker: RuleBasedReranker | None = None

    def __post_init__(self) -> None:
        if self.expander is None and self.config.use_query_expansion:
            self.expander = QueryExpander()
        if self.reranker is None and self.config.use_reranker:
            self.reranker = RuleBasedReranker(config=self.config)

    def expand(self, question: str) -> str:
        if self.expander is None:
            return question
        return self.expander.expand(question)

    async def embed_question(self, question: str) -> List[float]:
        """Unit-length query embedding under the configured timeout; failures become EmbeddingError."""
        try:
            vector = await asyncio.wait_for(
                self.embedder.embed(question, role=QUERY),
                timeout=self.config.embed_timeout,
            )
        except asyncio.TimeoutError as exc:
            raise EmbeddingError(f"embedding timed out after {self.config.embed_timeout}s") from exc
        except EmbeddingError:
            raise
        except Exception as exc:
            raise EmbeddingError(f"embedding failed: {exc}") from exc
        if vector is None or len(vector) == 0:
            raise EmbeddingError("embedding service returned an empty vector")
        return normalize(vector)

    async def retrieve(
        self,
        question: str,
        question_vector: Sequence[float],
        k: int,
        table: str,
    ) -> List[Hit]:
        """
        First-stage candidates for one table.

        Returns at most ``2 * k`` hits by blended score (over-fetch for the
        re-ranker). An empty list means nothing passed the relevance filter.
        """
        expanded = self.expand(question)
        return await self.store.search(table, question, expanded, question_vector, k)

    async def _search_table(self, table: str, question: str, vector: Sequence[float], k: int) -> List[Hit]:
        started = time.perf_counter()
        candidates = await self.retrieve(question, vector, k, table)
        if self.reranker is not None:
            candidates = self.reranker.rerank(candidates, question)
        hits = candidates[:k]
        logger.info(
            "Table %s: %d hits (%.1f ms)", table, len(hits), (time.perf_counter() - started) * 1000
        )
        return hits

    async def _guarded(self, table: str, question: str, vector: Sequence[float], k: int) -> List[Hit]:
        try:
            return await asyncio.wait_for(
                self._search_table(table, question, vector, k),
                timeout=self.config.store_timeout,
            )
        except asyncio.TimeoutError as exc:
            raise RetrievalError(
                f"search on {table} timed out after {self.config.store_timeout}s", table=table
            ) from exc

    async def search(
        self,
        question: str,
        top_k: int | None = None,
        *,
        tables: Sequence[str] | None = None,
    ) -> List[Hit]:
        """
        Search every passage table concurrently and merge.

        Each table branch is re-ranked and cut to ``table_k`` before the merge;
        the merged list is globally sorted and cut to ``top_k``.

        Raises:
            EmbeddingError: the question could not be embedded
            RetrievalError: a table branch failed under the "fail" policy, or
                every branch failed under the "drop" policy
        """
        if top_k is None:
            top_k = self.config.top_k
        if tables is None:
            tables = self.config.tables
        if not question.strip() or not tables:
            return []

        vector = await self.embed_question(question)
        k = self.config.table_k

        outcomes = await asyncio.gather(
            *(self._guarded(t, question, vector, k) for t in tables),
            return_exceptions=True,
        )

        hit_lists: List[List[Hit]] = []
        failures: List[Tuple[str, BaseException]] = []
        for table, outcome in zip(tables, outcomes):
            if isinstance(outcome, RetrievalError):
                failures.append((table, outcome))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                hit_lists.append(outcome)

        if failures:
            self._apply_fanout_policy(failures, len(tables))

        merged = merge_hits(hit_lists, top_k)
        logger.info("Search returned %d hits from %d table(s)", len(merged), len(hit_lists))
        return merged

    def _apply_fanout_policy(self, failures: List[Tuple[str, BaseException]], n_tables: int) -> None:
        table, first = failures[0]
        if self.config.fanout_policy != FANOUT_DROP:
            raise first
        if len(failures) == n_tables:
            raise RetrievalError(f"all {n_tables} table searches failed; first: {first}", table=table) from first
        for t, exc in failures:
            logger.warning("Dropping table %s from results: %s", t, exc)
