"""
Passage store interface shared by the PostgreSQL and in-memory backends.
"""

from __future__ import annotations

from typing import List, Protocol, Sequence

from .index import Passage
from .retriever import Hit


class PassageStore(Protocol):
    """
    A set of named passage tables with vector, lexical and substring search.

    ``search`` runs one combined scoring pass per call and returns at most
    ``2 * k`` hits ordered by blended score; an empty list is a valid result.
    Backend failures are raised as ``RetrievalError``; embeddings that cannot be
    normalized (zero, NaN/inf) are rejected with ``EmbeddingError``. Timeouts are
    owned by the caller (``HybridSearcher``).
    """

    async def search(
        self,
        table: str,
        raw_question: str,
        expanded_question: str,
        query_vector: Sequence[float],
        k: int,
    ) -> List[Hit]:
        ...

    async def upsert(self, table: str, passages: Sequence[Passage]) -> int:
        """Insert or fully replace passages by id (last occurrence of an id wins); returns the number written."""
        ...

    async def clear(self, table: str) -> None:
        ...

    async def count(self, table: str) -> int:
        ...
