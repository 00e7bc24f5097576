"""
Unified retriever interface for RAG pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol

from .metadata import PassageMetadata


@dataclass(frozen=True)
class Hit:
    """
    A scored passage for one question.

    ``score`` is only comparable within a single question's result set. The
    component scores are kept from the first-stage query for diagnostics.
    """

    id: str
    content: str
    metadata: PassageMetadata = field(default_factory=PassageMetadata)
    score: float = 0.0
    vec_score: float = 0.0
    lex_score: float = 0.0
    exact_boost: float = 0.0
    meta_boost: float = 0.0
    content_boost: float = 0.0
    table: str = ""


class Retriever(Protocol):
    """Protocol for retrieval implementations."""

    async def search(self, question: str, top_k: int | None = None) -> List[Hit]:
        """
        Search for passages answering the question.

        Args:
            question: Raw user question
            top_k: Number of results to return

        Returns:
            Hits sorted by score (descending); empty when nothing is relevant.
        """
        ...
