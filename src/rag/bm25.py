"""
BM25 lexical index over passages, used by the in-memory store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from rank_bm25 import BM25Okapi

from .index import Passage
from .utils import iter_tokens


def normalize_rank(score: float) -> float:
    """Map a non-negative rank to [0, 1) as s / (s + 1), like ts_rank_cd normalization 32."""
    if score <= 0:
        return 0.0
    return score / (score + 1.0)


@dataclass
class BM25Index:
    """BM25 sparse retrieval index."""

    bm25: BM25Okapi | None
    passages: List[Passage]

    @classmethod
    def from_passages(cls, passages: Sequence[Passage]) -> "BM25Index":
        """Build BM25 index from passages."""
        passages = list(passages)
        tokenized_docs = [list(iter_tokens(p.content)) for p in passages]
        # BM25Okapi divides by the average document length.
        if not tokenized_docs or not any(tokenized_docs):
            return cls(bm25=None, passages=passages)
        bm25 = BM25Okapi(tokenized_docs)
        return cls(bm25=bm25, passages=passages)

    def scores(self, query: str) -> List[float]:
        """Normalized lexical score of every passage for ``query``, in index order."""
        if self.bm25 is None:
            return [0.0] * len(self.passages)
        query_tokens = list(iter_tokens(query))
        if not query_tokens:
            return [0.0] * len(self.passages)
        raw = self.bm25.get_scores(query_tokens)
        return [normalize_rank(float(s)) for s in raw]
