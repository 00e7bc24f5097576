"""
Dense embeddings using sentence-transformers.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, List, Protocol, Sequence

import numpy as np
from sentence_transformers import SentenceTransformer

from src.settings import env_str

from .errors import EmbeddingError

logger = logging.getLogger(__name__)

QUERY = "query"
DOCUMENT = "document"
ROLES = (QUERY, DOCUMENT)

EMBEDDING_MODEL = env_str("EMBEDDING_MODEL", "intfloat/multilingual-e5-base")


class Embedder(Protocol):
    """Maps text to a fixed-length, L2-normalized vector."""

    async def embed(self, text: str, role: str = QUERY) -> List[float]:
        ...


def normalize(vector: Sequence[float]) -> List[float]:
    """
    L2-normalize a vector.

    Raises:
        EmbeddingError: the vector is empty, all zeros, or holds NaN/inf
    """
    arr = np.asarray(vector, dtype=np.float32)
    if arr.size == 0 or not np.all(np.isfinite(arr)):
        raise EmbeddingError("embedding must be a non-empty vector of finite values")
    norm = float(np.linalg.norm(arr))
    if norm == 0.0:
        raise EmbeddingError("zero vector cannot be normalized")
    return (arr / norm).tolist()


def _check_role(role: str) -> None:
    if role not in ROLES:
        raise ValueError(f"role must be one of {ROLES}, got {role!r}")


@dataclass
class SentenceTransformerEmbedder:
    """
    Local sentence-transformers model.

    E5-family models expect ``query: `` / ``passage: `` prefixes; the role
    passed by the caller selects which one is prepended.
    """

    model_name: str = EMBEDDING_MODEL
    query_prefix: str = field(default_factory=lambda: env_str("EMBEDDING_QUERY_PREFIX", "query: "))
    document_prefix: str = field(default_factory=lambda: env_str("EMBEDDING_DOCUMENT_PREFIX", "passage: "))
    batch_size: int = 32
    _model: Any = field(default=None, init=False, repr=False)

    @property
    def model(self):
        if self._model is None:
            logger.info("Loading embedding model %s", self.model_name)
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def _prefix(self, role: str) -> str:
        return self.query_prefix if role == QUERY else self.document_prefix

    def _encode(self, texts: List[str]) -> np.ndarray:
        return self.model.encode(
            texts,
            batch_size=self.batch_size,
            convert_to_numpy=True,
            normalize_embeddings=True,
            show_progress_bar=False,
        )

    async def embed(self, text: str, role: str = QUERY) -> List[float]:
        vectors = await self.embed_batch([text], role=role)
        return vectors[0]

    async def embed_batch(self, texts: Sequence[str], role: str = DOCUMENT) -> List[List[float]]:
        """Embed several texts in one model call (ingestion path)."""
        _check_role(role)
        if not texts:
            return []
        prefix = self._prefix(role)
        inputs = [prefix + t for t in texts]
        try:
            emb = await asyncio.to_thread(self._encode, inputs)
        except Exception as exc:
            raise EmbeddingError(f"embedding model {self.model_name} failed: {exc}") from exc
        if emb is None or len(emb) != len(inputs):
            raise EmbeddingError(f"embedding model {self.model_name} returned a malformed batch")
        return [normalize(v) for v in emb]
