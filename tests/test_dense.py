"""
Tests for the sentence-transformers embedder (model replaced by a stub encoder).
"""

from __future__ import annotations

import numpy as np
import pytest

from src.rag import EmbeddingError, SentenceTransformerEmbedder
from src.rag.dense import DOCUMENT, QUERY


class StubModel:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.inputs: list[str] = []

    def encode(self, texts, **kwargs):
        if self.fail:
            raise RuntimeError("CUDA out of memory")
        self.inputs.extend(texts)
        return np.array([[3.0, 4.0] for _ in texts], dtype=np.float32)


def _embedder(model: StubModel) -> SentenceTransformerEmbedder:
    embedder = SentenceTransformerEmbedder(model_name="stub", query_prefix="query: ", document_prefix="passage: ")
    embedder._model = model
    return embedder


@pytest.mark.anyio
async def test_role_selects_prefix():
    model = StubModel()
    embedder = _embedder(model)

    await embedder.embed("cảnh báo học vụ", role=QUERY)
    await embedder.embed_batch(["Điều 16"], role=DOCUMENT)

    assert model.inputs == ["query: cảnh báo học vụ", "passage: Điều 16"]


@pytest.mark.anyio
async def test_vectors_are_unit_length():
    vector = await _embedder(StubModel()).embed("q")
    assert vector == pytest.approx([0.6, 0.8])


@pytest.mark.anyio
async def test_model_failure_becomes_embedding_error():
    with pytest.raises(EmbeddingError):
        await _embedder(StubModel(fail=True)).embed("q")


@pytest.mark.anyio
async def test_unknown_role_rejected():
    with pytest.raises(ValueError):
        await _embedder(StubModel()).embed("q", role="passage")


@pytest.mark.anyio
async def test_empty_batch():
    assert await _embedder(StubModel()).embed_batch([]) == []
