"""
Shared fixtures: deterministic embedder and a small regulation corpus.
"""

from __future__ import annotations

import zlib
from typing import List

import numpy as np
import pytest

from src.rag import Passage
from src.rag.dense import QUERY
from src.rag.utils import iter_tokens

EMBED_DIM = 4096


class HashingEmbedder:
    """Bag-of-words vectors: each token hashed (crc32) into one dimension, then L2-normalized."""

    def __init__(self, dim: int = EMBED_DIM):
        self.dim = dim
        self.calls: List[tuple[str, str]] = []

    def vector(self, text: str) -> List[float]:
        vec = np.zeros(self.dim, dtype=np.float32)
        for tok in set(iter_tokens(text)):
            vec[zlib.crc32(tok.encode("utf-8")) % self.dim] += 1.0
        norm = float(np.linalg.norm(vec))
        if norm:
            vec /= norm
        return vec.tolist()

    async def embed(self, text: str, role: str = QUERY) -> List[float]:
        self.calls.append((text, role))
        return self.vector(text)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def embedder() -> HashingEmbedder:
    return HashingEmbedder()


@pytest.fixture
def warning_passages(embedder: HashingEmbedder) -> List[Passage]:
    """Two regulation articles: academic warning (Điều 16) and thesis (Điều 31)."""
    raw = [
        ("docx::quyche.docx::16", "Điều 16. Cảnh báo học vụ khi ĐTBHK dưới 0.8", "doc:quyche;section:Điều 16"),
        ("docx::quyche.docx::31", "Điều 31. Khóa luận tốt nghiệp", "doc:quyche;section:Điều 31"),
    ]
    return [Passage(id=i, content=c, metadata=m, embedding=embedder.vector(c)) for i, c, m in raw]


@pytest.fixture
def regulation_passages(embedder: HashingEmbedder) -> List[Passage]:
    """A slightly larger document corpus for fan-out and ordering tests."""
    raw = [
        (
            "docx::quyche.docx::14",
            "Điều 14. Đăng ký học tập: mỗi học kỳ sinh viên đăng ký số tín chỉ tối thiểu 14 và tối đa 24 tín chỉ.",
            "doc:quyche;title:Quy chế đào tạo;section:Điều 14 - Đăng ký học tập",
        ),
        (
            "docx::quyche.docx::16",
            "Điều 16. Cảnh báo học vụ khi ĐTBHK dưới 0.8 hoặc ĐTBCTL dưới 1.0.",
            "doc:quyche;title:Quy chế đào tạo;section:Điều 16 - Xử lý học vụ",
        ),
        (
            "docx::quyche.docx::31",
            "Điều 31. Khóa luận tốt nghiệp: sinh viên không nợ quá 20 tín chỉ được đăng ký KLTN.",
            "doc:quyche;title:Quy chế đào tạo;section:Điều 31",
        ),
        (
            "pdf::ngoaingu.pdf::2",
            "Chuẩn đầu ra ngoại ngữ: TOEIC 450 hoặc IELTS 5.0, chứng chỉ có thời hạn 2 năm.",
            "doc:ngoaingu;title:Quy định ngoại ngữ;section:Điều 8",
        ),
    ]
    return [Passage(id=i, content=c, metadata=m, embedding=embedder.vector(c)) for i, c, m in raw]


@pytest.fixture
def database_passages(embedder: HashingEmbedder) -> List[Passage]:
    content = "Bảng lịch thi cuối kỳ: mã môn học, ngày thi, phòng thi của sinh viên."
    p = Passage.for_table("public", "lich_thi", content)
    return [p.with_embedding(embedder.vector(content))]
