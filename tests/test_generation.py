"""
Tests for RAG answer generation (context assembly, generator prompts).
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from src.generation import (
    GENERAL_SYSTEM_PROMPT,
    RAG_SYSTEM_PROMPT,
    AnswerGenerator,
    GenerationConfig,
    assemble,
    group_by_source,
    render_flat_context,
    trim_for_prompt,
)
from src.rag import Hit, PassageMetadata


def _hit(pid: str, content: str, score: float, metadata: str = "") -> Hit:
    return Hit(id=pid, content=content, metadata=PassageMetadata.parse(metadata), score=score)


@pytest.fixture
def sample_hits() -> list[Hit]:
    """Two regulation passages, one database passage, one without metadata."""
    return [
        _hit("h2", "Sinh viên bị cảnh báo học vụ lần hai.", 0.5, "doc:quyche;title:Quy chế đào tạo"),
        _hit("h3", "Bảng lịch thi: mã môn, ngày thi.", 0.7, "table:lich_thi;schema:public"),
        _hit("h1", "Điều 16. Cảnh báo học vụ khi ĐTBHK dưới 0.8.", 0.9, "doc:quyche;title:Quy chế đào tạo"),
        _hit("h4", "Đoạn văn không rõ nguồn.", 0.3),
    ]


def test_trim_for_prompt():
    assert trim_for_prompt("abc", 3) == "abc"
    assert trim_for_prompt("abcd", 3) == "abc …"


def test_assemble_empty_returns_empty():
    """No hits yields an empty context string."""
    assert assemble([]) == ""


def test_groups_ordered_by_best_score(sample_hits: list[Hit]):
    groups = group_by_source(sample_hits)
    assert [(g.name, g.is_database) for g in groups] == [
        ("Quy chế đào tạo", False),
        ("table:lich_thi", True),
        ("Không xác định", False),
    ]


def test_assemble_headers_and_order(sample_hits: list[Hit]):
    """Document and database groups get distinct headers; passages best-first within a group."""
    ctx = assemble(sample_hits)

    doc_header = ctx.index("📄 [Tài liệu] Quy chế đào tạo:")
    db_header = ctx.index("🗄️ [Dữ liệu DB] table:lich_thi:")
    unknown_header = ctx.index("📄 [Tài liệu] Không xác định:")
    assert doc_header < db_header < unknown_header
    assert ctx.index("Điều 16. Cảnh báo") < ctx.index("lần hai")
    assert "─" * 21 in ctx
    assert ctx.endswith("\n")


def test_assemble_caps_passages_per_group(sample_hits: list[Hit]):
    ctx = assemble(sample_hits, max_per_group=1)
    assert "Điều 16. Cảnh báo" in ctx
    assert "lần hai" not in ctx


def test_assemble_truncates_long_passages():
    ctx = assemble([_hit("long", "a" * 1200, 0.5, "doc:x")], max_chars_per_passage=1000)
    assert "a" * 1000 + " …" in ctx
    assert "a" * 1001 not in ctx


def test_render_flat_context(sample_hits: list[Hit]):
    text = render_flat_context(sample_hits[2:], max_chars=10)
    assert text.startswith("[Source: doc:quyche;title:Quy chế đào tạo | score=0.9000]\nĐiều 16. C …")
    assert "\n---\n[Source: unknown | score=0.3000]" in text


def test_answer_with_context_uses_rag_prompt(sample_hits: list[Hit]):
    client = MagicMock()
    client.generate.return_value = "Theo Điều 16, ..."
    generator = AnswerGenerator(client, GenerationConfig(max_tokens=256, temperature=0.1))

    result = generator.answer_with_context("Cảnh báo học vụ là gì?", sample_hits)

    assert result.answer == "Theo Điều 16, ..."
    assert "Quy chế đào tạo" in result.context
    system, prompt = client.generate.call_args.args
    assert system == RAG_SYSTEM_PROMPT
    assert "Cảnh báo học vụ là gì?" in prompt
    assert result.context in prompt
    assert client.generate.call_args.kwargs == {"max_tokens": 256, "temperature": 0.1}


def test_context_limited_to_max_context_hits():
    hits = [_hit(f"h{i}", f"nội dung số {i}", 1.0 - i / 100, f"doc:d{i}") for i in range(10)]
    generator = AnswerGenerator(MagicMock(), GenerationConfig(max_context_hits=8))

    ctx = generator.build_context(hits)

    assert "nội dung số 7" in ctx
    assert "nội dung số 8" not in ctx


def test_answer_general_sends_bare_question():
    client = MagicMock()
    client.generate.return_value = "Xin chào!"
    generator = AnswerGenerator(client)

    result = generator.answer_general("Xin chào")

    assert result.answer == "Xin chào!"
    assert result.context == ""
    assert client.generate.call_args.args == (GENERAL_SYSTEM_PROMPT, "Xin chào")
