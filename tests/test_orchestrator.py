"""
Tests for the QA agent: context vs general answer paths and failure mapping.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.generation import FAILURE_MESSAGE, AnswerGenerator, GeneratedAnswer
from src.llm import GenerationError
from src.orchestrator import QAAgent, QAResult
from src.rag import EmbeddingError, Hit, PassageMetadata, RetrievalError


def _hits() -> list[Hit]:
    meta = PassageMetadata.parse("doc:quyche;title:Quy chế đào tạo")
    return [
        Hit(id="a", content="Điều 16. Cảnh báo học vụ", metadata=meta, score=1.2),
        Hit(id="b", content="Điều 17. Buộc thôi học", metadata=meta, score=0.6),
    ]


def _agent(hits=None, search_error=None, generate_error=None):
    retriever = MagicMock()
    retriever.search = AsyncMock(return_value=hits or [], side_effect=search_error)
    generator = MagicMock(spec=AnswerGenerator)
    if generate_error is not None:
        generator.answer_with_context.side_effect = generate_error
        generator.answer_general.side_effect = generate_error
    else:
        generator.answer_with_context.return_value = GeneratedAnswer(answer="Theo Điều 16 ...", context="ctx")
        generator.answer_general.return_value = GeneratedAnswer(answer="Câu trả lời chung")
    return QAAgent(retriever=retriever, generator=generator), retriever, generator


@pytest.mark.anyio
async def test_answer_with_context():
    """Hits are passed to the generator; result carries count and top score."""
    agent, retriever, generator = _agent(hits=_hits())

    result = await agent.answer("Cảnh báo học vụ là gì?")

    assert isinstance(result, QAResult)
    retriever.search.assert_awaited_once_with("Cảnh báo học vụ là gì?")
    generator.answer_with_context.assert_called_once_with("Cảnh báo học vụ là gì?", _hits())
    generator.answer_general.assert_not_called()
    assert result.answer == "Theo Điều 16 ..."
    assert result.has_context is True
    assert result.hit_count == 2
    assert result.top_score == pytest.approx(1.2)
    assert result.context is None
    assert result.error is None


@pytest.mark.anyio
async def test_no_hits_routes_to_general_answer():
    """An empty retrieval result is not an error."""
    agent, _, generator = _agent(hits=[])

    result = await agent.answer("Xin chào")

    generator.answer_general.assert_called_once_with("Xin chào")
    generator.answer_with_context.assert_not_called()
    assert result.answer == "Câu trả lời chung"
    assert result.has_context is False
    assert result.hit_count == 0
    assert result.top_score == 0.0
    assert result.error is None


@pytest.mark.anyio
async def test_show_context_returns_flat_context():
    agent, _, _ = _agent(hits=_hits())

    result = await agent.answer("Cảnh báo học vụ là gì?", show_context=True)

    assert result.context is not None
    assert "[Source: doc:quyche;title:Quy chế đào tạo | score=1.2000]" in result.context
    assert "Điều 17. Buộc thôi học" in result.context


@pytest.mark.anyio
@pytest.mark.parametrize(
    "search_error",
    [EmbeddingError("model down"), RetrievalError("db down", table="kb_docs")],
)
async def test_retrieval_failures_become_failure_message(search_error):
    agent, _, generator = _agent(search_error=search_error)

    result = await agent.answer("Cảnh báo học vụ là gì?")

    assert result.answer == FAILURE_MESSAGE
    assert result.error == str(search_error)
    generator.answer_with_context.assert_not_called()
    generator.answer_general.assert_not_called()


@pytest.mark.anyio
async def test_generation_failure_becomes_failure_message():
    agent, _, _ = _agent(hits=_hits(), generate_error=GenerationError("quota exceeded"))

    result = await agent.answer("Cảnh báo học vụ là gì?")

    assert result.answer == FAILURE_MESSAGE
    assert result.error == "quota exceeded"
    assert result.hit_count == 2


@pytest.mark.anyio
async def test_unexpected_errors_propagate():
    agent, _, _ = _agent(search_error=ValueError("bug"))

    with pytest.raises(ValueError):
        await agent.answer("Cảnh báo học vụ là gì?")
