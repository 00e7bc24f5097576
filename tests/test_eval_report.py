"""
Tests for the question-file evaluation report.
"""

from __future__ import annotations

import datetime as dt
from unittest.mock import AsyncMock, MagicMock

import pytest

from eval.run_questions import QuestionRun, load_questions, render_report, run_questions
from src.orchestrator import QAResult


def _run(index: int, **kwargs) -> QuestionRun:
    result = QAResult(question=f"câu {index}", answer=f"trả lời {index}", **kwargs)
    return QuestionRun(index=index, result=result, elapsed_ms=100 * index)


def test_load_questions_skips_blank_lines(tmp_path):
    path = tmp_path / "questions.txt"
    path.write_text("Cảnh báo học vụ là gì?\n\n  \nĐiều kiện tốt nghiệp?\n", encoding="utf-8")
    assert load_questions(path) == ["Cảnh báo học vụ là gì?", "Điều kiện tốt nghiệp?"]


def test_report_sections_and_summary():
    runs = [
        _run(1, has_context=True, hit_count=5, top_score=1.2),
        _run(2, has_context=False, hit_count=0),
        _run(3, hit_count=0, error="db down"),
    ]

    report = render_report(runs, dt.datetime(2024, 5, 1, 9, 30))

    assert report.startswith("# KẾT QUẢ TEST RAG Q&A\nThời gian: 2024-05-01 09:30:00")
    assert "## Câu 1" in report and "## Câu 3" in report
    assert "**Lỗi:** db down" in report
    assert "- Thành công: 1/3 (33.3%)" in report
    assert "- Điểm trung bình: 1.2000" in report
    assert "- Thời gian trung bình: 200ms" in report


def test_report_with_no_runs():
    report = render_report([], dt.datetime(2024, 5, 1))
    assert "- Thành công: 0/0 (0.0%)" in report


@pytest.mark.anyio
async def test_run_questions_calls_agent_in_order():
    agent = MagicMock()
    agent.answer = AsyncMock(side_effect=lambda q: QAResult(question=q, answer="ok", hit_count=1))

    runs = await run_questions(agent, ["a", "b"], delay=0)

    assert [r.result.question for r in runs] == ["a", "b"]
    assert [r.index for r in runs] == [1, 2]
    assert all(r.success for r in runs)
