"""
Answer every question in a text file and write a markdown report.

Usage (from repo root):

    python -m eval.run_questions eval/questions.txt --output eval/results.md
"""

from __future__ import annotations

import argparse
import asyncio
import datetime as dt
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List

from src.api.deps import build_agent
from src.orchestrator import QAAgent, QAResult

DELAY_BETWEEN_QUESTIONS = 1.0


@dataclass
class QuestionRun:
    index: int
    result: QAResult
    elapsed_ms: int

    @property
    def success(self) -> bool:
        return not self.result.error and self.result.hit_count > 0


def load_questions(path: Path) -> List[str]:
    with path.open("r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


def render_report(runs: List[QuestionRun], started_at: dt.datetime) -> str:
    """Markdown report: one section per question plus a summary."""
    lines = [
        "# KẾT QUẢ TEST RAG Q&A",
        f"Thời gian: {started_at:%Y-%m-%d %H:%M:%S}",
        f"Tổng số câu hỏi: {len(runs)}",
        "",
        "---",
        "",
    ]
    for run in runs:
        r = run.result
        lines.append(f"## Câu {run.index}")
        lines.append(f"**Câu hỏi:** {r.question}")
        lines.append("")
        lines.append(
            f"**Context:** {'có' if r.has_context else 'không'} | **Hits:** {r.hit_count} | "
            f"**Top Score:** {r.top_score:.4f} | **Time:** {run.elapsed_ms}ms"
        )
        lines.append("")
        lines.append(f"**Trả lời:**\n{r.answer}")
        if r.error:
            lines.append(f"\n**Lỗi:** {r.error}")
        lines.append("")
        lines.append("---")
        lines.append("")

    total = len(runs)
    ok = sum(1 for run in runs if run.success)
    scored = [run.result.top_score for run in runs if run.result.top_score > 0]
    avg_score = sum(scored) / len(scored) if scored else 0.0
    avg_ms = sum(run.elapsed_ms for run in runs) / total if total else 0.0
    pct = 100.0 * ok / total if total else 0.0

    lines.append("# TỔNG KẾT")
    lines.append("")
    lines.append(f"- Thành công: {ok}/{total} ({pct:.1f}%)")
    lines.append(f"- Không có context: {total - ok}/{total}")
    lines.append(f"- Điểm trung bình: {avg_score:.4f}")
    lines.append(f"- Thời gian trung bình: {avg_ms:.0f}ms")
    return "\n".join(lines) + "\n"


async def run_questions(agent: QAAgent, questions: List[str], delay: float = DELAY_BETWEEN_QUESTIONS) -> List[QuestionRun]:
    runs: List[QuestionRun] = []
    for i, question in enumerate(questions, start=1):
        print(f"\n[{i}/{len(questions)}] {question}")
        started = time.perf_counter()
        result = await agent.answer(question)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        run = QuestionRun(index=i, result=result, elapsed_ms=elapsed_ms)
        runs.append(run)
        status = "OK" if run.success else "no context"
        print(f"    {status} | hits={result.hit_count} | top={result.top_score:.4f} | {elapsed_ms}ms")
        # Stay under the LLM rate limit
        if delay and i < len(questions):
            await asyncio.sleep(delay)
    return runs


async def main_async(args: argparse.Namespace) -> None:
    questions = load_questions(Path(args.questions))
    if not questions:
        print("No questions found.")
        return
    agent, _ = await build_agent()
    if agent is None:
        print("LLM client not configured (set LLM_API_KEY).")
        return
    started_at = dt.datetime.now()
    runs = await run_questions(agent, questions, delay=args.delay)
    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_report(runs, started_at), encoding="utf-8")
    print(f"\nReport written to {output}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a question file through the QA agent.")
    parser.add_argument("questions", help="Text file, one question per line")
    parser.add_argument("--output", default="eval/results.md")
    parser.add_argument("--delay", type=float, default=DELAY_BETWEEN_QUESTIONS)
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)
    asyncio.run(main_async(args))


if __name__ == "__main__":
    main()
