"""
Interactive question loop against the QA agent.

    python -m scripts.ask
    python -m scripts.ask --context
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from src.api.deps import build_agent

EXIT_WORDS = {"exit", "quit", "q"}


async def main_async(show_context: bool) -> None:
    agent, _ = await build_agent()
    if agent is None:
        print("LLM client not configured (set LLM_API_KEY).")
        return

    print("Nhập câu hỏi (gõ 'exit' để thoát).")
    while True:
        try:
            question = (await asyncio.to_thread(input, "\n❓ ")).strip()
        except (EOFError, KeyboardInterrupt):
            break
        if not question:
            continue
        if question.lower() in EXIT_WORDS:
            break

        result = await agent.answer(question, show_context=show_context)
        if show_context and result.context:
            print("\n--- CONTEXT ---")
            print(result.context)
            print("---------------")
        print(f"\n💬 {result.answer}")
        print(f"\n(hits={result.hit_count}, top_score={result.top_score:.4f}, context={'yes' if result.has_context else 'no'})")
        if result.error:
            print(f"(error: {result.error})")


def main() -> None:
    parser = argparse.ArgumentParser(description="Ask questions interactively.")
    parser.add_argument("--context", action="store_true", help="Print retrieved passages")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)
    asyncio.run(main_async(args.context))


if __name__ == "__main__":
    main()
