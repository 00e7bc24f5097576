"""
Show first-stage candidates and their score breakdown before and after re-ranking.

    python -m scripts.debug_search "số tín chỉ tối thiểu mỗi học kỳ"
    python -m scripts.debug_search --table db_embeddings -k 5 "lịch thi cuối kỳ"
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List

from src.api.deps import build_agent
from src.rag import DOC_TABLE, Hit, RuleBasedReranker


def _print_hits(title: str, hits: List[Hit]) -> None:
    print(f"\n=== {title} ({len(hits)}) ===")
    if not hits:
        print("    (no results)")
        return
    for rank, h in enumerate(hits, start=1):
        print(
            f"  {rank:2d}. {h.score:7.4f}  vec={h.vec_score:.4f} lex={h.lex_score:.4f} "
            f"exact={h.exact_boost:.2f} meta={h.meta_boost:.2f} content={h.content_boost:.2f}  {h.id}"
        )
        print(f"        Source: {h.metadata.source_name()}")
        snippet = h.content.replace("\n", " ")[:160]
        print(f"        Text  : {snippet}...")


async def main_async(question: str, table: str, k: int) -> None:
    _, searcher = await build_agent()
    print(f"Question : {question}")
    print(f"Expanded : {searcher.expand(question)}")
    if searcher.expander is not None:
        print(f"Synonyms : {', '.join(searcher.expander.matched_keys(question)) or '(none)'}")

    vector = await searcher.embed_question(question)
    candidates = await searcher.retrieve(question, vector, k, table)
    _print_hits(f"First stage, {table}", candidates)

    reranker = searcher.reranker or RuleBasedReranker(config=searcher.config)
    _print_hits("After re-ranking", reranker.rerank(candidates, question)[:k])


def main() -> None:
    parser = argparse.ArgumentParser(description="Debug hybrid retrieval for one question.")
    parser.add_argument("question")
    parser.add_argument("--table", default=DOC_TABLE)
    parser.add_argument("-k", type=int, default=10)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    asyncio.run(main_async(args.question, args.table, args.k))


if __name__ == "__main__":
    main()
