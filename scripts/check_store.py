"""
Row counts and an embedding-norm sample for each passage table.

    python -m scripts.check_store
"""

from __future__ import annotations

import asyncio
import logging

from src.rag import RAGConfig
from src.rag.errors import RetrievalError
from src.rag.pg_store import PgVectorPassageStore

NORM_TOLERANCE = 1e-3


async def main() -> None:
    config = RAGConfig.from_env()
    store = PgVectorPassageStore(config=config)
    for table in config.tables:
        try:
            count = await store.count(table)
            norms = await store.embedding_norms(table)
        except RetrievalError as e:
            print(f"{table}: ERROR {e}")
            continue
        off = [(pid, n) for pid, n in norms if abs(n - 1.0) > NORM_TOLERANCE]
        print(f"{table}: {count} rows, {len(norms)} sampled embeddings, {len(off)} not unit-length")
        for pid, n in off:
            print(f"    {pid}: |v| = {n:.4f}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
    asyncio.run(main())
