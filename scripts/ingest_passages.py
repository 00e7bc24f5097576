"""
Load chunked passages into the PostgreSQL passage tables.

Input is the JSONL produced by the document / database chunkers, one
{id, content, metadata[, embedding]} object per line. Passages without an
embedding are embedded with the document role; every vector is normalized
before the upsert (batches of RAG_UPSERT_BATCH_SIZE, default 50).

Usage (from repo root):

    python -m scripts.ingest_passages --input data/passages.jsonl
    python -m scripts.ingest_passages --input data/db_rows.jsonl --table db_embeddings --clear
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Dict, List

from src.rag import Passage, RAGConfig, SentenceTransformerEmbedder, load_passages
from src.rag.config import DB_TABLE, DOC_TABLE
from src.rag.dense import DOCUMENT
from src.rag.index import PASSAGES_PATH
from src.rag.pg_store import PgVectorPassageStore

logger = logging.getLogger(__name__)


def split_by_table(passages: List[Passage], table: str | None) -> Dict[str, List[Passage]]:
    """Route passages to a table: explicit --table, else database-derived rows vs documents."""
    if table:
        return {table: passages}
    routed: Dict[str, List[Passage]] = {DOC_TABLE: [], DB_TABLE: []}
    for p in passages:
        routed[DB_TABLE if p.metadata.is_database() else DOC_TABLE].append(p)
    return {t: ps for t, ps in routed.items() if ps}


async def embed_missing(
    passages: List[Passage],
    embedder: SentenceTransformerEmbedder,
    batch_size: int,
) -> List[Passage]:
    out: List[Passage] = []
    for start in range(0, len(passages), batch_size):
        batch = passages[start : start + batch_size]
        todo = [p for p in batch if p.embedding is None]
        vectors = await embedder.embed_batch([p.content for p in todo], role=DOCUMENT) if todo else []
        by_id = {p.id: v for p, v in zip(todo, vectors)}
        out.extend(p.with_embedding(by_id[p.id]) if p.id in by_id else p for p in batch)
        print(f"  embedded {min(start + batch_size, len(passages))}/{len(passages)}")
    return out


async def main_async(args: argparse.Namespace) -> None:
    config = RAGConfig.from_env()
    passages = load_passages(Path(args.input))
    print(f"Loaded {len(passages)} passages from {args.input}")
    if not passages:
        return

    store = PgVectorPassageStore(config=config)
    embedder = SentenceTransformerEmbedder()

    for table, rows in split_by_table(passages, args.table).items():
        if args.clear:
            await store.clear(table)
            print(f"Cleared {table}")
        print(f"\n{table}: {len(rows)} passages")
        rows = await embed_missing(rows, embedder, args.batch_size or config.upsert_batch_size)
        written = await store.upsert(table, rows)
        print(f"  upserted {written} into {table}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Embed and upsert passages into pgvector tables.")
    parser.add_argument("--input", default=str(PASSAGES_PATH), help="Passages JSONL file")
    parser.add_argument("--table", choices=[DOC_TABLE, DB_TABLE], default=None, help="Force a target table")
    parser.add_argument("--clear", action="store_true", help="Truncate the target table(s) first")
    parser.add_argument("--batch-size", type=int, default=None, help="Embedding batch size")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(main_async(args))


if __name__ == "__main__":
    main()
