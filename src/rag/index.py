"""
Core passage records and JSONL loading for the regulation corpus.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .metadata import MetadataBuilder, PassageMetadata, as_metadata

ROOT = Path(__file__).resolve().parents[2]
PASSAGES_PATH = ROOT / "data" / "passages.jsonl"


def docx_passage_id(file_name: str, chunk_index: int) -> str:
    return f"docx::{file_name}::{chunk_index}"


def pdf_passage_id(file_name: str, chunk_index: int) -> str:
    return f"pdf::{file_name}::{chunk_index}"


def table_passage_id(schema: str, table: str) -> str:
    return f"table::{schema}.{table}"


@dataclasses.dataclass
class Passage:
    """A retrievable chunk: id, content, metadata bag and (optionally) its embedding."""

    id: str
    content: str
    metadata: PassageMetadata = dataclasses.field(default_factory=PassageMetadata)
    embedding: Optional[Sequence[float]] = None

    def __post_init__(self) -> None:
        self.metadata = as_metadata(self.metadata)

    @classmethod
    def for_table(cls, schema: str, table: str, content: str) -> "Passage":
        """Passage describing one database table (rows sampled by the ingestion job)."""
        metadata = MetadataBuilder().add("schema", schema).add("table", table).build()
        return cls(id=table_passage_id(schema, table), content=content, metadata=metadata)

    def with_embedding(self, embedding: Sequence[float]) -> "Passage":
        return dataclasses.replace(self, embedding=embedding)


def last_by_id(passages: Sequence[Passage]) -> List[Passage]:
    """Collapse repeated ids to their last occurrence, in first-seen order."""
    latest: Dict[str, Passage] = {}
    for p in passages:
        latest[p.id] = p
    return list(latest.values())


def load_passages(path: Path | None = None) -> List[Passage]:
    """Load passages from a JSONL file of {id, content, metadata[, embedding]} objects."""
    if path is None:
        path = PASSAGES_PATH
    if not path.exists():
        raise FileNotFoundError(f"passages file not found at {path}")

    passages: List[Passage] = []
    with path.open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as e:
                raise ValueError(f"{path}:{lineno}: invalid JSON ({e})") from e
            content = obj.get("content") or obj.get("text")
            if not obj.get("id") or not content:
                raise ValueError(f"{path}:{lineno}: passage needs 'id' and 'content'")
            passages.append(
                Passage(
                    id=obj["id"],
                    content=content,
                    metadata=as_metadata(obj.get("metadata")),
                    embedding=obj.get("embedding"),
                )
            )
    return passages
