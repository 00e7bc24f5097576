from __future__ import annotations

from typing import Dict, List, Optional, Type

from pgvector.sqlalchemy import Vector
from sqlalchemy import Index, Text
from sqlalchemy.dialects.postgresql import TSVECTOR
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.settings import env_int

# Must match the embedding model (multilingual-e5-base: 768).
EMBEDDING_DIM = env_int("EMBEDDING_DIM", 768)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class PassageColumns:
    """
    Columns shared by every passage table.

    ``tsv`` is derived from ``content`` with the 'simple' text-search config and
    is rewritten together with content/metadata/embedding on every upsert.
    """

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    metadata_: Mapped[Optional[str]] = mapped_column("metadata", Text, nullable=True)
    embedding: Mapped[Optional[List[float]]] = mapped_column(Vector(EMBEDDING_DIM), nullable=True)
    tsv: Mapped[Optional[str]] = mapped_column(TSVECTOR, nullable=True)


class KbDoc(PassageColumns, Base):
    """Passages chunked from regulation documents (DOCX / PDF)."""

    __tablename__ = "kb_docs"
    __table_args__ = (
        Index("ix_kb_docs_tsv", "tsv", postgresql_using="gin"),
        Index(
            "ix_kb_docs_embedding",
            "embedding",
            postgresql_using="hnsw",
            postgresql_ops={"embedding": "vector_cosine_ops"},
        ),
    )


class DbEmbedding(PassageColumns, Base):
    """Passages describing rows/tables of the academic database."""

    __tablename__ = "db_embeddings"
    __table_args__ = (
        Index("ix_db_embeddings_tsv", "tsv", postgresql_using="gin"),
        Index(
            "ix_db_embeddings_embedding",
            "embedding",
            postgresql_using="hnsw",
            postgresql_ops={"embedding": "vector_cosine_ops"},
        ),
    )


PASSAGE_MODELS: Dict[str, Type[PassageColumns]] = {
    KbDoc.__tablename__: KbDoc,
    DbEmbedding.__tablename__: DbEmbedding,
}
