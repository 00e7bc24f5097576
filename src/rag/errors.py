"""
Typed failures raised by the retrieval core.

An empty hit list is never an error: callers get ``[]`` and route to the
general-knowledge answer. These exceptions are reserved for infrastructure.
"""

from __future__ import annotations


class RAGError(Exception):
    """Base class for retrieval-pipeline failures."""


class EmbeddingError(RAGError):
    """Embedding model unreachable, timed out, or returned a malformed vector."""


class RetrievalError(RAGError):
    """Passage-store query failed (connection, SQL, timeout)."""

    def __init__(self, message: str, *, table: str | None = None):
        super().__init__(message)
        self.table = table
