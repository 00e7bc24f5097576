"""
RAG (Retrieval-Augmented Generation) module.

Hybrid retrieval over the regulation corpus:
- Vietnamese synonym expansion for lexical scoring
- One blended (vector + lexical + boost rules) query per passage table
- Rule-based re-ranking on the original question
- Concurrent fan-out over the document and database passage tables
"""

from .config import DB_TABLE, DOC_TABLE, RAGConfig
from .dense import Embedder, SentenceTransformerEmbedder, normalize
from .errors import EmbeddingError, RAGError, RetrievalError
from .hybrid import HybridSearcher
from .index import Passage, load_passages
from .memory_store import InMemoryPassageStore
from .merge import merge_hits
from .metadata import PassageMetadata
from .query_rewriter import QueryExpander
from .reranker import RuleBasedReranker
from .retriever import Hit, Retriever
from .store import PassageStore

__all__ = [
    "DB_TABLE",
    "DOC_TABLE",
    "RAGConfig",
    "Embedder",
    "SentenceTransformerEmbedder",
    "normalize",
    "EmbeddingError",
    "RAGError",
    "RetrievalError",
    "HybridSearcher",
    "Passage",
    "load_passages",
    "InMemoryPassageStore",
    "merge_hits",
    "PassageMetadata",
    "QueryExpander",
    "RuleBasedReranker",
    "Hit",
    "Retriever",
    "PassageStore",
]
