"""
Configuration for RAG retrieval pipeline.

Score weights, filter thresholds and boost magnitudes are empirically tuned
values; they are kept here as parameters rather than hard-coded in the stores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from src.settings import env_bool, env_float, env_int, env_list, env_str

DOC_TABLE = "kb_docs"
DB_TABLE = "db_embeddings"

FANOUT_FAIL = "fail"
FANOUT_DROP = "drop"


@dataclass
class RAGConfig:
    """Configuration for RAG retrieval."""

    use_reranker: bool = True
    use_query_expansion: bool = True

    # Final hits per question and per-table k (each table over-fetches 2k).
    top_k: int = 10
    table_k: int = 10
    tables: Tuple[str, ...] = field(default_factory=lambda: (DOC_TABLE, DB_TABLE))

    # Blend: max(vec_w*vec + lex_w*min(lex*lex_scale, 1) + boosts, fallback_w*vec + exact + content)
    vector_weight: float = 0.50
    lexical_weight: float = 0.25
    lexical_scale: float = 2.0
    fallback_vector_weight: float = 0.70

    exact_match_bonus: float = 0.15
    meta_question_bonus: float = 0.10

    # Candidate filter.
    min_vec_score: float = 0.2
    min_lex_score: float = 0.0005

    # Re-ranking.
    term_overlap_bonus: float = 0.02
    min_term_length: int = 3
    condition_bonus: float = 0.05
    procedure_bonus: float = 0.05
    article_ref_bonus: float = 0.02

    # Concurrency / timeouts (seconds).
    fanout_policy: str = FANOUT_FAIL
    embed_timeout: float = 30.0
    store_timeout: float = 15.0

    upsert_batch_size: int = 50

    def __post_init__(self) -> None:
        if self.fanout_policy not in (FANOUT_FAIL, FANOUT_DROP):
            raise ValueError(
                f"fanout_policy must be {FANOUT_FAIL!r} or {FANOUT_DROP!r}, got {self.fanout_policy!r}"
            )
        if self.top_k < 1 or self.table_k < 1:
            raise ValueError("top_k and table_k must be >= 1")

    @classmethod
    def from_env(cls) -> "RAGConfig":
        """Build a config from RAG_* environment variables (unset -> defaults)."""
        base = cls()
        return cls(
            use_reranker=env_bool("RAG_USE_RERANKER", base.use_reranker),
            use_query_expansion=env_bool("RAG_USE_QUERY_EXPANSION", base.use_query_expansion),
            top_k=env_int("RAG_TOP_K", base.top_k),
            table_k=env_int("RAG_TABLE_K", base.table_k),
            tables=env_list("RAG_TABLES", base.tables),
            min_vec_score=env_float("RAG_MIN_VEC_SCORE", base.min_vec_score),
            min_lex_score=env_float("RAG_MIN_LEX_SCORE", base.min_lex_score),
            fanout_policy=env_str("RAG_FANOUT_POLICY", base.fanout_policy) or base.fanout_policy,
            embed_timeout=env_float("RAG_EMBED_TIMEOUT", base.embed_timeout),
            store_timeout=env_float("RAG_STORE_TIMEOUT", base.store_timeout),
            upsert_batch_size=env_int("RAG_UPSERT_BATCH_SIZE", base.upsert_batch_size),
        )
