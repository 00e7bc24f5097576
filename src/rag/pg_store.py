"""
PostgreSQL + pgvector passage store.

Each retrieval is a single CTE query per table: vector similarity
(``<=>`` cosine distance), ``ts_rank_cd`` over the precomputed ``tsv`` column,
and ILIKE boost rules are scored and blended inside the database.

Boost rules whose question condition does not hold are dropped before the SQL
is built, so the CASE expressions only test passage columns. Every pattern and
the question text travel as bind parameters; only config-owned numbers and
the (whitelisted) table name are rendered into the statement.

The exact-match boost and the metadata question fallback match the question
with surrounding whitespace stripped; a blank question contributes no
substring boost at all.

Search carries no timeout of its own; ``HybridSearcher`` bounds each table
branch with ``store_timeout``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from pgvector.sqlalchemy import Vector
from sqlalchemy import bindparam, func, literal_column, select, text
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import TextClause

from src.db.models import EMBEDDING_DIM, PASSAGE_MODELS

from .boost_rules import CONTENT_RULES, METADATA_RULES, BoostRule, active_rules
from .config import RAGConfig
from .dense import normalize
from .errors import RetrievalError
from .index import Passage, last_by_id
from .metadata import PassageMetadata
from .retriever import Hit
from .utils import contains_pattern, unique_tokens

logger = logging.getLogger(__name__)

# websearch_to_tsquery treats these words as operators
_TSQUERY_OPERATORS = {"or", "and", "not"}


def _num(value: float) -> str:
    return repr(float(value))


def lexical_query(expanded_question: str) -> str:
    """OR-query over the expanded question's tokens, in websearch_to_tsquery syntax."""
    tokens = [t for t in unique_tokens(expanded_question) if t not in _TSQUERY_OPERATORS]
    return " or ".join(tokens)


def _case_expression(
    column: str,
    rules: Sequence[BoostRule],
    prefix: str,
    params: Dict[str, Any],
    fallback: Tuple[str, float] | None = None,
) -> str:
    """First-match CASE over ``column``; adds one ILIKE bind per field pattern to ``params``."""
    whens: List[str] = []
    for i, rule in enumerate(rules):
        conds = []
        for j, pattern in enumerate(rule.field_all):
            name = f"{prefix}{i}_{j}"
            params[name] = contains_pattern(pattern)
            conds.append(f"d.{column} ILIKE :{name}")
        whens.append(f"WHEN {' AND '.join(conds)} THEN {_num(rule.bonus)}")
    if fallback is not None:
        param_name, bonus = fallback
        whens.append(f"WHEN d.{column} ILIKE :{param_name} THEN {_num(bonus)}")
    if not whens:
        return "0"
    return "CASE " + " ".join(whens) + " ELSE 0 END"


def build_search_query(
    table: str,
    raw_question: str,
    expanded_question: str,
    query_vector: Sequence[float],
    k: int,
    config: RAGConfig,
    *,
    metadata_rules: Sequence[BoostRule] = METADATA_RULES,
    content_rules: Sequence[BoostRule] = CONTENT_RULES,
) -> TextClause:
    """Render the combined scoring statement for one table with its parameters bound."""
    if table not in PASSAGE_MODELS:
        raise RetrievalError(f"unknown passage table {table!r}", table=table)
    if k < 1:
        raise ValueError("k must be >= 1")

    params: Dict[str, Any] = {
        "lexq": lexical_query(expanded_question),
        "limit": 2 * k,
    }

    q = raw_question.strip()
    if q:
        params["q_pattern"] = contains_pattern(q)
        exact_sql = f"CASE WHEN d.content ILIKE :q_pattern THEN {_num(config.exact_match_bonus)} ELSE 0 END"
        meta_fallback = ("q_pattern", config.meta_question_bonus)
    else:
        exact_sql = "0"
        meta_fallback = None

    meta_sql = _case_expression(
        "metadata", active_rules(metadata_rules, raw_question), "m", params, meta_fallback,
    )
    content_sql = _case_expression(
        "content", active_rules(content_rules, raw_question), "c", params,
    )

    sql = f"""
WITH q AS (
    SELECT websearch_to_tsquery('simple', :lexq) AS query_ft
),
base AS (
    SELECT
        d.id,
        d.content,
        d.metadata,
        COALESCE(1 - (d.embedding <=> :qvec), 0) AS vec_score,
        COALESCE(ts_rank_cd(d.tsv, q.query_ft, 32), 0) AS lex_score,
        {exact_sql} AS exact_boost,
        {meta_sql} AS meta_boost,
        {content_sql} AS content_boost
    FROM "{table}" d
    CROSS JOIN q
),
scored AS (
    SELECT
        base.*,
        GREATEST(
            {_num(config.vector_weight)} * vec_score
                + {_num(config.lexical_weight)} * LEAST(lex_score * {_num(config.lexical_scale)}, 1.0)
                + exact_boost + meta_boost + content_boost,
            {_num(config.fallback_vector_weight)} * vec_score + exact_boost + content_boost
        ) AS final_score
    FROM base
)
SELECT id, content, metadata, vec_score, lex_score, exact_boost, meta_boost, content_boost, final_score
FROM scored
WHERE vec_score > {_num(config.min_vec_score)}
   OR lex_score > {_num(config.min_lex_score)}
   OR meta_boost > 0
   OR content_boost > 0
ORDER BY final_score DESC, id
LIMIT :limit
"""
    stmt = text(sql).bindparams(
        bindparam("qvec", value=list(query_vector), type_=Vector(EMBEDDING_DIM)),
        **params,
    )
    return stmt


def _row_to_hit(row: Any, table: str) -> Hit:
    return Hit(
        id=row.id,
        content=row.content,
        metadata=PassageMetadata.parse(row.metadata),
        score=float(row.final_score),
        vec_score=float(row.vec_score),
        lex_score=float(row.lex_score),
        exact_boost=float(row.exact_boost),
        meta_boost=float(row.meta_boost),
        content_boost=float(row.content_boost),
        table=table,
    )


def passage_rows(passages: Sequence[Passage]) -> List[Dict[str, Any]]:
    """Insert rows for an upsert batch; tsv is recomputed from content."""
    rows: List[Dict[str, Any]] = []
    for p in passages:
        rows.append(
            {
                "id": p.id,
                "content": p.content,
                "metadata": p.metadata.serialize() or None,
                "embedding": normalize(p.embedding) if p.embedding is not None else None,
                "tsv": func.to_tsvector(literal_column("'simple'"), p.content),
            }
        )
    return rows


def _session_factory():
    from src.db.session import AsyncSessionLocal

    return AsyncSessionLocal


@dataclass
class PgVectorPassageStore:
    """PassageStore backed by the ``kb_docs`` / ``db_embeddings`` tables."""

    session_factory: Any = field(default_factory=_session_factory)
    config: RAGConfig = field(default_factory=RAGConfig)

    def _model(self, table: str):
        try:
            return PASSAGE_MODELS[table]
        except KeyError:
            raise RetrievalError(f"unknown passage table {table!r}", table=table) from None

    async def search(
        self,
        table: str,
        raw_question: str,
        expanded_question: str,
        query_vector: Sequence[float],
        k: int,
    ) -> List[Hit]:
        stmt = build_search_query(table, raw_question, expanded_question, query_vector, k, self.config)
        started = time.perf_counter()
        try:
            rows = await self._fetch(stmt)
        except (SQLAlchemyError, OSError) as exc:
            logger.exception("Search on %s failed", table)
            raise RetrievalError(f"search on {table} failed: {exc}", table=table) from exc

        hits = [_row_to_hit(r, table) for r in rows]
        logger.debug(
            "pg store %s: %d hits in %.1f ms", table, len(hits), (time.perf_counter() - started) * 1000
        )
        return hits

    async def _fetch(self, stmt: TextClause) -> List[Any]:
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.all())

    async def upsert(self, table: str, passages: Sequence[Passage]) -> int:
        model = self._model(table)
        # One INSERT ... ON CONFLICT may not touch the same row twice.
        unique = last_by_id(passages)
        if len(unique) < len(passages):
            logger.warning(
                "Collapsed %d duplicate passage ids before upsert into %s", len(passages) - len(unique), table
            )
        written = 0
        batch_size = max(1, self.config.upsert_batch_size)
        for start in range(0, len(unique), batch_size):
            batch = unique[start : start + batch_size]
            stmt = pg_insert(model.__table__).values(passage_rows(batch))
            stmt = stmt.on_conflict_do_update(
                index_elements=["id"],
                set_={
                    "content": stmt.excluded["content"],
                    "metadata": stmt.excluded["metadata"],
                    "embedding": stmt.excluded["embedding"],
                    "tsv": stmt.excluded["tsv"],
                },
            )
            try:
                async with self.session_factory() as session:
                    async with session.begin():
                        await session.execute(stmt)
            except (SQLAlchemyError, OSError) as exc:
                raise RetrievalError(f"upsert into {table} failed: {exc}", table=table) from exc
            written += len(batch)
            logger.info("Upserted %d/%d passages into %s", written, len(unique), table)
        return written

    async def clear(self, table: str) -> None:
        self._model(table)
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    await session.execute(text(f'TRUNCATE TABLE "{table}"'))
        except (SQLAlchemyError, OSError) as exc:
            raise RetrievalError(f"clearing {table} failed: {exc}", table=table) from exc

    async def count(self, table: str) -> int:
        model = self._model(table)
        try:
            async with self.session_factory() as session:
                result = await session.execute(select(func.count()).select_from(model))
                return int(result.scalar_one())
        except (SQLAlchemyError, OSError) as exc:
            raise RetrievalError(f"count on {table} failed: {exc}", table=table) from exc

    async def embedding_norms(self, table: str, limit: int = 20) -> List[Tuple[str, float]]:
        """Sample of (id, L2 norm) pairs, used by scripts/check_store.py."""
        model = self._model(table)
        stmt = (
            select(model.id, func.vector_norm(model.embedding))
            .where(model.embedding.is_not(None))
            .order_by(model.id)
            .limit(limit)
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return [(pid, float(norm)) for pid, norm in result.all()]
        except (SQLAlchemyError, OSError) as exc:
            raise RetrievalError(f"norm check on {table} failed: {exc}", table=table) from exc
