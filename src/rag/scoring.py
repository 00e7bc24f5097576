"""
First-stage blended score shared by the passage stores.

The PostgreSQL store evaluates the same expressions in SQL; the in-memory
store calls these functions directly. Substring boosts that look at the
question itself (exact match, metadata fallback) use it with surrounding
whitespace stripped and lower-cased.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .boost_rules import CONTENT_RULES, METADATA_RULES, BoostRule, first_match_bonus
from .config import RAGConfig


@dataclass(frozen=True)
class ScoreBreakdown:
    """Component scores of one candidate passage."""

    vec_score: float
    lex_score: float
    exact_boost: float = 0.0
    meta_boost: float = 0.0
    content_boost: float = 0.0

    def final(self, config: RAGConfig) -> float:
        return blend(self, config)


def blend(b: ScoreBreakdown, config: RAGConfig) -> float:
    """
    max(primary, fallback):

    - primary: weighted vector + capped lexical score plus every boost
    - fallback: vector-dominant score for when lexical scoring degenerates
    """
    lex = min(b.lex_score * config.lexical_scale, 1.0)
    primary = (
        config.vector_weight * b.vec_score
        + config.lexical_weight * lex
        + b.exact_boost
        + b.meta_boost
        + b.content_boost
    )
    fallback = config.fallback_vector_weight * b.vec_score + b.exact_boost + b.content_boost
    return max(primary, fallback)


def passes_filter(b: ScoreBreakdown, config: RAGConfig) -> bool:
    return (
        b.vec_score > config.min_vec_score
        or b.lex_score > config.min_lex_score
        or b.meta_boost > 0
        or b.content_boost > 0
    )


def exact_boost(question: str, content: str, config: RAGConfig) -> float:
    q = question.strip().lower()
    if q and q in content.lower():
        return config.exact_match_bonus
    return 0.0


def meta_boost(
    question: str,
    metadata_text: str | None,
    config: RAGConfig,
    rules: Sequence[BoostRule] = METADATA_RULES,
) -> float:
    bonus = first_match_bonus(rules, metadata_text, question)
    if bonus:
        return bonus
    q = question.strip().lower()
    if q and metadata_text and q in metadata_text.lower():
        return config.meta_question_bonus
    return 0.0


def content_boost(
    question: str,
    content: str,
    rules: Sequence[BoostRule] = CONTENT_RULES,
) -> float:
    return first_match_bonus(rules, content, question)


def score_candidate(
    question: str,
    content: str,
    metadata_text: str | None,
    vec_score: float,
    lex_score: float,
    config: RAGConfig,
    *,
    metadata_rules: Sequence[BoostRule] = METADATA_RULES,
    content_rules: Sequence[BoostRule] = CONTENT_RULES,
) -> ScoreBreakdown:
    return ScoreBreakdown(
        vec_score=vec_score,
        lex_score=lex_score,
        exact_boost=exact_boost(question, content, config),
        meta_boost=meta_boost(question, metadata_text, config, metadata_rules),
        content_boost=content_boost(question, content, content_rules),
    )
