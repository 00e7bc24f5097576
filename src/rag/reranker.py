"""
Rule-based second-stage re-ranker for retrieved passages.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from .config import RAGConfig
from .retriever import Hit
from .topic_rules import TOPIC_RULES, TopicRule
from .utils import ARTICLE_REF_RE

logger = logging.getLogger(__name__)


@dataclass
class RuleBasedReranker:
    """Adds term-overlap, topic and generic bonuses using the original question."""

    config: RAGConfig = field(default_factory=RAGConfig)
    topic_rules: Tuple[TopicRule, ...] = TOPIC_RULES

    def rerank(self, hits: Iterable[Hit], question: str) -> List[Hit]:
        """
        Re-score candidates and sort by the new score.

        Args:
            hits: First-stage hits (any order)
            question: Original, non-expanded question

        Returns:
            Same hits with ``score += boost``, sorted descending. Equal scores
            keep their input order.
        """
        candidates = list(hits)
        if not candidates:
            return []

        rescored = [
            dataclasses.replace(hit, score=hit.score + self.boost(hit, question))
            for hit in candidates
        ]
        rescored.sort(key=lambda h: h.score, reverse=True)
        return rescored

    def boost(self, hit: Hit, question: str) -> float:
        """Total second-stage bonus for one hit."""
        q = question.lower()
        content = hit.content.lower()
        metadata = hit.metadata.serialize().lower() if hit.metadata else ""

        total = self.term_overlap(content, q)
        for topic in self.fired_topics(q):
            for rule in topic.bonuses:
                if rule.applies(content, metadata, q):
                    total += rule.bonus
        total += self._generic_bonus(hit.content, content, q)
        return total

    def term_overlap(self, content_lower: str, question_lower: str) -> float:
        terms = {t for t in question_lower.split() if len(t) >= self.config.min_term_length}
        matched = sum(1 for t in terms if t in content_lower)
        return matched * self.config.term_overlap_bonus

    def fired_topics(self, question_lower: str) -> Sequence[TopicRule]:
        return [t for t in self.topic_rules if t.fires(question_lower)]

    def _generic_bonus(self, raw_content: str, content: str, q: str) -> float:
        bonus = 0.0
        if ("điều kiện" in q or "quy định" in q) and ("điều kiện" in content or "phải" in content):
            bonus += self.config.condition_bonus
        if "quy trình" in q and ("bước" in content or "quy trình" in content):
            bonus += self.config.procedure_bonus
        if ARTICLE_REF_RE.search(raw_content):
            bonus += self.config.article_ref_bonus
        return bonus
