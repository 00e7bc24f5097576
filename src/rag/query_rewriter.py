"""
Query expansion for the lexical half of hybrid retrieval.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Tuple

from .synonyms import SYNONYMS


@dataclass(frozen=True)
class QueryExpander:
    """Rule-based synonym expander for lexical (BM25 / ts_rank) scoring."""

    synonyms: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: SYNONYMS)

    def expand(self, question: str) -> str:
        """
        Return the expanded lexical query for a question.

        The question's own whitespace tokens come first, unchanged, followed by
        the related phrases of every synonym key found in the question.
        Duplicates collapse case-insensitively (first spelling wins).
        """
        return " ".join(self.expand_terms(question))

    def expand_terms(self, question: str) -> List[str]:
        """Ordered, de-duplicated term list behind ``expand``."""
        terms: Dict[str, str] = {}
        for token in question.split():
            terms.setdefault(token.lower(), token)

        q_lower = question.lower()
        for key, related in self.synonyms.items():
            if key.lower() in q_lower:
                for phrase in related:
                    terms.setdefault(phrase.lower(), phrase)

        return list(terms.values())

    def matched_keys(self, question: str) -> List[str]:
        """Synonym keys that fire for this question (debugging aid)."""
        q_lower = question.lower()
        return [key for key in self.synonyms if key.lower() in q_lower]
