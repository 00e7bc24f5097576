"""
Utility functions for RAG module.
"""

from __future__ import annotations

import re
from typing import Iterable, List

# Unicode word characters: keeps Vietnamese letters with diacritics intact,
# like PostgreSQL's 'simple' text-search configuration.
TOKEN_RE = re.compile(r"\w+", re.UNICODE)

ARTICLE_REF_RE = re.compile(r"Điều\s+\d+", re.IGNORECASE)


def iter_tokens(text: str) -> Iterable[str]:
    """Extract lowercase lexical tokens for indexing and lexical queries."""
    for match in TOKEN_RE.finditer(text.lower()):
        yield match.group(0)


def unique_tokens(text: str) -> List[str]:
    """Tokens of ``text`` in first-seen order without repeats."""
    seen: dict[str, None] = {}
    for tok in iter_tokens(text):
        seen.setdefault(tok, None)
    return list(seen)


def escape_like(value: str) -> str:
    """Escape LIKE/ILIKE wildcards so the value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_pattern(value: str) -> str:
    """ILIKE pattern matching ``value`` anywhere in the column."""
    return f"%{escape_like(value)}%"
