"""
Context assembly for answer generation.

Groups the final hits by their source (regulation document or database table),
orders the groups by their best score and renders one text block that,
together with the question, is the only input handed to the LLM.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from src.rag.retriever import Hit

ELLIPSIS = " …"
RULE_LINE = "─" * 21
DOCUMENT_HEADER = "📄 [Tài liệu]"
DATABASE_HEADER = "🗄️ [Dữ liệu DB]"


def trim_for_prompt(text: str, max_chars: int) -> str:
    """Hard cut at ``max_chars`` plus an ellipsis marker; may cut mid-word."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + ELLIPSIS


@dataclass
class SourceGroup:
    name: str
    is_database: bool
    hits: List[Hit] = field(default_factory=list)

    @property
    def best_score(self) -> float:
        return max(h.score for h in self.hits)

    @property
    def header(self) -> str:
        kind = DATABASE_HEADER if self.is_database else DOCUMENT_HEADER
        return f"{kind} {self.name}:"


def group_by_source(hits: Sequence[Hit]) -> List[SourceGroup]:
    """Group hits by (source name, database?) and order groups by best score, descending."""
    groups: Dict[Tuple[str, bool], SourceGroup] = {}
    for h in hits:
        key = (h.metadata.source_name(), h.metadata.is_database())
        if key not in groups:
            groups[key] = SourceGroup(name=key[0], is_database=key[1])
        groups[key].hits.append(h)
    return sorted(groups.values(), key=lambda g: -g.best_score)


def assemble(
    hits: Sequence[Hit],
    max_per_group: int = 4,
    max_chars_per_passage: int = 1000,
) -> str:
    """
    Render grouped hits as the LLM context block.

    Args:
        hits: Final hits (any order)
        max_per_group: Passages kept per source, best first
        max_chars_per_passage: Hard truncation length per passage

    Returns:
        Context text; empty string when there are no hits.
    """
    if not hits:
        return ""

    lines: List[str] = []
    for group in group_by_source(hits):
        lines.append("")
        lines.append(group.header)
        lines.append(RULE_LINE)
        ranked = sorted(group.hits, key=lambda h: -h.score)[:max_per_group]
        for h in ranked:
            lines.append(trim_for_prompt(h.content, max_chars_per_passage))
            lines.append("")
    return "\n".join(lines) + "\n"


def render_flat_context(hits: Sequence[Hit], max_chars: int = 800) -> str:
    """Debug view of the retrieved passages: source metadata, score and trimmed content."""
    blocks = []
    for h in hits:
        source = h.metadata.serialize() or "unknown"
        blocks.append(f"[Source: {source} | score={h.score:.4f}]\n{trim_for_prompt(h.content, max_chars)}")
    return "\n---\n".join(blocks)
