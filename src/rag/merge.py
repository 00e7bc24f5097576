"""
Merging of per-table hit lists.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from .retriever import Hit


def merge_hits(hit_lists: Iterable[List[Hit]], max_results: int) -> List[Hit]:
    """
    Dedupe by passage id (keep highest score), then take top max_results.

    Scores are merged as-is across tables. Equal scores keep the order in
    which the lists (and the hits inside them) were given.
    """
    by_id: Dict[str, Hit] = {}
    for hits in hit_lists:
        for h in hits:
            if h.id not in by_id or h.score > by_id[h.id].score:
                by_id[h.id] = h
    merged = sorted(by_id.values(), key=lambda h: -h.score)
    return merged[:max_results]
