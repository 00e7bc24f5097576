"""
Typed view over the semicolon-delimited passage metadata bag.

Stored form: ``doc:quyche;title:Quy chế đào tạo;section:Điều 16``. Segments
without a colon (e.g. ``public.students`` for database rows) are kept as
bare values. Parsing is best-effort and never raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

UNKNOWN_SOURCE = "Không xác định"


@dataclass(frozen=True)
class PassageMetadata:
    """Ordered ``key:value`` fields; bare segments have an empty key."""

    fields: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def parse(cls, raw: Optional[str]) -> "PassageMetadata":
        if not raw:
            return cls()
        pairs: List[Tuple[str, str]] = []
        for segment in raw.split(";"):
            segment = segment.strip()
            if not segment:
                continue
            if ":" in segment:
                key, value = segment.split(":", 1)
                pairs.append((key.strip(), value.strip()))
            else:
                pairs.append(("", segment))
        return cls(tuple(pairs))

    @classmethod
    def from_mapping(cls, mapping: Dict[str, str]) -> "PassageMetadata":
        return cls(tuple((str(k), str(v)) for k, v in mapping.items()))

    def serialize(self) -> str:
        parts = []
        for key, value in self.fields:
            parts.append(f"{key}:{value}" if key else value)
        return ";".join(parts)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        for k, v in self.fields:
            if k == key and v:
                return v
        return default

    def __bool__(self) -> bool:
        return bool(self.fields)

    def __str__(self) -> str:
        return self.serialize()

    def source_name(self) -> str:
        """Display name: title, then doc, then the first segment."""
        for key in ("title", "doc"):
            value = self.get(key)
            if value:
                return value
        if self.fields:
            key, value = self.fields[0]
            first = f"{key}:{value}" if key else value
            return first or UNKNOWN_SOURCE
        return UNKNOWN_SOURCE

    def is_database(self) -> bool:
        """True for passages derived from database tables rather than documents."""
        if self.get("table") or self.get("schema"):
            return True
        return "database" in self.serialize().lower()


def as_metadata(value: "PassageMetadata | str | Dict[str, str] | None") -> PassageMetadata:
    """Coerce raw strings / dicts / None at the storage boundary."""
    if isinstance(value, PassageMetadata):
        return value
    if isinstance(value, dict):
        return PassageMetadata.from_mapping(value)
    return PassageMetadata.parse(value)


@dataclass
class MetadataBuilder:
    """Accumulates fields in order for ingestion code."""

    items: Dict[str, str] = field(default_factory=dict)

    def add(self, key: str, value: Optional[str]) -> "MetadataBuilder":
        if value is not None and str(value).strip():
            # ';' is the field separator in the stored form
            self.items[key] = str(value).replace(";", ",").strip()
        return self

    def build(self) -> PassageMetadata:
        return PassageMetadata.from_mapping(self.items)
