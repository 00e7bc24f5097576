"""Configuration for answer generation."""

from __future__ import annotations

from dataclasses import dataclass

from src.settings import env_float, env_int


@dataclass
class GenerationConfig:
    """Settings for RAG answer generation."""

    max_tokens: int = 1024
    temperature: float = 0.3
    # Hits handed to the context assembler, and its grouping limits.
    max_context_hits: int = 8
    max_per_group: int = 4
    max_chars_per_passage: int = 1000
    # Debug context returned when show_context is requested.
    show_context_chars: int = 800

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        base = cls()
        return cls(
            max_tokens=env_int("LLM_MAX_TOKENS", base.max_tokens),
            temperature=env_float("LLM_TEMPERATURE", base.temperature),
            max_context_hits=env_int("GEN_MAX_CONTEXT_HITS", base.max_context_hits),
            max_per_group=env_int("GEN_MAX_PER_GROUP", base.max_per_group),
            max_chars_per_passage=env_int("GEN_MAX_CHARS_PER_PASSAGE", base.max_chars_per_passage),
        )
