"""
Answer generation module for the RAG pipeline.

- Context assembly: hits grouped by source document / database table
- Vietnamese prompts for the regulation-grounded and general answer paths
- Answer generation through the chat client
"""

from .config import GenerationConfig
from .context_builder import assemble, group_by_source, render_flat_context, trim_for_prompt
from .generator import AnswerGenerator, GeneratedAnswer
from .prompts import FAILURE_MESSAGE, GENERAL_SYSTEM_PROMPT, RAG_PROMPT, RAG_SYSTEM_PROMPT

__all__ = [
    "assemble",
    "group_by_source",
    "render_flat_context",
    "trim_for_prompt",
    "GenerationConfig",
    "AnswerGenerator",
    "GeneratedAnswer",
    "FAILURE_MESSAGE",
    "GENERAL_SYSTEM_PROMPT",
    "RAG_PROMPT",
    "RAG_SYSTEM_PROMPT",
]
