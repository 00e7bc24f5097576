"""
Answer generator: assembles grouped context, calls the LLM, returns answer text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from src.llm.client import ChatClient
from src.rag.retriever import Hit

from .config import GenerationConfig
from .context_builder import assemble
from .prompts import GENERAL_SYSTEM_PROMPT, RAG_PROMPT, RAG_SYSTEM_PROMPT


@dataclass
class GeneratedAnswer:
    """Result of answer generation."""

    answer: str
    context: str = ""


class AnswerGenerator:
    """Generate answers from a question and retrieved hits using the LLM."""

    def __init__(self, client: ChatClient, config: Optional[GenerationConfig] = None):
        self.client = client
        self.config = config or GenerationConfig()

    def build_context(self, hits: List[Hit]) -> str:
        top = hits[: self.config.max_context_hits]
        return assemble(
            top,
            max_per_group=self.config.max_per_group,
            max_chars_per_passage=self.config.max_chars_per_passage,
        )

    def answer_with_context(self, question: str, hits: List[Hit]) -> GeneratedAnswer:
        """Answer from the grouped regulation/database context."""
        context = self.build_context(hits)
        prompt = RAG_PROMPT.format(context=context, question=question)
        answer = self.client.generate(
            RAG_SYSTEM_PROMPT,
            prompt,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
        )
        return GeneratedAnswer(answer=answer, context=context)

    def answer_general(self, question: str) -> GeneratedAnswer:
        """No relevant passage: answer as the general academic assistant."""
        answer = self.client.generate(
            GENERAL_SYSTEM_PROMPT,
            question,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
        )
        return GeneratedAnswer(answer=answer)
