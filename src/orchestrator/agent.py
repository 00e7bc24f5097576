"""
QA agent: hybrid retrieval, then answer generation with or without context.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from src.generation import AnswerGenerator, GenerationConfig
from src.generation.context_builder import render_flat_context
from src.generation.prompts import FAILURE_MESSAGE
from src.llm.client import GenerationError
from src.rag.errors import EmbeddingError, RetrievalError
from src.rag.retriever import Retriever

logger = logging.getLogger(__name__)


@dataclass
class QAResult:
    """Outcome of one question. ``error`` is set only for infrastructure failures."""

    question: str
    answer: str = ""
    context: Optional[str] = None
    has_context: bool = False
    hit_count: int = 0
    top_score: float = 0.0
    error: Optional[str] = None


class QAAgent:
    """Answers a question from retrieved passages, or from general knowledge when none match."""

    def __init__(
        self,
        retriever: Retriever,
        generator: AnswerGenerator,
        config: Optional[GenerationConfig] = None,
    ):
        self.retriever = retriever
        self.generator = generator
        self.config = config or GenerationConfig()

    async def answer(self, question: str, show_context: bool = False) -> QAResult:
        """
        Retrieve and answer.

        Zero hits is a normal outcome routed to the general-knowledge answer.
        Embedding, retrieval and generation failures produce a generic failure
        message with ``error`` set instead of raising.
        """
        result = QAResult(question=question)
        try:
            hits = await self.retriever.search(question)
            result.hit_count = len(hits)

            if not hits:
                logger.info("No passages for question; answering from general knowledge")
                gen = await asyncio.to_thread(self.generator.answer_general, question)
                result.answer = gen.answer
                result.has_context = False
                return result

            if show_context:
                result.context = render_flat_context(hits, max_chars=self.config.show_context_chars)

            gen = await asyncio.to_thread(self.generator.answer_with_context, question, hits)
            result.answer = gen.answer
            result.has_context = True
            result.top_score = max(h.score for h in hits)
        except (EmbeddingError, RetrievalError, GenerationError) as exc:
            logger.error("Question failed (%s): %s", type(exc).__name__, exc)
            result.answer = FAILURE_MESSAGE
            result.error = str(exc) or type(exc).__name__
        return result
