"""
LLM client for OpenAI-compatible chat APIs (Gemini OpenAI endpoint, GLM, DeepSeek, etc.).
"""

from __future__ import annotations

import logging
import random
import time
from typing import Optional

from openai import APIError, OpenAI, RateLimitError

from src.settings import env_float, env_str

# Gemini exposes an OpenAI-compatible endpoint; any other compatible server works
# by setting LLM_BASE_URL + LLM_API_KEY + LLM_MODEL.
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_MODEL = "gemini-2.0-flash"

LLM_BASE_URL = env_str("LLM_BASE_URL", DEFAULT_BASE_URL)
LLM_API_KEY = env_str("LLM_API_KEY") or env_str("GEMINI_API_KEY")
LLM_MODEL = env_str("LLM_MODEL", DEFAULT_MODEL)
LLM_TIMEOUT = env_float("LLM_TIMEOUT", 60.0)

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Answer generation failed (API error, exhausted retries, empty response)."""


def _is_rate_limit(exc: Exception) -> bool:
    if isinstance(exc, RateLimitError):
        return True
    error_str = str(exc)
    return "429" in error_str or "concurrency" in error_str.lower()


class ChatClient:
    """OpenAI-compatible chat client: one system prompt + one user prompt per call."""

    def __init__(
        self,
        model_name: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.model_name = model_name or LLM_MODEL
        self.base_url = base_url or LLM_BASE_URL
        api_key = api_key or LLM_API_KEY
        if not api_key:
            raise ValueError("API key required. Set LLM_API_KEY (or GEMINI_API_KEY).")
        self.timeout = timeout if timeout is not None else LLM_TIMEOUT
        self.client = OpenAI(base_url=self.base_url, api_key=api_key, timeout=self.timeout)

    def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int = 1024,
        temperature: float = 0.3,
        max_retries: int = 3,
    ) -> str:
        """
        Generate a reply.

        Rate-limit errors are retried with exponential backoff and jitter;
        any other failure, or exhausting the retries, raises GenerationError.
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})

        retry_count = 0
        while True:
            try:
                response = self.client.chat.completions.create(
                    model=self.model_name,
                    messages=messages,
                    max_tokens=max_tokens,
                    temperature=temperature,
                )
                break
            except APIError as e:
                if not _is_rate_limit(e):
                    logger.error("Error calling API: %s", e)
                    raise GenerationError(f"LLM request failed: {e}") from e
                retry_count += 1
                if retry_count >= max_retries:
                    logger.warning("Rate limit exceeded after %s retries.", max_retries)
                    raise GenerationError(f"rate limited after {max_retries} retries") from e
                backoff = (2 ** retry_count) * 3 + random.uniform(0, 3)
                logger.warning(
                    "Rate limit hit (429/concurrency). Retrying in %s s (attempt %s/%s)",
                    round(backoff, 1),
                    retry_count,
                    max_retries,
                )
                time.sleep(backoff)

        if not response.choices:
            raise GenerationError("empty response from LLM API")
        choice = response.choices[0]
        text = (choice.message.content or "").strip()
        if not text:
            logger.warning("Empty content in response (finish_reason=%s)", getattr(choice, "finish_reason", "?"))
            return "(no content)"
        return text


def create_client(
    model_name: Optional[str] = None,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
) -> ChatClient:
    """Create an OpenAI-compatible chat client from args or LLM_* env variables."""
    return ChatClient(model_name=model_name, api_key=api_key, base_url=base_url)
