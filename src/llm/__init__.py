"""
LLM client module for OpenAI-compatible chat APIs.
"""

from .client import ChatClient, GenerationError, create_client

__all__ = ["ChatClient", "GenerationError", "create_client"]
