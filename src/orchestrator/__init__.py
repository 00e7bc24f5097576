"""
Orchestrator: retrieval strategy and answer generation flow.
"""

from .agent import QAAgent, QAResult

__all__ = [
    "QAAgent",
    "QAResult",
]
