"""LLM package initialization."""

from fitness_agent.llm.factory import LLMFactory
from fitness_agent.llm.provider import LLMProvider

__all__ = [
    "LLMFactory",
    "LLMProvider",
]
