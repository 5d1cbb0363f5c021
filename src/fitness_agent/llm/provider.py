"""Abstract base class for LLM providers."""

from abc import ABC, abstractmethod
from typing import Any


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    This interface allows pluggable chat-completion backends. Calls may raise;
    graph nodes are expected to recover from failures themselves.
    """

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, str]],
        max_tokens: int | None = None,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> str:
        """Generate chat completion from messages.

        Args:
            messages: List of message dicts with 'role' and 'content'.
            max_tokens: Maximum tokens to generate.
            temperature: Sampling temperature.
            **kwargs: Additional provider-specific parameters.

        Returns:
            Generated chat response.
        """
        pass

    async def complete(self, prompt: str, **kwargs: Any) -> str:
        """Generate a completion for a single user prompt."""
        return await self.chat([{"role": "user", "content": prompt}], **kwargs)

    async def aclose(self) -> None:
        """Release underlying client resources."""
        return None
