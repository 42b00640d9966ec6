"""
Provider protocols used by the orchestrator.

Any object with a matching ``agenerate`` coroutine can stand in for a
provider.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ChatProvider(Protocol):
    """Chat-completion provider with separate system and user messages."""

    async def agenerate(
        self,
        prompt: str,
        system: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """Generate a completion for ``prompt``."""
        ...


@runtime_checkable
class CompletionProvider(Protocol):
    """Provider taking one combined prompt string."""

    async def agenerate(self, prompt: str) -> str:
        """Generate a completion for ``prompt``."""
        ...
