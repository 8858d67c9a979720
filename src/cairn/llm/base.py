"""Abstract extraction provider interface."""

from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable


class ExtractionProvider(ABC):
    """Chat, structured extraction and embedding behind one interface.

    The offline FallbackProvider and the networked providers satisfy the
    same contract so callers can swap them transparently.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier (e.g., 'fallback', 'openai')."""
        ...

    @abstractmethod
    async def chat(self, prompt: str, system_prompt: str | None = None) -> str:
        """Return a free-text answer to a prompt."""
        ...

    @abstractmethod
    async def extract_structured(
        self, prompt: str, system_prompt: str | None = None
    ) -> dict[str, Any] | list[Any]:
        """Return JSON-shaped data for a prompt.

        Raises:
            StructuredOutputError: If the provider output is not valid JSON
                after one re-parse attempt.
        """
        ...

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Return a fingerprint vector for text."""
        ...


@runtime_checkable
class Embedder(Protocol):
    """Anything that can embed text."""

    async def embed(self, text: str) -> list[float]: ...
