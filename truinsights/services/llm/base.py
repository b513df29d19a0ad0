"""Abstract base class for insight LLM providers."""

from abc import ABC, abstractmethod


class BaseLLM(ABC):
    """A chat model that answers one prompt with one text reply."""

    #: Model identifier, logged with each extraction.
    model_name: str = ""

    @abstractmethod
    async def generate(self, prompt: str, *, temperature: float | None = None) -> str:
        """Send ``prompt`` as a single user turn and return the reply text.

        Implementations make exactly one request and never retry.

        Raises:
            ExtractionFailed: The provider was unreachable, rejected the
                request, or replied without any text.
        """

    async def aclose(self) -> None:
        """Release network clients; the default holds none."""
