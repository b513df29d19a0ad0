"""
Chat model providers used for insight extraction.

``create_llm()`` returns the provider named by ``settings.llm_provider``:
``"claude"``, ``"ollama"`` or ``"mock"``.
"""

from truinsights.core.config import get_settings

from .base import BaseLLM

__all__ = ["BaseLLM", "create_llm"]


def create_llm(provider: str | None = None, **kwargs) -> BaseLLM:
    """Build an LLM provider; SDK modules are imported on demand.

    Raises:
        ValueError: ``provider`` is not one of the known names.
    """
    provider = provider or get_settings().llm_provider
    if provider == "claude":
        from .claude import ClaudeLLM

        return ClaudeLLM(**kwargs)
    if provider == "ollama":
        from .ollama import OllamaLLM

        return OllamaLLM(**kwargs)
    if provider == "mock":
        from .mock import MockLLM

        return MockLLM()
    raise ValueError(f"Unknown LLM provider: {provider}")
