"""
Speech-to-text providers.

``create_stt()`` returns the provider named by ``settings.stt_provider``:
``"groq"`` (hosted Whisper), ``"local"`` (faster-whisper) or ``"mock"``.
"""

from truinsights.core.config import get_settings

from .base import BaseSTT

__all__ = ["BaseSTT", "create_stt"]


def create_stt(provider: str | None = None, **kwargs) -> BaseSTT:
    """Build an STT provider.

    Provider modules are imported on demand, so faster-whisper is only
    loaded when ``provider == "local"``.

    Raises:
        ValueError: ``provider`` is not one of the known names.
    """
    provider = provider or get_settings().stt_provider
    if provider == "groq":
        from .groq import GroqSTT

        return GroqSTT(**kwargs)
    if provider == "local":
        from .whisper import WhisperSTT

        return WhisperSTT(**kwargs)
    if provider == "mock":
        from .mock import MockSTT

        return MockSTT()
    raise ValueError(f"Unknown STT provider: {provider}")
