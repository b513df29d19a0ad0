"""
Abstract base class for Speech-to-Text providers.

All STT implementations (hosted Whisper, local faster-whisper, mock) must
implement this interface, enabling provider-agnostic transcription in the
service layer.
"""

from abc import ABC, abstractmethod


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe(self, audio: bytes, mime_type: str, **kwargs) -> str:
        """Transcribe an encoded audio payload to plain text.

        Exactly one attempt is made per call; retrying is the caller's decision.

        Args:
            audio: Encoded audio bytes (webm, wav, ...).
            mime_type: MIME type of ``audio``.
            **kwargs: Provider-specific options (language, etc.).

        Returns:
            The transcript text.

        Raises:
            TranscriptionFailed: Empty input, network error, non-2xx response,
                or no text produced.
        """

    async def aclose(self) -> None:
        """Release network clients; the default holds none."""
