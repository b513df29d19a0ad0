"""Offline STT provider returning the fixed mock transcript."""

from truinsights.core.exceptions import TranscriptionFailed
from truinsights.core.mocks import MOCK_TRANSCRIPT
from truinsights.services.transcription.base import BaseSTT


class MockSTT(BaseSTT):
    """Deterministic stand-in used for demos and pipeline tests."""

    async def transcribe(self, audio: bytes, mime_type: str, **kwargs) -> str:
        if not audio:
            raise TranscriptionFailed("No audio provided")
        return MOCK_TRANSCRIPT
