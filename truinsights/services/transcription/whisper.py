"""Offline transcription with faster-whisper.

Used when ``stt_provider="local"``. Models are loaded on first use and kept
per (size, device, compute type) for the life of the process.
"""

import asyncio
import io
import logging
from functools import lru_cache

from faster_whisper import WhisperModel

from truinsights.core.config import get_settings
from truinsights.core.exceptions import TranscriptionFailed
from truinsights.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


@lru_cache(maxsize=2)
def _load_model(size: str, device: str, compute_type: str) -> WhisperModel:
    logger.info("Loading faster-whisper %s on %s (%s)", size, device, compute_type)
    return WhisperModel(size, device=device, compute_type=compute_type)


class WhisperSTT(BaseSTT):
    """Local Whisper provider.

    Args:
        model_size: faster-whisper size; defaults to ``settings.whisper_model``.
        device: ``"cpu"`` or ``"cuda"``.
        compute_type: CTranslate2 quantization, e.g. ``"int8"``.
        language: ISO hint; ``""`` lets Whisper detect the language.
    """

    def __init__(
        self,
        model_size: str | None = None,
        device: str = "cpu",
        compute_type: str = "int8",
        language: str | None = None,
    ) -> None:
        settings = get_settings()
        self._model_key = (model_size or settings.whisper_model, device, compute_type)
        self._language = settings.stt_language if language is None else language

    def _transcribe_sync(self, audio: bytes, language: str | None) -> str:
        # Segments are a lazy generator; consume it on the worker thread
        segments, _info = _load_model(*self._model_key).transcribe(
            io.BytesIO(audio), language=language, vad_filter=True
        )
        return " ".join(text for seg in segments if (text := seg.text.strip()))

    async def transcribe(self, audio: bytes, mime_type: str, **kwargs) -> str:
        if not audio:
            raise TranscriptionFailed("No audio file provided")

        language = kwargs.get("language", self._language) or None
        try:
            text = await asyncio.to_thread(self._transcribe_sync, audio, language)
        except (RuntimeError, ValueError, OSError) as exc:
            raise TranscriptionFailed(f"Local transcription failed: {exc}") from exc

        if not text:
            raise TranscriptionFailed("Transcription produced no text")
        return text
