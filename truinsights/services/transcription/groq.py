"""Hosted Whisper STT over the OpenAI-compatible transcription endpoint.

Posts the audio as multipart form data together with the model identifier
and a language hint, and reads the ``text`` field of the JSON reply.
Defaults target Groq (``whisper-large-v3-turbo``).
"""

import logging

import httpx

from truinsights.core.config import get_settings
from truinsights.core.exceptions import TranscriptionFailed
from truinsights.core.utils import audio_extension
from truinsights.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Pull a human-readable message out of a non-2xx response."""
    try:
        body = response.json()
    except ValueError:
        return f"Transcription service returned {response.status_code}: {response.text[:200]}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str):
        return error
    return f"Transcription service returned {response.status_code}"


class GroqSTT(BaseSTT):
    """Speech-to-text through a hosted Whisper API.

    Args:
        api_key: Bearer token for the service (falls back to settings).
        model: Model identifier sent with each request.
        language: ISO 639-1 language hint; empty string disables the hint.
        base_url: API root, e.g. ``https://api.groq.com/openai/v1``.
        timeout: Request timeout in seconds.
        client: Pre-built ``httpx.AsyncClient`` (tests inject a mock transport).
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        language: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.groq_api_key
        self._model = model or settings.stt_model
        self._language = settings.stt_language if language is None else language
        self._base_url = (base_url or settings.stt_base_url).rstrip("/")
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout or settings.stt_timeout,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def transcribe(self, audio: bytes, mime_type: str, **kwargs) -> str:
        if not audio:
            raise TranscriptionFailed("No audio file provided")

        form = {"model": self._model, "response_format": "json"}
        language = kwargs.get("language", self._language)
        if language:
            form["language"] = language

        filename = f"journal.{audio_extension(mime_type)}"
        logger.info("Transcribing audio: %s bytes (%s)", len(audio), mime_type)

        try:
            response = await self._client.post(
                "/audio/transcriptions",
                headers={"Authorization": f"Bearer {self._api_key}"},
                files={"file": (filename, audio, mime_type)},
                data=form,
            )
        except httpx.TimeoutException as exc:
            logger.warning("Transcription timeout: %s", exc)
            raise TranscriptionFailed(f"Transcription request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.warning("Transcription connection error: %s", exc)
            raise TranscriptionFailed(f"Could not reach transcription service: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning("Transcription rejected (%s): %s", response.status_code, message)
            raise TranscriptionFailed(message)

        try:
            text = response.json()["text"]
        except (ValueError, KeyError, TypeError) as exc:
            raise TranscriptionFailed("Malformed transcription response") from exc

        text = (text or "").strip()
        if not text:
            raise TranscriptionFailed("Transcription produced no text")
        return text
