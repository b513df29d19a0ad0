"""Unit tests for GroqSTT against an ``httpx.MockTransport``."""

import httpx
import pytest

from truinsights.core.exceptions import TranscriptionFailed
from truinsights.services.transcription.groq import GroqSTT


def _stt(handler) -> GroqSTT:
    client = httpx.AsyncClient(
        base_url="https://stt.test/openai/v1",
        transport=httpx.MockTransport(handler),
    )
    return GroqSTT(
        api_key="gsk-test",
        model="whisper-large-v3-turbo",
        language="en",
        base_url="https://stt.test/openai/v1",
        client=client,
    )


class TestGroqSTTRequest:
    async def test_posts_multipart_with_model_and_language(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["authorization"]
            seen["body"] = request.content
            return httpx.Response(200, json={"text": " Great class today. "})

        text = await _stt(handler).transcribe(b"\x1a\x45\xdf\xa3", "audio/webm")

        assert text == "Great class today."
        assert seen["url"] == "https://stt.test/openai/v1/audio/transcriptions"
        assert seen["auth"] == "Bearer gsk-test"
        assert b'name="model"' in seen["body"]
        assert b"whisper-large-v3-turbo" in seen["body"]
        assert b'name="language"' in seen["body"]
        assert b'filename="journal.webm"' in seen["body"]

    async def test_language_can_be_disabled(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.content
            return httpx.Response(200, json={"text": "hi"})

        await _stt(handler).transcribe(b"data", "audio/wav", language="")
        assert b'name="language"' not in seen["body"]


class TestGroqSTTFailures:
    async def test_empty_audio_never_calls_service(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"text": "x"})

        with pytest.raises(TranscriptionFailed, match="No audio"):
            await _stt(handler).transcribe(b"", "audio/webm")
        assert calls == []

    async def test_non_2xx_surfaces_service_message(self):
        def handler(request):
            return httpx.Response(401, json={"error": {"message": "Invalid API Key"}})

        with pytest.raises(TranscriptionFailed) as exc_info:
            await _stt(handler).transcribe(b"data", "audio/webm")
        assert exc_info.value.reason == "Invalid API Key"
        assert exc_info.value.status_code == 502

    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TranscriptionFailed, match="Could not reach"):
            await _stt(handler).transcribe(b"data", "audio/webm")

    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(TranscriptionFailed, match="timed out"):
            await _stt(handler).transcribe(b"data", "audio/webm")

    async def test_blank_text_is_failure(self):
        def handler(request):
            return httpx.Response(200, json={"text": "   "})

        with pytest.raises(TranscriptionFailed, match="no text"):
            await _stt(handler).transcribe(b"data", "audio/webm")

    async def test_malformed_body(self):
        def handler(request):
            return httpx.Response(200, json={"unexpected": True})

        with pytest.raises(TranscriptionFailed, match="Malformed"):
            await _stt(handler).transcribe(b"data", "audio/webm")


class TestGroqSTTLifecycle:
    async def test_aclose_closes_http_client(self):
        stt = _stt(lambda request: httpx.Response(200, json={"text": "hi"}))
        await stt.aclose()
        assert stt._client.is_closed
