"""Tests for WhisperSTT (mocked WhisperModel, no model download needed)."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

import truinsights.services.transcription.whisper as whisper_module
from truinsights.core.exceptions import TranscriptionFailed
from truinsights.services.transcription.whisper import WhisperSTT


def _make_segment(text="Hello world"):
    return SimpleNamespace(text=text, start=0.0, end=1.0)


@pytest.fixture(autouse=True)
def _clear_model_cache():
    """Start every test with no models loaded."""
    whisper_module._load_model.cache_clear()
    yield
    whisper_module._load_model.cache_clear()


@pytest.fixture
def mock_whisper_model():
    model = MagicMock()
    model.transcribe.return_value = (
        iter([_make_segment(" Core work was tough. "), _make_segment(" Loved it. ")]),
        SimpleNamespace(language="en"),
    )
    return model


class TestWhisperSTT:
    async def test_joins_segments(self, mock_whisper_model):
        with patch.object(whisper_module, "WhisperModel", return_value=mock_whisper_model):
            stt = WhisperSTT(model_size="tiny", language="en")
            text = await stt.transcribe(b"RIFF....", "audio/wav")

        assert text == "Core work was tough. Loved it."
        _, kwargs = mock_whisper_model.transcribe.call_args
        assert kwargs["language"] == "en"

    async def test_model_loaded_once(self, mock_whisper_model):
        mock_whisper_model.transcribe.side_effect = lambda *a, **k: (
            iter([_make_segment("ok")]),
            SimpleNamespace(language="en"),
        )
        with patch.object(
            whisper_module, "WhisperModel", return_value=mock_whisper_model
        ) as model_cls:
            stt = WhisperSTT(model_size="tiny")
            await stt.transcribe(b"one", "audio/wav")
            await stt.transcribe(b"two", "audio/wav")
        model_cls.assert_called_once_with("tiny", device="cpu", compute_type="int8")

    async def test_empty_audio(self):
        with pytest.raises(TranscriptionFailed):
            await WhisperSTT(model_size="tiny").transcribe(b"", "audio/wav")

    async def test_silence_is_failure(self, mock_whisper_model):
        mock_whisper_model.transcribe.return_value = (iter([]), SimpleNamespace(language="en"))
        with patch.object(whisper_module, "WhisperModel", return_value=mock_whisper_model):
            with pytest.raises(TranscriptionFailed, match="no text"):
                await WhisperSTT(model_size="tiny").transcribe(b"data", "audio/wav")

    async def test_decoder_error_is_translated(self, mock_whisper_model):
        mock_whisper_model.transcribe.side_effect = ValueError("bad audio")
        with patch.object(whisper_module, "WhisperModel", return_value=mock_whisper_model):
            with pytest.raises(TranscriptionFailed, match="bad audio"):
                await WhisperSTT(model_size="tiny").transcribe(b"data", "audio/wav")
