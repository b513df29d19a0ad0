"""Unit tests for ClaudeLLM provider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from anthropic import APIConnectionError, APITimeoutError, RateLimitError

from truinsights.core.exceptions import ExtractionFailed
from truinsights.services.llm.claude import ClaudeLLM

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_message_response(*blocks):
    """Build a minimal object that looks like ``anthropic.types.Message``."""
    return SimpleNamespace(content=list(blocks))


def _text(text: str):
    return SimpleNamespace(type="text", text=text)


def _mock_settings(**overrides):
    defaults = {
        "claude_api_key": "sk-test-key",
        "claude_model": "claude-sonnet-4-20250514",
        "claude_max_tokens": 1024,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


@pytest.fixture
def mock_client():
    """Return an ``AsyncMock`` mimicking ``AsyncAnthropic``."""
    client = AsyncMock()
    client.messages.create = AsyncMock(
        return_value=_make_message_response(_text('{"mood": "tired"}'))
    )
    return client


@pytest.fixture
def llm(mock_client):
    with patch("truinsights.services.llm.claude.get_settings", return_value=_mock_settings()):
        with patch("truinsights.services.llm.claude.AsyncAnthropic", return_value=mock_client):
            instance = ClaudeLLM()
    return instance


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestClaudeLLMInit:
    def test_defaults_from_settings(self):
        with patch("truinsights.services.llm.claude.get_settings", return_value=_mock_settings()):
            with patch("truinsights.services.llm.claude.AsyncAnthropic") as mock_cls:
                llm = ClaudeLLM()

        mock_cls.assert_called_once_with(api_key="sk-test-key")
        assert llm.model_name == "claude-sonnet-4-20250514"

    def test_explicit_arguments_win(self):
        with patch("truinsights.services.llm.claude.get_settings", return_value=_mock_settings()):
            with patch("truinsights.services.llm.claude.AsyncAnthropic") as mock_cls:
                llm = ClaudeLLM(api_key="sk-other", model="claude-haiku")

        mock_cls.assert_called_once_with(api_key="sk-other")
        assert llm.model_name == "claude-haiku"


class TestClaudeLLMGenerate:
    async def test_sends_single_user_message(self, llm, mock_client):
        result = await llm.generate("Transcript: hi", temperature=0.3)

        assert result == '{"mood": "tired"}'
        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs == {
            "model": "claude-sonnet-4-20250514",
            "max_tokens": 1024,
            "messages": [{"role": "user", "content": "Transcript: hi"}],
            "temperature": 0.3,
        }

    async def test_temperature_omitted_by_default(self, llm, mock_client):
        await llm.generate("p")
        assert "temperature" not in mock_client.messages.create.call_args.kwargs

    async def test_joins_text_blocks_and_skips_others(self, llm, mock_client):
        mock_client.messages.create.return_value = _make_message_response(
            SimpleNamespace(type="thinking", thinking="..."),
            _text('{"mood": '),
            _text('"calm"}'),
        )
        assert await llm.generate("p") == '{"mood": "calm"}'

    async def test_empty_reply(self, llm, mock_client):
        mock_client.messages.create.return_value = _make_message_response(_text("  "))
        with pytest.raises(ExtractionFailed, match="empty reply"):
            await llm.generate("p")


class TestClaudeLLMErrors:
    """SDK errors become ExtractionFailed after a single attempt."""

    async def test_connection_error(self, llm, mock_client):
        mock_client.messages.create.side_effect = APIConnectionError(request=MagicMock())
        with pytest.raises(ExtractionFailed, match="Could not reach Claude"):
            await llm.generate("p")
        assert mock_client.messages.create.await_count == 1

    async def test_timeout(self, llm, mock_client):
        mock_client.messages.create.side_effect = APITimeoutError(request=MagicMock())
        with pytest.raises(ExtractionFailed, match="timed out"):
            await llm.generate("p")

    async def test_status_error(self, llm, mock_client):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        mock_client.messages.create.side_effect = RateLimitError(
            "rate limited", response=httpx.Response(429, request=request), body=None
        )
        with pytest.raises(ExtractionFailed, match="HTTP 429"):
            await llm.generate("p")
        assert mock_client.messages.create.await_count == 1


class TestClaudeLLMLifecycle:
    async def test_aclose_closes_sdk_client(self, llm, mock_client):
        await llm.aclose()
        mock_client.close.assert_awaited_once()
