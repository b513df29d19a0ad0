"""
Claude provider for insight extraction.

Wraps ``anthropic.AsyncAnthropic``. Each extraction is one Messages API call
with the whole instruction in a single user turn.
"""

import logging

from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncAnthropic,
)

from truinsights.core.config import get_settings
from truinsights.core.exceptions import ExtractionFailed
from truinsights.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


class ClaudeLLM(BaseLLM):
    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> None:
        settings = get_settings()
        self.model_name = model or settings.claude_model
        self._max_tokens = max_tokens or settings.claude_max_tokens
        self._client = AsyncAnthropic(api_key=api_key or settings.claude_api_key)

    async def aclose(self) -> None:
        await self._client.close()

    async def generate(self, prompt: str, *, temperature: float | None = None) -> str:
        request: dict = {
            "model": self.model_name,
            "max_tokens": self._max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if temperature is not None:
            request["temperature"] = temperature

        try:
            message = await self._client.messages.create(**request)
        except APITimeoutError as exc:
            logger.warning("Claude request timed out: %s", exc)
            raise ExtractionFailed("Claude request timed out") from exc
        except APIConnectionError as exc:
            logger.warning("Claude connection error: %s", exc)
            raise ExtractionFailed(f"Could not reach Claude: {exc}") from exc
        except APIStatusError as exc:
            logger.warning("Claude rejected extraction request (%s): %s", exc.status_code, exc)
            raise ExtractionFailed(f"Claude returned HTTP {exc.status_code}") from exc

        # Thinking and tool blocks carry no completion text
        text = "".join(block.text for block in message.content if block.type == "text")
        if not text.strip():
            raise ExtractionFailed("Claude returned an empty reply")
        return text
