"""
Ollama provider for offline insight extraction.

Talks to a locally running Ollama server through ``ollama.AsyncClient`` and
asks for JSON-mode output, which keeps small models from adding prose
around the object.
"""

import logging

import httpx
from ollama import AsyncClient, ResponseError

from truinsights.core.config import get_settings
from truinsights.core.exceptions import ExtractionFailed
from truinsights.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


class OllamaLLM(BaseLLM):
    """Local LLM served by Ollama.

    Args:
        base_url: Ollama server URL; defaults to ``settings.ollama_base_url``.
        model: Model tag to run, e.g. ``"llama3.2"``.
    """

    def __init__(self, base_url: str | None = None, model: str | None = None) -> None:
        settings = get_settings()
        self._base_url = base_url or settings.ollama_base_url
        self.model_name = model or settings.ollama_model
        self._client = AsyncClient(host=self._base_url)

    async def generate(self, prompt: str, *, temperature: float | None = None) -> str:
        options = {} if temperature is None else {"temperature": temperature}
        try:
            response = await self._client.chat(
                model=self.model_name,
                messages=[{"role": "user", "content": prompt}],
                format="json",
                options=options,
            )
        except ResponseError as exc:
            logger.warning("Ollama rejected request for %s: %s", self.model_name, exc.error)
            raise ExtractionFailed(f"Ollama error: {exc.error}") from exc
        except (ConnectionError, httpx.TransportError) as exc:
            logger.warning("Ollama unreachable at %s: %s", self._base_url, exc)
            raise ExtractionFailed(f"Could not reach Ollama at {self._base_url}: {exc}") from exc

        text = response.message.content or ""
        if not text.strip():
            raise ExtractionFailed("Ollama returned an empty reply")
        return text
