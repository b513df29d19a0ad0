"""Offline LLM provider that answers every prompt with the mock insights."""

from truinsights.core.mocks import MOCK_INSIGHTS
from truinsights.services.llm.base import BaseLLM


class MockLLM(BaseLLM):
    """Returns the golden insights as a fenced JSON reply.

    The reply is wrapped in a ```json fence on purpose so the extractor's
    fence handling is exercised on every offline run.
    """

    model_name = "mock"

    async def generate(self, prompt: str, *, temperature: float | None = None) -> str:
        return f"```json\n{MOCK_INSIGHTS.model_dump_json(indent=2)}\n```"
