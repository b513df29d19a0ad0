"""Integration test fixtures for TruInsights.

Provides an async HTTP client against a fresh app whose service container
uses in-memory SQLite, local audio storage and the mock providers.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from truinsights.api.app import create_app
from truinsights.api.deps import Services
from truinsights.services.extraction import InsightExtractor
from truinsights.services.llm.mock import MockLLM
from truinsights.services.pipeline import JournalPipeline
from truinsights.services.transcription.mock import MockSTT


@pytest.fixture
def services(local_auth, store, audio_storage):
    stt = MockSTT()
    extractor = InsightExtractor(MockLLM())
    return Services(
        auth=local_auth,
        stt=stt,
        extractor=extractor,
        store=store,
        audio_storage=audio_storage,
        pipeline=JournalPipeline(stt, extractor, store, audio_storage),
    )


@pytest.fixture
def app(services):
    """Create a fresh FastAPI application with the test container."""
    application = create_app()
    application.state.services = services
    return application


@pytest.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def auth_headers(async_client):
    """Sign in a fresh user and return its Authorization header."""
    resp = await async_client.post(
        "/api/v1/auth/sign-in", json={"email": "runner@example.com", "password": "pw"}
    )
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}
