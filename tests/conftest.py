"""Shared pytest fixtures for the TruInsights test suite.

Provides mock LLM/STT providers, an in-memory SQLite engine with the
journal and auth tables, and small audio payloads.
"""

import io
import math
import struct
import wave
from unittest.mock import AsyncMock

import pytest

from truinsights.core.mocks import MOCK_INSIGHTS, MOCK_TRANSCRIPT

# ---------------------------------------------------------------------------
# LLM Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm():
    """Mock LLM provider that replies with the golden insights as bare JSON."""
    from truinsights.services.llm.base import BaseLLM

    llm = AsyncMock(spec=BaseLLM)
    llm.generate.return_value = MOCK_INSIGHTS.model_dump_json()
    return llm


# ---------------------------------------------------------------------------
# STT Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_stt():
    """Mock STT provider returning the golden transcript."""
    from truinsights.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = MOCK_TRANSCRIPT
    return stt


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def wav_bytes():
    """Two seconds of a 440Hz tone as a 16kHz mono 16-bit WAV container."""
    sample_rate = 16000
    frames = b"".join(
        struct.pack("<h", int(8000 * math.sin(2 * math.pi * 440 * i / sample_rate)))
        for i in range(sample_rate * 2)
    )
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(frames)
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with tables, dispose after test."""
    from sqlalchemy.ext.asyncio import create_async_engine

    from truinsights.services.storage.database import init_db

    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    from sqlalchemy.ext.asyncio import async_sessionmaker

    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    """Yield an AsyncSession bound to the test engine; rolls back after test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def store(session_factory):
    """SQLJournalStore over the in-memory database."""
    from truinsights.services.storage.repository import SQLJournalStore

    return SQLJournalStore(session_factory)


@pytest.fixture
def local_auth(session_factory):
    from truinsights.services.auth.local import LocalAuth

    return LocalAuth(session_factory)


@pytest.fixture
def audio_storage(tmp_path):
    from truinsights.services.storage.files import LocalAudioStorage

    return LocalAudioStorage(tmp_path / "recordings")
