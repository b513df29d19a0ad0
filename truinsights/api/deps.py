"""
FastAPI dependencies: the service container and the session gate.

``build_services()`` wires providers from settings once per process; the
app keeps the result on ``app.state.services`` and routes receive it via
``Depends(get_services)``. Tests assign their own container instead.
"""

from dataclasses import dataclass

from fastapi import Depends, Request

from truinsights.core.config import Settings, get_settings
from truinsights.core.exceptions import AuthRequired
from truinsights.core.models import Session
from truinsights.services.auth import BaseAuth, create_auth
from truinsights.services.extraction import InsightExtractor
from truinsights.services.llm import create_llm
from truinsights.services.pipeline import JournalPipeline
from truinsights.services.storage import (
    BaseAudioStorage,
    BaseJournalStore,
    create_audio_storage,
    create_journal_store,
)
from truinsights.services.transcription import BaseSTT, create_stt


@dataclass
class Services:
    """Everything the routes need, constructed up front."""

    auth: BaseAuth
    stt: BaseSTT
    extractor: InsightExtractor
    store: BaseJournalStore
    audio_storage: BaseAudioStorage
    pipeline: JournalPipeline

    async def aclose(self) -> None:
        """Close every provider's network client."""
        for service in (self.auth, self.stt, self.extractor, self.store, self.audio_storage):
            await service.aclose()


def build_services(settings: Settings | None = None) -> Services:
    settings = settings or get_settings()
    stt = create_stt(settings.stt_provider)
    extractor = InsightExtractor(create_llm(settings.llm_provider))
    store = create_journal_store(settings.backend_provider)
    audio_storage = create_audio_storage(settings.backend_provider)
    return Services(
        auth=create_auth(settings.backend_provider),
        stt=stt,
        extractor=extractor,
        store=store,
        audio_storage=audio_storage,
        pipeline=JournalPipeline(stt, extractor, store, audio_storage),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def bearer_token(request: Request) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    header = request.headers.get("authorization", "")
    if not header.startswith("Bearer "):
        return None
    return header[len("Bearer ") :].strip() or None


async def require_session(
    request: Request,
    services: Services = Depends(get_services),
) -> Session:
    """Resolve the caller's session or raise :class:`AuthRequired` (401)."""
    session = await services.auth.current_session(bearer_token(request))
    if session is None:
        raise AuthRequired()
    return session
