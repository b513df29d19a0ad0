"""
Journal REST endpoints.

Submission runs the full pipeline in-request. All reads are scoped to the
calling user; another user's journal id yields 404.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import FileResponse, RedirectResponse

from truinsights.api.deps import Services, get_services, require_session
from truinsights.core.config import get_settings
from truinsights.core.exceptions import MissingInput
from truinsights.core.models import (
    ErrorResponse,
    JournalEntry,
    JournalStats,
    Session,
    SubmissionResponse,
)
from truinsights.core.utils import audio_mime_type
from truinsights.services.audio import AudioRecording
from truinsights.services.storage import LocalAudioStorage

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/journals",
    tags=["journals"],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.post("", response_model=SubmissionResponse)
async def submit_journal(
    audio: UploadFile | None = File(None),
    duration_seconds: int = Form(0, ge=0),
    session: Session = Depends(require_session),
    services: Services = Depends(get_services),
):
    """Save a recording, then transcribe it and extract insights.

    Transcription or extraction failures still return 200 with the saved
    journal and the matching ``*_error`` field set.
    """
    data = await audio.read() if audio is not None else b""
    if not data:
        raise MissingInput("No audio file provided")

    recording = AudioRecording(
        data=data,
        mime_type=audio.content_type or "audio/webm",
        duration_seconds=duration_seconds,
    )
    return await services.pipeline.submit(session, recording)


@router.get("", response_model=list[JournalEntry])
async def list_journals(
    limit: int | None = Query(None, ge=1, le=100),
    session: Session = Depends(require_session),
    services: Services = Depends(get_services),
):
    """The caller's most recent journals, newest first."""
    limit = limit or get_settings().recent_journals_limit
    return await services.store.list_recent(session.user_id, limit)


@router.get("/stats", response_model=JournalStats)
async def journal_stats(
    session: Session = Depends(require_session),
    services: Services = Depends(get_services),
):
    return await services.store.stats(session.user_id)


@router.get("/{journal_id}", response_model=JournalEntry)
async def get_journal(
    journal_id: str,
    session: Session = Depends(require_session),
    services: Services = Depends(get_services),
):
    return await services.store.get(session.user_id, journal_id)


@router.get("/{journal_id}/audio")
async def get_journal_audio(
    journal_id: str,
    session: Session = Depends(require_session),
    services: Services = Depends(get_services),
):
    """Stream locally stored audio; hosted audio redirects to its public URL."""
    journal = await services.store.get(session.user_id, journal_id)
    if not isinstance(services.audio_storage, LocalAudioStorage):
        return RedirectResponse(journal.audio_url)

    path = services.audio_storage.path_for(journal.audio_url)
    return FileResponse(path, media_type=audio_mime_type(path.name), filename=path.name)


@router.post("/{journal_id}/process", response_model=SubmissionResponse)
async def process_journal(
    journal_id: str,
    session: Session = Depends(require_session),
    services: Services = Depends(get_services),
):
    """Retry transcription (if missing) and insight extraction."""
    return await services.pipeline.reprocess(session, journal_id)
