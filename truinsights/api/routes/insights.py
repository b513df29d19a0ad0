"""
Stand-alone transcription and insight extraction endpoints.

The ``-mock`` variants return fixed payloads without calling any provider
and need no session, so the UI can be exercised offline.
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from truinsights.api.deps import Services, get_services, require_session
from truinsights.core.exceptions import MissingInput
from truinsights.core.mocks import MOCK_INSIGHTS, MOCK_TRANSCRIPT
from truinsights.core.models import (
    ErrorResponse,
    ExtractionRequest,
    ExtractionResponse,
    Session,
    TranscriptionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["insights"],
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)


@router.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe(
    audio: UploadFile | None = File(None),
    _session: Session = Depends(require_session),
    services: Services = Depends(get_services),
):
    """Transcribe an uploaded audio file."""
    data = await audio.read() if audio is not None else b""
    if not data:
        raise MissingInput("No audio file provided")
    transcript = await services.stt.transcribe(data, audio.content_type or "audio/webm")
    return TranscriptionResponse(transcript=transcript)


@router.post("/extract-insights", response_model=ExtractionResponse)
async def extract_insights(
    body: ExtractionRequest,
    _session: Session = Depends(require_session),
    services: Services = Depends(get_services),
):
    """Extract structured insights from a transcript."""
    if not body.transcript or not body.transcript.strip():
        raise MissingInput("No transcript provided")
    extracted = await services.extractor.extract(body.transcript)
    return ExtractionResponse(extracted=extracted)


@router.post("/transcribe-mock", response_model=TranscriptionResponse)
async def transcribe_mock():
    return TranscriptionResponse(transcript=MOCK_TRANSCRIPT)


@router.post("/extract-insights-mock", response_model=ExtractionResponse)
async def extract_insights_mock():
    return ExtractionResponse(extracted=MOCK_INSIGHTS)
