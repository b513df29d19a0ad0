"""Journal submission pipeline.

Ties the services together for one recording::

    upload audio -> create journal -> transcribe -> save transcript
                 -> extract insights -> save insights

Losing the audio or the journal row aborts the submission. Losing a
transcript or insights does not: the journal stays saved and the response
carries the failure reason so the user can retry with ``reprocess``.
"""

import hashlib
import logging

from truinsights.core.exceptions import (
    ExtractionFailed,
    SubmissionInProgress,
    TranscriptionFailed,
)
from truinsights.core.models import JournalEntry, Session, SubmissionResponse
from truinsights.core.utils import audio_mime_type
from truinsights.services.audio import AudioRecording
from truinsights.services.extraction import InsightExtractor
from truinsights.services.storage.base import BaseAudioStorage, BaseJournalStore
from truinsights.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


class JournalPipeline:
    """Runs recordings through storage, transcription and insight extraction.

    Args:
        stt: Speech-to-text provider.
        extractor: Insight extractor.
        store: Journal row persistence.
        audio_storage: Audio object persistence.
    """

    def __init__(
        self,
        stt: BaseSTT,
        extractor: InsightExtractor,
        store: BaseJournalStore,
        audio_storage: BaseAudioStorage,
    ) -> None:
        self._stt = stt
        self._extractor = extractor
        self._store = store
        self._audio_storage = audio_storage
        self._in_flight: set[tuple[str, str]] = set()

    async def submit(self, session: Session, recording: AudioRecording) -> SubmissionResponse:
        """Persist a recording and derive its transcript and insights.

        Raises:
            SubmissionInProgress: The same audio is already being submitted
                for this user.
            PersistenceFailed: The audio or the journal row could not be
                saved; nothing is left behind in the journals table.
        """
        key = (session.user_id, hashlib.sha256(recording.data).hexdigest())
        if key in self._in_flight:
            raise SubmissionInProgress()
        self._in_flight.add(key)

        try:
            audio_url = await self._audio_storage.upload(
                session.user_id, recording.data, recording.mime_type
            )
            journal = await self._store.create(
                session.user_id, audio_url, recording.duration_seconds
            )
            return await self._process(journal, recording.data, recording.mime_type)
        finally:
            self._in_flight.discard(key)

    async def reprocess(self, session: Session, journal_id: str) -> SubmissionResponse:
        """Re-run the missing steps for an existing journal.

        The stored audio is only fetched when the transcript is missing;
        insights are always extracted again.
        """
        journal = await self._store.get(session.user_id, journal_id)
        audio = b""
        mime_type = audio_mime_type(journal.audio_url)
        if journal.transcript is None:
            audio = await self._audio_storage.download(journal.audio_url)
        logger.info("Reprocessing journal %s", journal_id)
        return await self._process(journal, audio, mime_type)

    async def _process(
        self, journal: JournalEntry, audio: bytes, mime_type: str
    ) -> SubmissionResponse:
        transcript = journal.transcript
        if transcript is None:
            try:
                transcript = await self._stt.transcribe(audio, mime_type)
            except TranscriptionFailed as exc:
                logger.warning("Transcription failed for journal %s: %s", journal.id, exc.reason)
                return SubmissionResponse(journal=journal, transcription_error=exc.reason)
            journal = await self._store.update(journal.user_id, journal.id, transcript=transcript)

        try:
            insights = await self._extractor.extract(transcript)
        except ExtractionFailed as exc:
            logger.warning("Extraction failed for journal %s: %s", journal.id, exc.reason)
            return SubmissionResponse(journal=journal, extraction_error=exc.reason)

        journal = await self._store.update(journal.user_id, journal.id, insights=insights)
        logger.info("Journal %s processed", journal.id)
        return SubmissionResponse(journal=journal)
