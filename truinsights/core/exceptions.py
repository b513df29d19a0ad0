"""
TruInsights exception hierarchy.

All application-specific exceptions inherit from TruInsightsError,
enabling centralized error handling in the API middleware layer.
"""

from datetime import UTC, datetime


class TruInsightsError(Exception):
    """Base exception for all TruInsights errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "TRUINSIGHTS_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class DeviceUnavailable(TruInsightsError):
    """Raised when no microphone exists or permission to use it is denied."""

    def __init__(self, detail: str = "Could not access microphone. Please check permissions.") -> None:
        super().__init__(detail=detail, code="DEVICE_UNAVAILABLE", status_code=503)


class RecorderBusy(TruInsightsError):
    """Raised when starting a recorder that already holds a recording."""

    def __init__(self, state: str) -> None:
        super().__init__(
            detail=f"Recorder is busy (state={state}); stop or discard first",
            code="RECORDER_BUSY",
            status_code=409,
        )


class TranscriptionFailed(TruInsightsError):
    """Raised when STT processing fails."""

    def __init__(self, reason: str = "Transcription failed") -> None:
        self.reason = reason
        super().__init__(detail=reason, code="TRANSCRIPTION_FAILED", status_code=502)


class ExtractionFailed(TruInsightsError):
    """Raised when the LLM reply cannot be turned into insights."""

    def __init__(self, reason: str = "Extraction failed") -> None:
        self.reason = reason
        super().__init__(detail=reason, code="EXTRACTION_FAILED", status_code=502)


class PersistenceFailed(TruInsightsError):
    """Raised when object storage or the journals table rejects a write or read."""

    def __init__(self, reason: str = "Could not save journal") -> None:
        self.reason = reason
        super().__init__(detail=reason, code="PERSISTENCE_FAILED", status_code=503)


class AuthRequired(TruInsightsError):
    """Raised when a request carries no valid session."""

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(detail=detail, code="AUTH_REQUIRED", status_code=401)


class JournalNotFound(TruInsightsError):
    """Raised when a journal ID does not exist for the calling user."""

    def __init__(self, journal_id: str) -> None:
        super().__init__(
            detail=f"Journal not found: {journal_id}",
            code="JOURNAL_NOT_FOUND",
            status_code=404,
        )


class InvalidJournalUpdate(TruInsightsError):
    """Raised when an update would leave insights on a journal without a transcript."""

    def __init__(self, journal_id: str) -> None:
        super().__init__(
            detail=f"Journal {journal_id} cannot hold insights without a transcript",
            code="INVALID_JOURNAL_UPDATE",
            status_code=422,
        )


class SubmissionInProgress(TruInsightsError):
    """Raised when the same recording is submitted while a submission is in flight."""

    def __init__(self) -> None:
        super().__init__(
            detail="This recording is already being submitted",
            code="SUBMISSION_IN_PROGRESS",
            status_code=409,
        )


class MissingInput(TruInsightsError):
    """Raised when a request omits the audio or transcript it operates on."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail=detail, code="MISSING_INPUT", status_code=400)
