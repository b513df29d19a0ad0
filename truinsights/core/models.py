"""
Pydantic v2 domain and request / response models used across the API layer.
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------


class Mood(StrEnum):
    """Vocabulary the extraction prompt asks the model to choose from."""

    energized = "energized"
    tired = "tired"
    accomplished = "accomplished"
    frustrated = "frustrated"
    motivated = "motivated"
    relaxed = "relaxed"


class ExtractedInsights(BaseModel):
    """Structured fields derived from a transcript by the LLM.

    Ratings and mood are not range-checked: whatever the model returns is
    kept as long as it parses into the declared types.
    """

    energy_level: int
    difficulty_rating: int
    mood: str
    highlights: list[str] = Field(default_factory=list)
    challenges: list[str] = Field(default_factory=list)
    body_feelings: list[str] = Field(default_factory=list)
    instructor_feedback: str = ""
    tags: list[str] = Field(default_factory=list)

    @field_validator("highlights", "challenges", "body_feelings", "tags", mode="before")
    @classmethod
    def coerce_list(cls, value):
        """Treat null as empty and render numeric items as text."""
        if value is None:
            return []
        if isinstance(value, list):
            return [str(item) if isinstance(item, int | float) else item for item in value]
        return value

    @field_validator("instructor_feedback", mode="before")
    @classmethod
    def null_feedback_is_blank(cls, value):
        return "" if value is None else value


class TranscriptionResponse(BaseModel):
    """POST /transcribe response."""

    transcript: str


class ExtractionRequest(BaseModel):
    """POST /extract-insights request body."""

    transcript: str | None = None


class ExtractionResponse(BaseModel):
    """POST /extract-insights response."""

    extracted: ExtractedInsights


# ---------------------------------------------------------------------------
# Journals
# ---------------------------------------------------------------------------


class JournalEntry(BaseModel):
    """One user's recorded reflection plus derived data.

    ``insights`` is only ever set when ``transcript`` is set.
    """

    id: str
    user_id: str
    audio_url: str
    audio_duration_seconds: int = Field(ge=0)
    transcript: str | None = None
    insights: ExtractedInsights | None = None
    created_at: datetime
    updated_at: datetime

    @property
    def is_processed(self) -> bool:
        return self.insights is not None


class JournalStats(BaseModel):
    """Dashboard counters for one user."""

    total_journals: int = 0
    this_week: int = 0
    average_energy: float | None = None


class SubmissionResponse(BaseModel):
    """POST /journals response.

    The journal is always saved; ``transcription_error`` or
    ``extraction_error`` explain why it is missing derived fields.
    """

    journal: JournalEntry
    transcription_error: str | None = None
    extraction_error: str | None = None


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class Session(BaseModel):
    """Authenticated user context."""

    user_id: str
    email: str = ""
    access_token: str


class SignInRequest(BaseModel):
    """POST /auth/sign-in request body."""

    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    detail: str
    code: str
    timestamp: str
