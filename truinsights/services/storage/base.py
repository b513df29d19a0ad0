"""
Abstract interfaces for the persistence boundary.

``BaseJournalStore`` owns the journals table; ``BaseAudioStorage`` owns the
audio objects it references. Both have a local implementation (SQLite and
the filesystem) and a hosted one (Supabase).
"""

from abc import ABC, abstractmethod

from truinsights.core.models import ExtractedInsights, JournalEntry, JournalStats


class BaseJournalStore(ABC):
    """Interface every journal persistence backend must implement.

    All methods raise ``PersistenceFailed`` when the backend is unreachable
    or rejects the operation.
    """

    @abstractmethod
    async def create(self, user_id: str, audio_url: str, duration_seconds: int) -> JournalEntry:
        """Insert a journal with transcript and insights unset."""

    @abstractmethod
    async def get(self, user_id: str, journal_id: str) -> JournalEntry:
        """Return one of the user's journals.

        Raises:
            JournalNotFound: Unknown id, or the journal belongs to another user.
        """

    @abstractmethod
    async def update(
        self,
        user_id: str,
        journal_id: str,
        transcript: str | None = None,
        insights: ExtractedInsights | None = None,
    ) -> JournalEntry:
        """Merge a transcript and/or insights into an existing journal.

        ``None`` leaves a field unchanged.

        Raises:
            JournalNotFound: Unknown id, or the journal belongs to another user.
            InvalidJournalUpdate: Insights would be stored without a transcript.
        """

    @abstractmethod
    async def list_recent(self, user_id: str, limit: int) -> list[JournalEntry]:
        """Return at most ``limit`` of the user's journals, newest first."""

    @abstractmethod
    async def stats(self, user_id: str) -> JournalStats:
        """Return dashboard counters for the user."""

    async def aclose(self) -> None:
        """Release network clients; the default holds none."""


class BaseAudioStorage(ABC):
    """Interface for durable audio object storage."""

    @abstractmethod
    async def upload(self, user_id: str, data: bytes, mime_type: str) -> str:
        """Store an audio payload and return its durable reference."""

    @abstractmethod
    async def download(self, audio_url: str) -> bytes:
        """Fetch the bytes behind a reference returned by :meth:`upload`."""

    async def aclose(self) -> None:
        """Release network clients; the default holds none."""
