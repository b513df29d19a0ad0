"""
SQL-backed journal persistence.

``JournalRepository`` receives an ``AsyncSession`` and calls ``flush()``
rather than ``commit()`` so that transaction boundaries stay with the
caller. ``SQLJournalStore`` wraps it behind :class:`BaseJournalStore`,
opening one committed session per operation.
"""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from truinsights.core.exceptions import (
    InvalidJournalUpdate,
    JournalNotFound,
    PersistenceFailed,
)
from truinsights.core.models import ExtractedInsights, JournalEntry, JournalStats
from truinsights.services.storage.base import BaseJournalStore
from truinsights.services.storage.database import session_scope
from truinsights.services.storage.models_db import Journal

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def to_entry(row: Journal) -> JournalEntry:
    """Convert an ORM row into the API-facing :class:`JournalEntry`."""
    insights = (
        ExtractedInsights.model_validate(row.extracted_data) if row.extracted_data else None
    )
    return JournalEntry(
        id=row.id,
        user_id=row.user_id,
        audio_url=row.audio_url,
        audio_duration_seconds=row.audio_duration_seconds,
        transcript=row.transcript,
        insights=insights,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class JournalRepository:
    """Data-access layer for the ``journals`` table.

    Args:
        session: An active SQLAlchemy ``AsyncSession``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_journal(
        self, user_id: str, audio_url: str, duration_seconds: int
    ) -> Journal:
        journal = Journal(
            user_id=user_id,
            audio_url=audio_url,
            audio_duration_seconds=duration_seconds,
        )
        self._session.add(journal)
        await self._session.flush()
        return journal

    async def get_journal(self, user_id: str, journal_id: str) -> Journal:
        """Return a journal owned by *user_id* or raise :class:`JournalNotFound`."""
        stmt = select(Journal).where(Journal.id == journal_id, Journal.user_id == user_id)
        result = await self._session.execute(stmt)
        journal = result.scalar_one_or_none()
        if journal is None:
            raise JournalNotFound(journal_id)
        return journal

    async def update_journal(
        self,
        user_id: str,
        journal_id: str,
        transcript: str | None = None,
        insights: ExtractedInsights | None = None,
    ) -> Journal:
        """Merge a transcript and/or insights into a journal.

        Insights are denormalized into the queryable columns as well as
        stored whole in ``extracted_data``.
        """
        journal = await self.get_journal(user_id, journal_id)

        if insights is not None and (transcript or journal.transcript) is None:
            raise InvalidJournalUpdate(journal_id)

        if transcript is not None:
            journal.transcript = transcript
        if insights is not None:
            journal.energy_level = insights.energy_level
            journal.difficulty_rating = insights.difficulty_rating
            journal.mood = insights.mood
            journal.tags = list(insights.tags)
            journal.extracted_data = insights.model_dump(mode="json")
        journal.updated_at = datetime.now(UTC)
        await self._session.flush()
        return journal

    async def list_journals(self, user_id: str, limit: int = 5) -> list[Journal]:
        """Return the user's journals, newest first."""
        stmt = (
            select(Journal)
            .where(Journal.user_id == user_id)
            .order_by(Journal.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count_journals(self, user_id: str, since: datetime | None = None) -> int:
        stmt = select(func.count()).select_from(Journal).where(Journal.user_id == user_id)
        if since is not None:
            stmt = stmt.where(Journal.created_at >= since)
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def average_energy(self, user_id: str) -> float | None:
        """Mean ``energy_level`` over journals that have insights."""
        stmt = select(func.avg(Journal.energy_level)).where(
            Journal.user_id == user_id,
            Journal.energy_level.is_not(None),
        )
        result = await self._session.execute(stmt)
        value = result.scalar_one_or_none()
        return float(value) if value is not None else None


class SQLJournalStore(BaseJournalStore):
    """Journal store on top of the async SQLAlchemy engine.

    Args:
        session_factory: Factory from :func:`get_session_factory`.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, user_id: str, audio_url: str, duration_seconds: int) -> JournalEntry:
        try:
            async with session_scope(self._session_factory) as session:
                journal = await JournalRepository(session).create_journal(
                    user_id, audio_url, duration_seconds
                )
                entry = to_entry(journal)
        except SQLAlchemyError as exc:
            logger.error("Failed to create journal for user %s: %s", user_id, exc)
            raise PersistenceFailed(f"Could not save journal: {exc}") from exc
        logger.info("Journal %s created for user %s", entry.id, user_id)
        return entry

    async def get(self, user_id: str, journal_id: str) -> JournalEntry:
        try:
            async with session_scope(self._session_factory) as session:
                return to_entry(await JournalRepository(session).get_journal(user_id, journal_id))
        except SQLAlchemyError as exc:
            raise PersistenceFailed(f"Could not load journal: {exc}") from exc

    async def update(
        self,
        user_id: str,
        journal_id: str,
        transcript: str | None = None,
        insights: ExtractedInsights | None = None,
    ) -> JournalEntry:
        try:
            async with session_scope(self._session_factory) as session:
                journal = await JournalRepository(session).update_journal(
                    user_id, journal_id, transcript=transcript, insights=insights
                )
                return to_entry(journal)
        except SQLAlchemyError as exc:
            logger.error("Failed to update journal %s: %s", journal_id, exc)
            raise PersistenceFailed(f"Could not update journal: {exc}") from exc

    async def list_recent(self, user_id: str, limit: int) -> list[JournalEntry]:
        try:
            async with session_scope(self._session_factory) as session:
                rows = await JournalRepository(session).list_journals(user_id, limit=limit)
                return [to_entry(row) for row in rows]
        except SQLAlchemyError as exc:
            raise PersistenceFailed(f"Could not list journals: {exc}") from exc

    async def stats(self, user_id: str) -> JournalStats:
        week_ago = datetime.now(UTC) - timedelta(days=7)
        try:
            async with session_scope(self._session_factory) as session:
                repo = JournalRepository(session)
                total = await repo.count_journals(user_id)
                this_week = await repo.count_journals(user_id, since=week_ago)
                average = await repo.average_energy(user_id)
        except SQLAlchemyError as exc:
            raise PersistenceFailed(f"Could not compute stats: {exc}") from exc
        return JournalStats(total_journals=total, this_week=this_week, average_energy=average)
