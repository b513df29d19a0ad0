"""
SQLAlchemy ORM models for the local backend.

Tables: ``journals``, ``users``, ``auth_sessions``.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from truinsights.services.storage.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class Journal(Base):
    """A recorded post-class reflection.

    ``energy_level``, ``difficulty_rating``, ``mood`` and ``tags`` mirror
    ``extracted_data`` so the dashboard can query them directly.
    """

    __tablename__ = "journals"
    __table_args__ = (Index("ix_journals_user_created", "user_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(64))
    audio_url: Mapped[str] = mapped_column(String(1024))
    audio_duration_seconds: Mapped[int] = mapped_column(default=0)
    transcript: Mapped[str | None] = mapped_column(Text, nullable=True)
    energy_level: Mapped[int | None] = mapped_column(nullable=True)
    difficulty_rating: Mapped[int | None] = mapped_column(nullable=True)
    mood: Mapped[str | None] = mapped_column(String(32), nullable=True)
    tags: Mapped[list | None] = mapped_column(JSON, nullable=True)
    extracted_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=_now)
    updated_at: Mapped[datetime] = mapped_column(default=_now)

    def __repr__(self) -> str:
        return f"<Journal id={self.id} user={self.user_id!r}>"


class User(Base):
    """A locally registered account."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(256))
    created_at: Mapped[datetime] = mapped_column(default=_now)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"


class UserSession(Base):
    """An issued access token; revoked on sign-out."""

    __tablename__ = "auth_sessions"

    token: Mapped[str] = mapped_column(String(128), primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), index=True)
    created_at: Mapped[datetime] = mapped_column(default=_now)
    revoked_at: Mapped[datetime | None] = mapped_column(nullable=True)

    def __repr__(self) -> str:
        return f"<UserSession user={self.user_id} revoked={self.revoked_at is not None}>"
