"""
Local username/password sessions stored in SQLite.

The first sign-in for an unknown email registers it. Passwords are hashed
with passlib (pbkdf2_sha256); access tokens are random and revoked on
sign-out.
"""

import logging
import secrets
from datetime import UTC, datetime

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from truinsights.core.exceptions import AuthRequired, PersistenceFailed
from truinsights.core.models import Session
from truinsights.services.auth.base import BaseAuth
from truinsights.services.storage.database import session_scope
from truinsights.services.storage.models_db import User, UserSession

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against its hash; unrecognized hashes never match."""
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        return False


class LocalAuth(BaseAuth):
    """Session backend on the local database.

    Args:
        session_factory: Factory from :func:`get_session_factory`.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def sign_in(self, email: str, password: str) -> Session:
        email = email.strip().lower()
        try:
            async with session_scope(self._session_factory) as db:
                result = await db.execute(select(User).where(User.email == email))
                user = result.scalar_one_or_none()
                if user is None:
                    user = User(email=email, password_hash=hash_password(password))
                    db.add(user)
                    await db.flush()
                    logger.info("Registered local user %s", user.id)
                elif not verify_password(password, user.password_hash):
                    raise AuthRequired("Invalid email or password")

                token = secrets.token_urlsafe(32)
                db.add(UserSession(token=token, user_id=user.id))
                await db.flush()
                return Session(user_id=user.id, email=user.email, access_token=token)
        except SQLAlchemyError as exc:
            raise PersistenceFailed(f"Could not sign in: {exc}") from exc

    async def current_session(self, access_token: str | None) -> Session | None:
        if not access_token:
            return None
        try:
            async with session_scope(self._session_factory) as db:
                stmt = (
                    select(UserSession, User)
                    .join(User, User.id == UserSession.user_id)
                    .where(UserSession.token == access_token, UserSession.revoked_at.is_(None))
                )
                row = (await db.execute(stmt)).first()
        except SQLAlchemyError as exc:
            raise PersistenceFailed(f"Could not load session: {exc}") from exc
        if row is None:
            return None
        _, user = row
        return Session(user_id=user.id, email=user.email, access_token=access_token)

    async def sign_out(self, access_token: str) -> None:
        try:
            async with session_scope(self._session_factory) as db:
                record = await db.get(UserSession, access_token)
                if record is not None and record.revoked_at is None:
                    record.revoked_at = datetime.now(UTC)
        except SQLAlchemyError as exc:
            raise PersistenceFailed(f"Could not sign out: {exc}") from exc
