"""Abstract base class for session backends."""

from abc import ABC, abstractmethod

from truinsights.core.models import Session


class BaseAuth(ABC):
    """Interface every authentication backend must implement."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Session:
        """Exchange credentials for a session.

        Raises:
            AuthRequired: The credentials were rejected.
        """

    @abstractmethod
    async def current_session(self, access_token: str | None) -> Session | None:
        """Return the session behind a token, or None if it is missing or invalid."""

    @abstractmethod
    async def sign_out(self, access_token: str) -> None:
        """Invalidate the token. Unknown tokens are ignored."""

    async def aclose(self) -> None:
        """Release network clients; the default holds none."""
