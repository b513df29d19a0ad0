"""
Auth module - Session backends behind the API gate.

Use ``create_auth()`` to get the backend named by ``settings.backend_provider``.
"""

from truinsights.core.config import get_settings

from .base import BaseAuth
from .local import LocalAuth

__all__ = ["BaseAuth", "LocalAuth", "create_auth"]


def create_auth(provider: str | None = None, **kwargs) -> BaseAuth:
    """Factory returning the configured auth backend.

    Raises:
        ValueError: Unknown provider.
    """
    provider = provider or get_settings().backend_provider
    if provider == "local":
        from truinsights.services.storage.database import get_session_factory

        return LocalAuth(kwargs.get("session_factory") or get_session_factory())
    if provider == "supabase":
        from truinsights.services.supabase import SupabaseClient

        from .supabase import SupabaseAuth

        return SupabaseAuth(kwargs.get("client") or SupabaseClient())
    raise ValueError(f"Unknown backend provider: {provider}")
