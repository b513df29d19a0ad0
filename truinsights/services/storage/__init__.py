"""
Storage module - Journal rows and audio objects.

``create_journal_store`` / ``create_audio_storage`` pick the backend named
by ``settings.backend_provider``.
"""

from truinsights.core.config import get_settings

from .base import BaseAudioStorage, BaseJournalStore
from .files import LocalAudioStorage
from .repository import JournalRepository, SQLJournalStore

__all__ = [
    "BaseAudioStorage",
    "BaseJournalStore",
    "JournalRepository",
    "LocalAudioStorage",
    "SQLJournalStore",
    "create_audio_storage",
    "create_journal_store",
]


def _supabase_client():
    from truinsights.services.supabase import SupabaseClient

    settings = get_settings()
    return SupabaseClient(api_key=settings.supabase_service_key or settings.supabase_anon_key)


def create_journal_store(provider: str | None = None, **kwargs) -> BaseJournalStore:
    """Factory returning the configured journal store.

    Args:
        provider: "local" or "supabase" (defaults to settings).
        **kwargs: ``session_factory`` for the local store, ``client`` for Supabase.

    Raises:
        ValueError: Unknown provider.
    """
    provider = provider or get_settings().backend_provider
    if provider == "local":
        from .database import get_session_factory

        return SQLJournalStore(kwargs.get("session_factory") or get_session_factory())
    if provider == "supabase":
        from .supabase import SupabaseJournalStore

        return SupabaseJournalStore(kwargs.get("client") or _supabase_client())
    raise ValueError(f"Unknown backend provider: {provider}")


def create_audio_storage(provider: str | None = None, **kwargs) -> BaseAudioStorage:
    """Factory returning the configured audio object storage."""
    provider = provider or get_settings().backend_provider
    if provider == "local":
        return LocalAudioStorage(kwargs.get("root"))
    if provider == "supabase":
        from .supabase import SupabaseAudioStorage

        return SupabaseAudioStorage(kwargs.get("client") or _supabase_client())
    raise ValueError(f"Unknown backend provider: {provider}")
