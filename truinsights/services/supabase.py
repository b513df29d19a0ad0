"""
Minimal async client for the Supabase REST surface.

Only what the hosted backend needs: GoTrue auth, Storage objects and
PostgREST rows. Every request carries the project ``apikey`` header plus a
bearer token (a user's access token, or the project key itself).
"""

import logging

import httpx

from truinsights.core.config import get_settings

logger = logging.getLogger(__name__)


def error_message(response: httpx.Response) -> str:
    """Best-effort message from a Supabase error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


class SupabaseClient:
    """Thin wrapper around ``httpx.AsyncClient`` bound to one Supabase project.

    Args:
        url: Project URL, e.g. ``https://xyz.supabase.co``.
        api_key: Project key sent as ``apikey`` (and as the default bearer).
        timeout: Request timeout in seconds.
        client: Pre-built ``httpx.AsyncClient`` (tests inject a mock transport).
    """

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self.url = (url or settings.supabase_url).rstrip("/")
        self._api_key = api_key or settings.supabase_anon_key
        self._client = client or httpx.AsyncClient(
            base_url=self.url,
            timeout=timeout or settings.supabase_timeout,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        headers: dict[str, str] | None = None,
        **kwargs,
    ) -> httpx.Response:
        """Send a request; transport errors propagate as ``httpx.HTTPError``."""
        merged = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {token or self._api_key}",
        }
        if headers:
            merged.update(headers)
        logger.debug("Supabase %s %s", method.upper(), path)
        return await self._client.request(method, path, headers=merged, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()
