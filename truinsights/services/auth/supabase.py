"""Supabase Auth (GoTrue) session backend."""

import logging

import httpx

from truinsights.core.exceptions import AuthRequired, PersistenceFailed
from truinsights.core.models import Session
from truinsights.services.auth.base import BaseAuth
from truinsights.services.supabase import SupabaseClient, error_message

logger = logging.getLogger(__name__)


class SupabaseAuth(BaseAuth):
    """Validates and issues sessions through the project's GoTrue endpoints."""

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    async def aclose(self) -> None:
        await self._client.aclose()

    async def sign_in(self, email: str, password: str) -> Session:
        try:
            response = await self._client.request(
                "post",
                "/auth/v1/token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
            )
        except httpx.HTTPError as exc:
            raise PersistenceFailed(f"Could not reach auth service: {exc}") from exc
        if response.is_error:
            raise AuthRequired(error_message(response))

        body = response.json()
        user = body.get("user") or {}
        return Session(
            user_id=user["id"],
            email=user.get("email") or email,
            access_token=body["access_token"],
        )

    async def current_session(self, access_token: str | None) -> Session | None:
        if not access_token:
            return None
        try:
            response = await self._client.request("get", "/auth/v1/user", token=access_token)
        except httpx.HTTPError as exc:
            raise PersistenceFailed(f"Could not reach auth service: {exc}") from exc
        if response.is_error:
            logger.debug("Session rejected (%s)", response.status_code)
            return None

        user = response.json()
        return Session(user_id=user["id"], email=user.get("email") or "", access_token=access_token)

    async def sign_out(self, access_token: str) -> None:
        try:
            response = await self._client.request("post", "/auth/v1/logout", token=access_token)
        except httpx.HTTPError as exc:
            raise PersistenceFailed(f"Could not reach auth service: {exc}") from exc
        if response.is_error and response.status_code not in (401, 403, 404):
            raise PersistenceFailed(f"Sign-out failed: {error_message(response)}")
