"""
Hosted persistence on Supabase: Storage bucket for audio, PostgREST for rows.

Both classes talk to the project with the server-side key; ownership is
enforced by always filtering on ``user_id``.
"""

import logging
from datetime import UTC, datetime, timedelta

import httpx

from truinsights.core.config import get_settings
from truinsights.core.exceptions import (
    InvalidJournalUpdate,
    JournalNotFound,
    PersistenceFailed,
)
from truinsights.core.models import ExtractedInsights, JournalEntry, JournalStats
from truinsights.core.utils import audio_object_key
from truinsights.services.storage.base import BaseAudioStorage, BaseJournalStore
from truinsights.services.supabase import SupabaseClient, error_message

logger = logging.getLogger(__name__)

_TABLE = "/rest/v1/journals"


def row_to_entry(row: dict) -> JournalEntry:
    """Convert a PostgREST ``journals`` row into a :class:`JournalEntry`."""
    extracted = row.get("extracted_data")
    return JournalEntry(
        id=str(row["id"]),
        user_id=row["user_id"],
        audio_url=row["audio_url"],
        audio_duration_seconds=row.get("audio_duration_seconds") or 0,
        transcript=row.get("transcript"),
        insights=ExtractedInsights.model_validate(extracted) if extracted else None,
        created_at=row["created_at"],
        updated_at=row.get("updated_at") or row["created_at"],
    )


class SupabaseAudioStorage(BaseAudioStorage):
    """Uploads audio into a Supabase Storage bucket and returns its public URL."""

    def __init__(self, client: SupabaseClient, bucket: str | None = None) -> None:
        self._client = client
        self._bucket = bucket or get_settings().supabase_bucket

    async def aclose(self) -> None:
        await self._client.aclose()

    async def upload(self, user_id: str, data: bytes, mime_type: str) -> str:
        key = audio_object_key(user_id, mime_type)
        try:
            response = await self._client.request(
                "post",
                f"/storage/v1/object/{self._bucket}/{key}",
                headers={"Content-Type": mime_type},
                content=data,
            )
        except httpx.HTTPError as exc:
            raise PersistenceFailed(f"Could not reach storage: {exc}") from exc
        if response.is_error:
            raise PersistenceFailed(f"Audio upload failed: {error_message(response)}")

        url = f"{self._client.url}/storage/v1/object/public/{self._bucket}/{key}"
        logger.info("Uploaded audio %s (%s bytes)", key, len(data))
        return url

    async def download(self, audio_url: str) -> bytes:
        try:
            response = await self._client.request("get", audio_url)
        except httpx.HTTPError as exc:
            raise PersistenceFailed(f"Could not reach storage: {exc}") from exc
        if response.is_error:
            raise PersistenceFailed(f"Audio download failed: {error_message(response)}")
        return response.content


class SupabaseJournalStore(BaseJournalStore):
    """Journal rows in the PostgREST ``journals`` table."""

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _call(self, method: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, _TABLE, **kwargs)
        except httpx.HTTPError as exc:
            raise PersistenceFailed(f"Could not reach database: {exc}") from exc
        if response.is_error:
            logger.warning("PostgREST %s rejected (%s)", method.upper(), response.status_code)
            raise PersistenceFailed(error_message(response))
        return response

    async def create(self, user_id: str, audio_url: str, duration_seconds: int) -> JournalEntry:
        response = await self._call(
            "post",
            json={
                "user_id": user_id,
                "audio_url": audio_url,
                "audio_duration_seconds": duration_seconds,
            },
            headers={"Prefer": "return=representation"},
        )
        rows = response.json()
        if not rows:
            raise PersistenceFailed("Journal insert returned no row")
        return row_to_entry(rows[0])

    async def get(self, user_id: str, journal_id: str) -> JournalEntry:
        response = await self._call(
            "get",
            params={"select": "*", "id": f"eq.{journal_id}", "user_id": f"eq.{user_id}"},
        )
        rows = response.json()
        if not rows:
            raise JournalNotFound(journal_id)
        return row_to_entry(rows[0])

    async def update(
        self,
        user_id: str,
        journal_id: str,
        transcript: str | None = None,
        insights: ExtractedInsights | None = None,
    ) -> JournalEntry:
        current = await self.get(user_id, journal_id)
        if insights is not None and (transcript or current.transcript) is None:
            raise InvalidJournalUpdate(journal_id)

        patch: dict = {"updated_at": datetime.now(UTC).isoformat()}
        if transcript is not None:
            patch["transcript"] = transcript
        if insights is not None:
            patch.update(
                energy_level=insights.energy_level,
                difficulty_rating=insights.difficulty_rating,
                mood=insights.mood,
                tags=list(insights.tags),
                extracted_data=insights.model_dump(mode="json"),
            )

        response = await self._call(
            "patch",
            params={"id": f"eq.{journal_id}", "user_id": f"eq.{user_id}"},
            json=patch,
            headers={"Prefer": "return=representation"},
        )
        rows = response.json()
        if not rows:
            raise JournalNotFound(journal_id)
        return row_to_entry(rows[0])

    async def list_recent(self, user_id: str, limit: int) -> list[JournalEntry]:
        response = await self._call(
            "get",
            params={
                "select": "*",
                "user_id": f"eq.{user_id}",
                "order": "created_at.desc",
                "limit": str(limit),
            },
        )
        return [row_to_entry(row) for row in response.json()]

    async def stats(self, user_id: str) -> JournalStats:
        response = await self._call(
            "get",
            params={"select": "energy_level,created_at", "user_id": f"eq.{user_id}"},
        )
        rows = response.json()
        week_ago = datetime.now(UTC) - timedelta(days=7)
        this_week = sum(
            1 for row in rows if datetime.fromisoformat(row["created_at"]) >= week_ago
        )
        energies = [row["energy_level"] for row in rows if row.get("energy_level") is not None]
        return JournalStats(
            total_journals=len(rows),
            this_week=this_week,
            average_energy=sum(energies) / len(energies) if energies else None,
        )
