"""Filesystem audio storage for the local backend.

Objects live under ``recordings_dir`` as ``{user_id}/{epoch_ms}-{suffix}.{ext}``;
the returned reference is that relative key.
"""

import asyncio
import logging
from pathlib import Path

from truinsights.core.config import get_settings
from truinsights.core.exceptions import PersistenceFailed
from truinsights.core.utils import audio_object_key
from truinsights.services.storage.base import BaseAudioStorage

logger = logging.getLogger(__name__)


class LocalAudioStorage(BaseAudioStorage):
    """Stores audio objects as files below a root directory.

    Args:
        root: Storage root (defaults to ``settings.recordings_dir``).
    """

    def __init__(self, root: str | Path | None = None) -> None:
        self._root = Path(root or get_settings().recordings_dir).resolve()

    def path_for(self, audio_url: str) -> Path:
        """Resolve a stored reference to its file, rejecting paths outside the root."""
        path = (self._root / audio_url).resolve()
        if not path.is_relative_to(self._root):
            raise PersistenceFailed(f"Invalid audio reference: {audio_url}")
        return path

    async def upload(self, user_id: str, data: bytes, mime_type: str) -> str:
        key = audio_object_key(user_id, mime_type)
        path = self.path_for(key)
        try:
            await asyncio.to_thread(self._write, path, data)
        except OSError as exc:
            logger.error("Failed to store audio %s: %s", key, exc)
            raise PersistenceFailed(f"Could not upload audio: {exc}") from exc
        logger.info("Stored audio %s (%s bytes)", key, len(data))
        return key

    async def download(self, audio_url: str) -> bytes:
        path = self.path_for(audio_url)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise PersistenceFailed(f"Could not read audio: {exc}") from exc

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        # Exclusive create: an existing object is never overwritten
        with path.open("xb") as fh:
            fh.write(data)
