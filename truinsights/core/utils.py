"""Shared utility functions for TruInsights."""

import re
import time
import uuid

from truinsights.core.models import Mood

_EXTENSIONS = {
    "audio/webm": "webm",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
    "audio/ogg": "ogg",
    "audio/flac": "flac",
}


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences wrapping JSON from LLM responses."""
    text = text.strip()
    if text.startswith("```"):
        text = re.sub(r"^```\w*\n?", "", text)
        text = re.sub(r"\n?```$", "", text)
    return text.strip()


def audio_extension(mime_type: str) -> str:
    """Map an audio MIME type (parameters ignored) to a file extension."""
    base = mime_type.split(";", 1)[0].strip().lower()
    return _EXTENSIONS.get(base, "bin")


def audio_object_key(user_id: str, mime_type: str) -> str:
    """Build a storage key ``{user_id}/{epoch_ms}-{suffix}.{ext}`` for a new recording.

    The random suffix keeps keys distinct for uploads within the same millisecond.
    """
    return f"{user_id}/{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}.{audio_extension(mime_type)}"


def format_duration(seconds: int) -> str:
    """Render whole seconds as ``m:ss``."""
    minutes, secs = divmod(max(seconds, 0), 60)
    return f"{minutes}:{secs:02d}"


def audio_mime_type(name: str) -> str:
    """Guess the audio MIME type from a file name or URL extension."""
    ext = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    for mime, known in _EXTENSIONS.items():
        if known == ext:
            return mime
    return "application/octet-stream"


_MOOD_ICONS = {
    Mood.energized: "\u26a1",
    Mood.tired: "\U0001f634",
    Mood.accomplished: "\U0001f3c6",
    Mood.frustrated: "\U0001f624",
    Mood.motivated: "\U0001f525",
    Mood.relaxed: "\U0001f60c",
}


def mood_label(mood: str) -> str:
    """Capitalized mood with its icon; moods outside the vocabulary are shown as-is."""
    value = (mood or "").strip().lower()
    if value not in Mood.__members__:
        return mood or "-"
    return f"{_MOOD_ICONS[Mood(value)]} {value.capitalize()}"
