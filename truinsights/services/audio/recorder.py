"""Recording state machine.

``idle -> recording -> (paused <-> recording) -> stopped -> idle``

Elapsed time is accounted from a monotonic clock and reported in whole
seconds, counting only time spent in the *recording* state.
"""

import logging
import tempfile
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from truinsights.core.exceptions import RecorderBusy
from truinsights.core.utils import audio_extension
from truinsights.services.audio.base import AudioCapture

logger = logging.getLogger(__name__)


class RecorderState(StrEnum):
    """Possible states of a :class:`Recorder`."""

    idle = "idle"
    recording = "recording"
    paused = "paused"
    stopped = "stopped"


@dataclass
class AudioRecording:
    """A finished capture awaiting submission."""

    data: bytes
    mime_type: str
    duration_seconds: int
    playback_path: Path | None = None


class Recorder:
    """Drives an :class:`AudioCapture` through start/pause/resume/stop.

    The recorder is not reentrant: ``start()`` raises :class:`RecorderBusy`
    unless the recorder is idle, so a pending artifact must be discarded
    (or submitted and then discarded) before the next take.

    Args:
        capture: Platform audio input.
        clock: Monotonic time source in seconds.
        playback_dir: Where playback files are written (system temp by default).
    """

    def __init__(
        self,
        capture: AudioCapture,
        clock: Callable[[], float] = time.monotonic,
        playback_dir: str | None = None,
    ) -> None:
        self._capture = capture
        self._clock = clock
        self._playback_dir = playback_dir
        self._state = RecorderState.idle
        self._active_seconds = 0.0
        self._resumed_at: float | None = None
        self._artifact: AudioRecording | None = None

    @property
    def state(self) -> RecorderState:
        return self._state

    @property
    def recording(self) -> AudioRecording | None:
        """The finalized, not yet discarded artifact."""
        return self._artifact

    @property
    def elapsed_seconds(self) -> int:
        total = self._active_seconds
        if self._resumed_at is not None:
            total += self._clock() - self._resumed_at
        return int(total)

    def start(self) -> None:
        """Begin capturing into a fresh recording.

        Raises:
            RecorderBusy: The recorder is not idle.
            DeviceUnavailable: Propagated from the capture; state stays idle.
        """
        if self._state is not RecorderState.idle:
            raise RecorderBusy(self._state.value)

        self._capture.open()
        self._active_seconds = 0.0
        self._resumed_at = self._clock()
        self._state = RecorderState.recording
        logger.debug("Recorder started")

    def pause(self) -> None:
        if self._state is not RecorderState.recording:
            return
        self._capture.pause()
        self._bank_elapsed()
        self._state = RecorderState.paused

    def resume(self) -> None:
        if self._state is not RecorderState.paused:
            return
        self._capture.resume()
        self._resumed_at = self._clock()
        self._state = RecorderState.recording

    def stop(self) -> AudioRecording | None:
        """Finalize the capture and return the artifact.

        Calling ``stop()`` when nothing is being captured returns the
        pending artifact, if any, without side effects.
        """
        if self._state not in (RecorderState.recording, RecorderState.paused):
            return self._artifact

        self._bank_elapsed()
        data = self._capture.close()
        mime_type = self._capture.mime_type
        duration = int(self._active_seconds)

        playback_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                prefix="journal-",
                suffix=f".{audio_extension(mime_type)}",
                dir=self._playback_dir,
                delete=False,
            ) as fh:
                playback_path = Path(fh.name)
                fh.write(data)
        except OSError as exc:
            # Capture is closed already: keep the bytes without a playback file
            logger.warning("Could not write playback file: %s", exc)
            if playback_path is not None:
                playback_path.unlink(missing_ok=True)
                playback_path = None

        self._artifact = AudioRecording(
            data=data,
            mime_type=mime_type,
            duration_seconds=duration,
            playback_path=playback_path,
        )
        self._state = RecorderState.stopped
        logger.info("Recorder stopped: %ss, %s bytes", duration, len(data))
        return self._artifact

    def discard(self) -> None:
        """Drop the current take (captured or finalized) and return to idle."""
        if self._state in (RecorderState.recording, RecorderState.paused):
            self._capture.close()

        if self._artifact is not None and self._artifact.playback_path is not None:
            self._artifact.playback_path.unlink(missing_ok=True)

        self._artifact = None
        self._active_seconds = 0.0
        self._resumed_at = None
        self._state = RecorderState.idle

    def _bank_elapsed(self) -> None:
        if self._resumed_at is not None:
            self._active_seconds += self._clock() - self._resumed_at
            self._resumed_at = None
