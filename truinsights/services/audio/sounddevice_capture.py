"""Microphone capture through PortAudio.

Records float32 PCM from an input device via ``sounddevice`` and hands
back a 16-bit WAV container (encoded with ``soundfile``) when closed.
"""

import io
import logging

import numpy as np
import sounddevice as sd
import soundfile as sf

from truinsights.core.exceptions import DeviceUnavailable
from truinsights.services.audio.base import AudioCapture

logger = logging.getLogger(__name__)


class SoundDeviceCapture(AudioCapture):
    """``AudioCapture`` backed by a ``sounddevice.InputStream``.

    Args:
        sample_rate: Capture sample rate in Hz.
        channels: Number of input channels.
        device: PortAudio device index or name; ``None`` for the default input.
    """

    mime_type = "audio/wav"

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        device: int | str | None = None,
    ) -> None:
        self._sample_rate = sample_rate
        self._channels = channels
        self._device = device
        self._stream: sd.InputStream | None = None
        self._chunks: list[np.ndarray] = []

    def _on_audio(self, indata, frames, time_info, status) -> None:  # noqa: ANN001
        if status:
            logger.warning("sounddevice status: %s", status)
        self._chunks.append(indata.copy())

    def open(self) -> None:
        self._chunks = []
        try:
            # Raises ValueError when there is no matching input device
            sd.query_devices(self._device, kind="input")
            self._stream = sd.InputStream(
                samplerate=self._sample_rate,
                channels=self._channels,
                dtype="float32",
                device=self._device,
                callback=self._on_audio,
            )
            self._stream.start()
        except (sd.PortAudioError, ValueError) as exc:
            self._stream = None
            logger.warning("Audio input unavailable: %s", exc)
            raise DeviceUnavailable(f"Could not access microphone: {exc}") from exc
        logger.info("Microphone capture started (%s Hz)", self._sample_rate)

    def pause(self) -> None:
        if self._stream is not None:
            self._stream.stop()

    def resume(self) -> None:
        if self._stream is not None:
            self._stream.start()

    def close(self) -> bytes:
        if self._stream is not None:
            try:
                self._stream.stop()
                self._stream.close()
            finally:
                self._stream = None

        if self._chunks:
            audio = np.concatenate(self._chunks)
        else:
            audio = np.zeros((0, self._channels), dtype=np.float32)
        self._chunks = []

        buffer = io.BytesIO()
        sf.write(buffer, audio, self._sample_rate, format="WAV", subtype="PCM_16")
        return buffer.getvalue()
