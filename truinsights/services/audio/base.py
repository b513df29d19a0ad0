"""
Abstract base class for platform audio capture.

The :class:`Recorder` only talks to this interface, so the recording
logic stays independent of the audio backend in use.
"""

from abc import ABC, abstractmethod


class AudioCapture(ABC):
    """Interface every platform audio input must implement."""

    mime_type: str = "application/octet-stream"

    @abstractmethod
    def open(self) -> None:
        """Start capturing from the input device.

        Raises:
            DeviceUnavailable: No input device exists or access was denied.
        """

    @abstractmethod
    def pause(self) -> None:
        """Suspend capture, keeping already-captured audio."""

    @abstractmethod
    def resume(self) -> None:
        """Continue a paused capture."""

    @abstractmethod
    def close(self) -> bytes:
        """Stop capturing, release the device and return the encoded audio."""
