"""
Audio module - Capture abstraction and the recording state machine.

``SoundDeviceCapture`` lives in :mod:`.sounddevice_capture` and is imported
on demand because PortAudio is only needed where a microphone is used.
"""

from .base import AudioCapture
from .recorder import AudioRecording, Recorder, RecorderState

__all__ = ["AudioCapture", "AudioRecording", "Recorder", "RecorderState", "create_capture"]


def create_capture(**kwargs) -> AudioCapture:
    """Return the default microphone capture for this platform."""
    from .sounddevice_capture import SoundDeviceCapture

    return SoundDeviceCapture(**kwargs)
