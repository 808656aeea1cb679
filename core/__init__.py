"""Core application components."""

from .errors import AnimatedError
from .playback import PlaybackController, PlaybackStatus, RecordingState
from .recorder import VideoRecorder
from .scheduler import PeriodicTask, Scheduler

__all__ = [
    "AnimatedError", "PlaybackController", "PlaybackStatus", "RecordingState",
    "VideoRecorder", "PeriodicTask", "Scheduler",
]
