"""
Playback controller - frame index, speed, loop, scrubbing and recording.

All playback state lives here and is only changed through the methods
below. A scheduler task advances the index once per period; rendering is
plugged in through attach_renderer() so the controller never touches
OpenGL itself.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

import numpy as np

from config import animated as config
from .errors import AnimatedError, OutputMissing
from .recorder import VideoRecorder
from .scheduler import PeriodicTask, Scheduler


class RecordingState(Enum):
    IDLE = "idle"
    STARTED = "started"
    ENDED = "ended"


@dataclass(frozen=True)
class PlaybackStatus:
    """Snapshot of the controller, refreshed by the UI task."""
    index: int
    num_frames: int
    paused: bool
    loop: bool
    stopped: bool
    speed: int
    speed_index: int
    recording: RecordingState
    recording_gui: bool
    output_file: str
    quality: int
    fps: int


class PlaybackController:
    """
    State machine driving playback of F frames (indices 1..F).

    stopped <-> running (playing / paused); loop and recording are
    independent of that.
    """

    def __init__(
        self,
        num_frames: int,
        scheduler: Optional[Scheduler] = None,
        period: float = None,
        speeds: Sequence[int] = None,
        recorder_factory: Callable[..., VideoRecorder] = VideoRecorder,
        start_time: float = 0.0,
        step: float = None,
    ):
        if num_frames < 1:
            raise ValueError("num_frames must be at least 1")
        self.num_frames = int(num_frames)
        self.start_time = float(start_time)
        self.step = config.RESAMPLE["step"] if step is None else float(step)

        self.index = 1
        self.paused = False
        self.loop = config.PLAYBACK["loop"]
        self.stopped = True
        self.speeds = tuple(config.PLAYBACK["speeds"] if speeds is None else speeds)
        self.speed_index = 0
        self._previous_paused: Optional[bool] = None

        # Recording
        self.recording = RecordingState.IDLE
        self.recording_gui = True
        self.output_file = config.RECORDING["output_file"]
        self.quality = config.RECORDING["quality"]
        self.fps = config.RECORDING["fps"]
        self.recording_index = 1
        self._recorder_factory = recorder_factory
        self._recorder: Optional[VideoRecorder] = None

        self._renderer: Optional[Callable[[int], Optional[np.ndarray]]] = None
        self._closed = False
        self._task: Optional[PeriodicTask] = None
        if scheduler is not None:
            period = config.TIMER["period"] if period is None else period
            self._task = scheduler.every(period, self._on_tick, name="advance")

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def speed(self) -> int:
        return self.speeds[self.speed_index]

    @property
    def is_running(self) -> bool:
        return not self.stopped

    def attach_renderer(self, renderer: Callable[[int], Optional[np.ndarray]]):
        """
        Install the per-tick render hook.

        Called with the current index before each advance; returns the
        captured (H, W, 3) frame while recording, else None.
        """
        self._renderer = renderer

    def start(self):
        if self._closed:
            raise AnimatedError("controller is closed")
        self.stopped = False
        if self._task is not None:
            self._task.start()

    def stop(self):
        # Flag first: anything polling it sees the stop before the task halts
        self.stopped = True
        if self._task is not None:
            self._task.stop()

    def close(self):
        """Stop, release the periodic task and close any open recording."""
        if self._closed:
            return
        self.stop()
        if self._task is not None:
            self._task.cancel()
            self._task = None
        if self.recording is RecordingState.STARTED:
            self.set_recording(False)
        self._release_recording()
        self._renderer = None
        self._closed = True

    def _on_tick(self):
        frame = self._renderer(self.index) if self._renderer is not None else None
        self.advance(frame)

    # =========================================================================
    # PLAYBACK
    # =========================================================================

    def advance(self, frame: Optional[np.ndarray] = None):
        """One tick: record the shown frame if recording, then move on."""
        if self.recording is RecordingState.STARTED:
            if frame is not None:
                self.set_recording_frame(frame)
        elif self.recording is RecordingState.ENDED:
            self._release_recording()

        if not self.paused:
            self.index += config.PLAYBACK["normal_increment"] * self.speed

        if self.index > self.num_frames:
            if self.loop:
                self.index = 1
            else:
                self.index = self.num_frames
                self.paused = True

    def pause(self):
        self.paused = True

    def unpause(self):
        self.paused = False

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        return self.paused

    def restart(self):
        self.index = 1

    def loop_on(self):
        self.loop = True

    def loop_off(self):
        self.loop = False

    def toggle_loop(self) -> bool:
        self.loop = not self.loop
        return self.loop

    def set_index(self, index) -> bool:
        """Jump to a frame. Anything outside 1..F is ignored."""
        try:
            value = float(index)
        except (TypeError, ValueError):
            return False
        if not math.isfinite(value) or value < 1 or value > self.num_frames:
            return False
        self.index = int(math.floor(value + 0.5))
        return True

    def set_time(self, t: float) -> bool:
        """Jump to the frame showing time t. Times off the grid are ignored."""
        return self.set_index(1 + (t - self.start_time) / self.step)

    def index_from_fraction(self, fraction: float) -> int:
        """Frame for a slider position in [0, 1]."""
        fraction = min(max(float(fraction), 0.0), 1.0)
        index = int(math.floor((self.num_frames - 1) * fraction + 1 + 0.5))
        return min(max(index, 1), self.num_frames)

    def move_forward(self):
        self.index += config.PLAYBACK["step_factor"] * self.speed
        if self.index > self.num_frames:
            self.index = 1 + (self.index - self.num_frames) % self.num_frames
            if not self.loop:
                self.paused = True
                self.index = self.num_frames

    def move_backward(self):
        self.index -= config.PLAYBACK["step_factor"] * self.speed
        if self.index < 1:
            self.index = 1 + (self.num_frames + self.index - 1) % self.num_frames
            if not self.loop:
                self.paused = True
                self.index = 1

    def set_velocity(self, speed_index: int) -> bool:
        """Select a multiplier by its position in the speed table."""
        if not isinstance(speed_index, (int, np.integer)) or not 0 <= speed_index < len(self.speeds):
            return False
        self.speed_index = int(speed_index)
        return True

    def increase_velocity(self) -> int:
        self.speed_index = min(self.speed_index + 1, len(self.speeds) - 1)
        return self.speed

    def decrease_velocity(self) -> int:
        self.speed_index = max(self.speed_index - 1, 0)
        return self.speed

    # =========================================================================
    # SCRUBBING
    # =========================================================================

    def scrub_begin(self):
        """Position control pressed: remember the paused flag once, then pause."""
        if self._previous_paused is None:
            self._previous_paused = self.paused
        self.paused = True

    def scrub_to_fraction(self, fraction: float):
        self.scrub_begin()
        self.set_index(self.index_from_fraction(fraction))

    def scrub_end(self):
        """Position control released: restore the remembered paused flag."""
        if self._previous_paused is None:
            return
        self.paused = self._previous_paused
        self._previous_paused = None

    @property
    def is_scrubbing(self) -> bool:
        return self._previous_paused is not None

    # =========================================================================
    # RECORDING
    # =========================================================================

    def set_recording(self, enabled: bool) -> bool:
        """Start or stop recording. Failures print a diagnostic and return False."""
        if enabled:
            return self._start_recording()
        return self._stop_recording()

    def _start_recording(self) -> bool:
        if self.recording is RecordingState.STARTED:
            print(f"[Animated] Error: already recording to {self.output_file}")
            return False
        if self.recording is RecordingState.ENDED:
            self._release_recording()

        self.recording_gui = False
        recorder = self._recorder_factory(self.output_file, fps=self.fps, quality=self.quality)
        try:
            recorder.open()
        except AnimatedError as e:
            print(f"[Animated] Error: {e}")
            self._clear_recording()
            return False

        self._recorder = recorder
        self.recording_index = 1
        self.recording = RecordingState.STARTED
        print("VIDEO OPTIONS")
        print(f"  File:    {self.output_file}")
        print(f"  Quality: {self.quality}")
        print(f"  FPS:     {self.fps}")
        print(f"  Codec:   {config.RECORDING['codec']}")
        return True

    def _stop_recording(self) -> bool:
        try:
            if self._recorder is None or self.recording is not RecordingState.STARTED:
                raise OutputMissing("the output video file does not exist")
            self._recorder.close()
        except AnimatedError as e:
            print(f"[Animated] Error: {e}")
            self._clear_recording()
            return False

        print(f"[Animated] Recording saved to {self.output_file} ({self.recording_index - 1} frames)")
        self.recording = RecordingState.ENDED
        self.recording_gui = True
        return True

    def set_recording_frame(self, frame: np.ndarray) -> bool:
        """Append a frame to the open recording."""
        if self.recording is not RecordingState.STARTED or self._recorder is None:
            return False
        try:
            self._recorder.write_frame(frame)
        except (AnimatedError, OSError) as e:
            print(f"[Animated] Error: recording stopped: {e}")
            self._clear_recording()
            return False
        self.recording_index += 1
        return True

    def _release_recording(self):
        self._recorder = None
        self.recording = RecordingState.IDLE

    def _clear_recording(self):
        if self._recorder is not None and self._recorder.is_open:
            self._recorder.abort()
        self._release_recording()
        self.recording_gui = True

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def set_output_file(self, path: str) -> bool:
        if not isinstance(path, str) or not 1 <= len(path) <= config.RECORDING["max_path_length"]:
            return False
        self.output_file = path
        return True

    def set_quality(self, quality) -> bool:
        if not _is_whole(quality):
            return False
        if not config.RECORDING["min_quality"] <= quality <= config.RECORDING["max_quality"]:
            return False
        self.quality = int(quality)
        return True

    def set_fps(self, fps) -> bool:
        if not _is_whole(fps):
            return False
        if not config.RECORDING["min_fps"] <= fps <= config.RECORDING["max_fps"]:
            return False
        self.fps = int(fps)
        return True

    def status(self) -> PlaybackStatus:
        return PlaybackStatus(
            index=self.index,
            num_frames=self.num_frames,
            paused=self.paused,
            loop=self.loop,
            stopped=self.stopped,
            speed=self.speed,
            speed_index=self.speed_index,
            recording=self.recording,
            recording_gui=self.recording_gui,
            output_file=self.output_file,
            quality=self.quality,
            fps=self.fps,
        )


def _is_whole(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        return False
    return math.isfinite(value) and float(value).is_integer()
