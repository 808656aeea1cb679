"""
Shared pytest fixtures.

- two_objects: states/times of two objects sampled differently over [0, 10]
- circular_orbit: zero-inclination circular reference orbit on object 1's times
- recorder_factory: VideoRecorder stand-in that records calls instead of running FFmpeg
"""

import math
from pathlib import Path

import numpy as np
import pytest

from trajectory.loader import OrbitParameters


def linear_states(times: np.ndarray, slope: float = 1.0) -> np.ndarray:
    """6xN block whose every row is slope * t + row offset."""
    return np.vstack([slope * times + row for row in range(6)])


@pytest.fixture
def two_objects():
    t1 = np.array([0.0, 2.5, 5.0, 7.5, 10.0])
    t2 = np.array([0.0, 1.0, 3.0, 6.0, 10.0])
    return [linear_states(t1), linear_states(t2, slope=2.0)], [t1, t2]


@pytest.fixture
def circular_orbit(two_objects):
    _, times = two_objects
    t = times[0]
    mu, a = 398600.4418, 7000.0
    n = math.sqrt(mu / a ** 3)
    return OrbitParameters(
        a=a, ec=0.0, mu=mu, inc=0.0, omega=0.3, Omega=0.4,
        theta=n * t, r=np.full_like(t, a),
    )


class FakeRecorder:
    """Same surface as VideoRecorder, keeps frames in memory."""

    instances = []

    def __init__(self, output_path, fps=None, quality=None):
        self.output_path = Path(output_path)
        self.fps = fps
        self.quality = quality
        self.frames = []
        self.opened = False
        self.closed = False
        self.aborted = False
        self.fail_open = None
        self.fail_write = None
        FakeRecorder.instances.append(self)

    @property
    def is_open(self):
        return self.opened and not self.closed and not self.aborted

    def open(self):
        from core.errors import OutputExists
        if self.output_path.exists():
            raise OutputExists(f"{self.output_path} already exists")
        self.opened = True

    def write_frame(self, frame):
        if self.fail_write is not None:
            raise self.fail_write
        self.frames.append(frame)

    def close(self):
        self.closed = True
        return self.output_path

    def abort(self):
        self.aborted = True


@pytest.fixture
def recorder_factory():
    FakeRecorder.instances = []
    yield FakeRecorder
    FakeRecorder.instances = []


@pytest.fixture
def frame():
    return np.zeros((4, 6, 3), dtype=np.uint8)
