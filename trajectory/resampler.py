"""
Resampler - puts every object on one uniform time grid.

The grid runs from round(start) to round(stop) in steps of 1 time unit, so
frame index k (1-based) corresponds to time start + (k - 1) * step for every
object and every view.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence

import numpy as np

from config import animated as config


class View(IntEnum):
    """Reference frames a session can display."""
    HILL = 0
    INERTIAL = 1


def round_half_away(value: float) -> float:
    """Round to the nearest integer, ties away from zero."""
    return float(np.sign(value) * np.floor(np.abs(value) + 0.5))


@dataclass(frozen=True)
class TimeGrid:
    """Uniform time axis shared by all objects."""
    start: float
    stop: float
    step: float
    times: np.ndarray

    @property
    def num_frames(self) -> int:
        return self.times.shape[0]

    def time_at(self, index: int) -> float:
        """Time of a 1-based frame index."""
        if not 1 <= index <= self.num_frames:
            raise IndexError(f"frame {index} outside 1..{self.num_frames}")
        return float(self.times[index - 1])

    def index_of(self, t: float) -> int:
        """Nearest 1-based frame index for a time, clamped to the grid."""
        k = 1 + int(round_half_away((t - self.start) / self.step))
        return min(max(k, 1), self.num_frames)


def make_time_grid(start_time: float, stop_time: float, step: float = None) -> TimeGrid:
    """
    Build the shared grid.

    F = 1 + round((stop - start) / step); start and stop are rounded first.
    """
    step = config.RESAMPLE["step"] if step is None else float(step)
    if step <= 0:
        raise ValueError("step must be positive")
    start = round_half_away(start_time)
    stop = round_half_away(stop_time)
    num_frames = 1 + int(round_half_away((stop - start) / step))
    times = start + step * np.arange(num_frames, dtype=float)
    times.setflags(write=False)
    return TimeGrid(start=start, stop=stop, step=step, times=times)


def interpolate_states(states: np.ndarray, times: np.ndarray, grid_times: np.ndarray) -> np.ndarray:
    """
    Linearly interpolate a 6xN state block onto grid_times.

    Query times are clipped to the object's own observed range, so a grid
    point that rounding placed just outside it holds the boundary sample
    instead of extrapolating.

    Returns:
        (F, 6) array
    """
    query = np.clip(grid_times, times[0], times[-1])
    out = np.empty((grid_times.shape[0], states.shape[0]), dtype=float)
    for component in range(states.shape[0]):
        out[:, component] = np.interp(query, times, states[component])
    return out


@dataclass(frozen=True)
class ResampledTrajectories:
    """
    Dense per-view, per-object states on the shared grid.

    states has shape (views, objects, F, 6); frame indices are 1-based.
    """
    grid: TimeGrid
    states: np.ndarray

    @property
    def num_frames(self) -> int:
        return self.grid.num_frames

    @property
    def num_views(self) -> int:
        return self.states.shape[0]

    @property
    def num_objects(self) -> int:
        return self.states.shape[1]

    def positions(self, view: int, index: int) -> np.ndarray:
        """(objects, 3) positions at a 1-based frame index."""
        return self.states[view, :, index - 1, 0:3]

    def velocities(self, view: int, index: int) -> np.ndarray:
        """(objects, 3) velocities at a 1-based frame index."""
        return self.states[view, :, index - 1, 3:6]

    def trace(self, view: int, obj: int, index: int) -> np.ndarray:
        """Positions of one object from frame 1 up to and including index."""
        return self.states[view, obj, :index, 0:3]

    def extent(self, view: int) -> np.ndarray:
        """Per-axis range (max - min) of all positions in a view."""
        positions = self.states[view, :, :, 0:3].reshape(-1, 3)
        return positions.max(axis=0) - positions.min(axis=0)


def resample_tracks(
    native_states: Sequence[Sequence[np.ndarray]],
    native_times: Sequence[np.ndarray],
    step: float = None,
) -> ResampledTrajectories:
    """
    Resample every view of every object onto one grid.

    Args:
        native_states: native_states[view][obj] is a 6xN_obj block
        native_times: native_times[obj] is that object's N_obj timestamps
        step: grid spacing (defaults to config)

    The inertial view, when present, is closed: each object's last position
    is set equal to its first so periodic orbits draw without a seam.
    """
    grid = make_time_grid(native_times[0][0], native_times[0][-1], step)
    num_views = len(native_states)
    num_objects = len(native_times)

    states = np.empty((num_views, num_objects, grid.num_frames, 6), dtype=float)
    for view, blocks in enumerate(native_states):
        for obj, (block, times) in enumerate(zip(blocks, native_times)):
            states[view, obj] = interpolate_states(block, times, grid.times)

    if num_views > View.INERTIAL:
        states[View.INERTIAL, :, -1, 0:3] = states[View.INERTIAL, :, 0, 0:3]

    states.setflags(write=False)
    return ResampledTrajectories(grid=grid, states=states)
