"""Trajectory session: load, transform and resample once, then serve frames."""

from typing import Optional

import numpy as np

from config import animated as config
from .loader import CenterType, LoadedTrajectories, TrajectorySet, load_trajectories, read_trajectory_file
from .resampler import ResampledTrajectories, View, resample_tracks
from .transform import VelocityModel, reference_orbit, transform_trajectories


class TrajectorySession:
    """
    Everything the viewer needs for one data set.

    Views are View.HILL and, in inertial mode, View.INERTIAL. All frame
    indices are 1-based and shared by every object and view. The orbit
    parameters are only used while building the session and are not kept.
    """

    def __init__(
        self,
        loaded: LoadedTrajectories,
        velocity_model: VelocityModel = VelocityModel.REFERENCE,
        step: float = None,
    ):
        self.trajectories: TrajectorySet = loaded.trajectories
        self.center: Optional[CenterType] = loaded.center
        self.velocity_model = velocity_model
        self.reference_path: Optional[np.ndarray] = None

        native_times = [track.times for track in self.trajectories]
        native_states = [[track.states for track in self.trajectories]]

        if loaded.is_inertial:
            orbit = loaded.orbit
            native_states.append(transform_trajectories(self.trajectories, orbit, velocity_model))
            self.reference_path = reference_orbit(orbit)

        self.data: ResampledTrajectories = resample_tracks(
            native_states, native_times,
            config.RESAMPLE["step"] if step is None else step,
        )

        print(f"[Animated] {self.num_objects} objects, {self.num_frames} frames "
              f"(t = {self.grid.start:g} .. {self.grid.stop:g}, step {self.grid.step:g})")

    @classmethod
    def from_file(cls, path, mode=None, velocity_model: VelocityModel = VelocityModel.REFERENCE,
                  step: float = None) -> "TrajectorySession":
        return cls(read_trajectory_file(path, mode), velocity_model, step)

    @classmethod
    def from_arrays(cls, states, times, mode=None, orbit=None,
                    velocity_model: VelocityModel = VelocityModel.REFERENCE,
                    step: float = None) -> "TrajectorySession":
        return cls(load_trajectories(states, times, mode, orbit), velocity_model, step)

    @property
    def grid(self):
        return self.data.grid

    @property
    def num_frames(self) -> int:
        return self.data.num_frames

    @property
    def num_objects(self) -> int:
        return self.data.num_objects

    @property
    def is_inertial(self) -> bool:
        return self.center is not None

    @property
    def views(self) -> tuple:
        return (View.HILL, View.INERTIAL) if self.is_inertial else (View.HILL,)

    def frame_for_time(self, t: float) -> int:
        """1-based frame index nearest to time t (clamped to the grid)."""
        return self.grid.index_of(t)

    def time_at(self, index: int) -> float:
        return self.grid.time_at(index)

    def positions(self, view: View, index: int) -> np.ndarray:
        return self.data.positions(view, index)

    def velocities(self, view: View, index: int) -> np.ndarray:
        return self.data.velocities(view, index)

    def trace(self, view: View, obj: int, index: int) -> np.ndarray:
        return self.data.trace(view, obj, index)

    def extent(self, view: View) -> np.ndarray:
        """Per-axis range of the view, including the reference orbit when shown."""
        ranges = self.data.extent(view)
        if view == View.INERTIAL and self.reference_path is not None:
            points = np.vstack([
                self.data.states[view, :, :, 0:3].reshape(-1, 3),
                self.reference_path.T,
            ])
            ranges = points.max(axis=0) - points.min(axis=0)
        return ranges

    def median_extent(self, view: View) -> float:
        """Median of the per-axis ranges; 1.0 when the data is a single point."""
        value = float(np.median(self.extent(view)))
        return value if value > 0 else 1.0
