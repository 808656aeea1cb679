"""Trajectory loading, frame transformation and resampling."""

from .loader import CenterType, LoadedTrajectories, OrbitParameters, load_trajectories, read_trajectory_file
from .resampler import View
from .session import TrajectorySession
from .transform import VelocityModel

__all__ = [
    "CenterType", "LoadedTrajectories", "OrbitParameters", "load_trajectories",
    "read_trajectory_file", "View", "TrajectorySession", "VelocityModel",
]
