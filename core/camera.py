"""Camera system for 3D navigation."""

import math
import numpy as np
from OpenGL.GL import *
from OpenGL.GLU import *
from config import animated as config


class Camera:
    """
    Orbital camera around the origin, z up.

    Distances are expressed relative to the scene extent so the same
    controls work for a few-metre Hill frame and an interplanetary orbit.
    Zoom deltas are fractions of the extent.
    """

    def __init__(self, extent: float = 1.0):
        self.extent = max(float(extent), 1e-9)
        self.min_radius = self.extent * 0.05
        self.max_radius = self.extent * config.CAMERA["far_clip_ratio"] * 0.5
        self.radius = self.extent * config.CAMERA["initial_radius_ratio"]
        self.target_radius = self.radius
        self.theta = config.CAMERA["initial_theta"]
        self.phi = config.CAMERA["initial_phi"]
        self.target = np.array([0.0, 0.0, 0.0])
        self.zoom_smoothing = config.CAMERA["zoom_smoothing"]

    @property
    def near_clip(self) -> float:
        return self.extent * config.CAMERA["near_clip_ratio"]

    @property
    def far_clip(self) -> float:
        return self.extent * config.CAMERA["far_clip_ratio"]

    def get_direction(self) -> np.ndarray:
        """Get the normalized direction vector from target to camera."""
        theta_rad = math.radians(self.theta)
        phi_rad = math.radians(self.phi)
        x = math.cos(phi_rad) * math.cos(theta_rad)
        y = math.cos(phi_rad) * math.sin(theta_rad)
        z = math.sin(phi_rad)
        return np.array([x, y, z])

    def get_position(self) -> np.ndarray:
        """Get the camera's world position."""
        return self.target + self.radius * self.get_direction()

    def _clamp_radius(self, radius: float) -> float:
        return max(self.min_radius, min(self.max_radius, radius))

    def rotate(self, d_theta: float, d_phi: float):
        """Rotate the camera by the given angles in degrees."""
        self.theta = (self.theta + d_theta) % 360
        self.phi = max(
            config.CAMERA["min_phi"],
            min(config.CAMERA["max_phi"], self.phi + d_phi)
        )

    def zoom(self, delta: float):
        """Immediately zoom by delta x extent."""
        self.radius = self._clamp_radius(self.radius + delta * self.extent)
        self.target_radius = self.radius

    def zoom_smooth(self, delta: float):
        """Smoothly zoom by delta x extent."""
        self.target_radius = self._clamp_radius(self.target_radius + delta * self.extent)

    def update(self, dt: float):
        """Update camera state (called each frame)."""
        self.radius += (self.target_radius - self.radius) * min(1.0, self.zoom_smoothing * dt)
        self.radius = self._clamp_radius(self.radius)

    def apply_projection(self, aspect: float):
        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        gluPerspective(config.CAMERA["fov"], aspect, self.near_clip, self.far_clip)
        glMatrixMode(GL_MODELVIEW)

    def apply(self):
        """Apply the camera transformation to the OpenGL modelview matrix."""
        pos = self.get_position()
        glLoadIdentity()
        gluLookAt(
            pos[0], pos[1], pos[2],
            self.target[0], self.target[1], self.target[2],
            0, 0, 1
        )
