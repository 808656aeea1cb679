"""Axes and bounding box for spatial reference."""

import numpy as np
from OpenGL.GL import *
from config import animated as config

AXIS_COLORS = ((0.8, 0.1, 0.1), (0.1, 0.6, 0.1), (0.1, 0.1, 0.8))


def scene_bounds(points: np.ndarray, margin: float = 0.05) -> tuple:
    """(lo, hi) corners of the padded axis-aligned box around (N, 3) points."""
    lo = points.min(axis=0)
    hi = points.max(axis=0)
    pad = np.maximum((hi - lo) * margin, 1e-9)
    return lo - pad, hi + pad


class Grid:
    """Draws a wireframe box around the data plus x/y/z axes from the origin."""

    def __init__(self, lo: np.ndarray, hi: np.ndarray, axis_length: float):
        self.lo = np.asarray(lo, dtype=float)
        self.hi = np.asarray(hi, dtype=float)
        self.axis_length = axis_length
        self.color = config.COLORS["grid"]

    def draw(self):
        (x0, y0, z0), (x1, y1, z1) = self.lo, self.hi

        glLineWidth(1.0)
        glBegin(GL_LINES)
        glColor3f(*self.color)

        # X-direction edges
        glVertex3f(x0, y0, z0); glVertex3f(x1, y0, z0)
        glVertex3f(x0, y1, z0); glVertex3f(x1, y1, z0)
        glVertex3f(x0, y0, z1); glVertex3f(x1, y0, z1)
        glVertex3f(x0, y1, z1); glVertex3f(x1, y1, z1)

        # Y-direction edges
        glVertex3f(x0, y0, z0); glVertex3f(x0, y1, z0)
        glVertex3f(x1, y0, z0); glVertex3f(x1, y1, z0)
        glVertex3f(x0, y0, z1); glVertex3f(x0, y1, z1)
        glVertex3f(x1, y0, z1); glVertex3f(x1, y1, z1)

        # Z-direction edges
        glVertex3f(x0, y0, z0); glVertex3f(x0, y0, z1)
        glVertex3f(x1, y0, z0); glVertex3f(x1, y0, z1)
        glVertex3f(x0, y1, z0); glVertex3f(x0, y1, z1)
        glVertex3f(x1, y1, z0); glVertex3f(x1, y1, z1)

        # Axes
        L = self.axis_length
        for axis, color in enumerate(AXIS_COLORS):
            tip = [0.0, 0.0, 0.0]
            tip[axis] = L
            glColor3f(*color)
            glVertex3f(0.0, 0.0, 0.0)
            glVertex3f(*tip)

        glEnd()
