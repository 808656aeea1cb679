"""Objects, traces, velocity arrows, reference orbit and central body."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np
import pygame
from OpenGL.GL import *
from OpenGL.GLU import *

from config import animated as config
from trajectory import CenterType, View

PROJECT_ROOT = Path(__file__).parent.parent


@dataclass
class ObjectView:
    """Per-object display toggles (pure rendering state)."""
    enabled: bool = True
    trace: bool = True
    velocity: bool = True


def object_color(idx: int) -> tuple:
    """Colour of the idx-th object, cycling through the palette."""
    palette = config.COLORS["objects"]
    return palette[idx % len(palette)]


def arrow_scale(median_extent: float, view: View) -> float:
    """Length multiplier applied to velocity vectors in a view."""
    divisor = config.ARROWS["hill_divisor"] if view == View.HILL else config.ARROWS["inertial_divisor"]
    return median_extent / divisor


def make_object_views(count: int) -> List[ObjectView]:
    return [ObjectView() for _ in range(count)]


class BodyRenderer:
    """Immediate-mode drawing of the trajectory scene for one view."""

    def __init__(self, point_size: float = 8.0, line_width: float = 1.5):
        self.point_size = point_size
        self.line_width = line_width
        self._quadric = None
        self._textures = {}

    def draw_traces(self, traces: Sequence[np.ndarray], views: Sequence[ObjectView]):
        glLineWidth(self.line_width)
        for idx, (trace, view) in enumerate(zip(traces, views)):
            if not (view.enabled and view.trace) or trace.shape[0] < 2:
                continue
            glColor3f(*object_color(idx))
            glBegin(GL_LINE_STRIP)
            for x, y, z in trace:
                glVertex3f(x, y, z)
            glEnd()

    def draw_objects(self, positions: np.ndarray, views: Sequence[ObjectView]):
        glPointSize(self.point_size)
        glBegin(GL_POINTS)
        for idx, (pos, view) in enumerate(zip(positions, views)):
            if not view.enabled:
                continue
            glColor3f(*object_color(idx))
            glVertex3f(*pos)
        glEnd()

    def draw_velocities(self, positions: np.ndarray, velocities: np.ndarray,
                        views: Sequence[ObjectView], scale: float):
        glLineWidth(self.line_width * 1.5)
        glColor3f(*config.COLORS["velocity"])
        glBegin(GL_LINES)
        for pos, vel, view in zip(positions, velocities, views):
            if not (view.enabled and view.velocity):
                continue
            tip = pos + vel * scale
            glVertex3f(*pos)
            glVertex3f(*tip)
        glEnd()

    def draw_reference_orbit(self, path: Optional[np.ndarray]):
        """Reference orbit path, (3, N)."""
        if path is None:
            return
        glLineWidth(self.line_width)
        glColor3f(*config.COLORS["reference_orbit"])
        glBegin(GL_LINE_STRIP)
        for x, y, z in path.T:
            glVertex3f(x, y, z)
        glEnd()

    def _load_texture(self, center: CenterType) -> Optional[int]:
        if center in self._textures:
            return self._textures[center]

        texture_id = None
        path = PROJECT_ROOT / center.texture
        if path.is_file():
            surface = pygame.image.load(str(path))
            data = pygame.image.tobytes(surface, "RGB", True)
            w, h = surface.get_size()
            texture_id = glGenTextures(1)
            glBindTexture(GL_TEXTURE_2D, texture_id)
            glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
            glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
            glPixelStorei(GL_UNPACK_ALIGNMENT, 1)
            glTexImage2D(GL_TEXTURE_2D, 0, GL_RGB, w, h, 0, GL_RGB, GL_UNSIGNED_BYTE, data)
            glBindTexture(GL_TEXTURE_2D, 0)
        else:
            print(f"[Animated] Texture {path.name} not found, drawing a plain sphere")

        self._textures[center] = texture_id
        return texture_id

    def draw_central_body(self, center: Optional[CenterType], radius: float):
        if center is None:
            return
        if self._quadric is None:
            self._quadric = gluNewQuadric()

        texture_id = self._load_texture(center)
        if texture_id is not None:
            glEnable(GL_TEXTURE_2D)
            glBindTexture(GL_TEXTURE_2D, texture_id)
            gluQuadricTexture(self._quadric, GL_TRUE)
            glColor3f(1.0, 1.0, 1.0)
        else:
            gluQuadricTexture(self._quadric, GL_FALSE)
            glColor3f(*center.color)

        gluSphere(self._quadric, radius, 48, 24)

        if texture_id is not None:
            glBindTexture(GL_TEXTURE_2D, 0)
            glDisable(GL_TEXTURE_2D)

    def release(self):
        if self._quadric is not None:
            gluDeleteQuadric(self._quadric)
            self._quadric = None
        textures = [t for t in self._textures.values() if t is not None]
        if textures:
            glDeleteTextures(textures)
        self._textures = {}
