"""Text rendering for HUD elements."""

import pygame
from OpenGL.GL import *

from config import animated as config
from core.playback import RecordingState


def status_lines(status, time_value: float, view_names: str) -> list:
    """Human-readable HUD lines for a PlaybackStatus."""
    state = "stopped" if status.stopped else ("paused" if status.paused else "playing")
    lines = [
        f"{view_names}  |  t = {time_value:g}  |  frame {status.index}/{status.num_frames}",
        f"{state}  |  speed x{status.speed}  |  loop {'on' if status.loop else 'off'}",
    ]
    if status.recording is RecordingState.STARTED:
        lines.append(f"REC {status.output_file}  (q {status.quality}, {status.fps} fps)")
    else:
        lines.append(f"movie: {status.output_file}  (q {status.quality}, {status.fps} fps)")
    return lines


class TextRenderer:
    """Text primitive of the HUD: view titles and status lines drawn over the scene."""

    def __init__(self, font_name: str = "monospace", font_size: int = 16):
        pygame.font.init()
        self.font = pygame.font.SysFont(font_name, font_size)
        self.color = config.COLORS["text"]

    def draw_text(self, text: str, x: int, y: int, screen_size: tuple):
        """
        Draw text at the given screen position.

        Args:
            text: The string to render
            x: X position from left edge
            y: Y position from top edge
            screen_size: (width, height) of the screen
        """
        text_surface = self.font.render(text, True, self.color)
        text_data = pygame.image.tobytes(text_surface, "RGBA", True)
        w, h = text_surface.get_size()

        # Switch to orthographic projection for 2D rendering
        glMatrixMode(GL_PROJECTION)
        glPushMatrix()
        glLoadIdentity()
        glOrtho(0, screen_size[0], 0, screen_size[1], -1, 1)
        glMatrixMode(GL_MODELVIEW)
        glPushMatrix()
        glLoadIdentity()

        glDisable(GL_DEPTH_TEST)
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
        glRasterPos2f(x, screen_size[1] - y - h)
        glDrawPixels(w, h, GL_RGBA, GL_UNSIGNED_BYTE, text_data)
        glDisable(GL_BLEND)
        glEnable(GL_DEPTH_TEST)

        # Restore projection
        glPopMatrix()
        glMatrixMode(GL_PROJECTION)
        glPopMatrix()
        glMatrixMode(GL_MODELVIEW)

    def draw_lines(self, lines, x: int, y: int, screen_size: tuple, spacing: int = 20):
        for i, line in enumerate(lines):
            self.draw_text(line, x, y + i * spacing, screen_size)


def progress_rect(screen_size: tuple, height: int = 10, margin: int = 10) -> tuple:
    """(x, y, w, h) of the position bar, y measured from the top edge."""
    width, screen_h = screen_size
    return margin, screen_h - margin - height, width - 2 * margin, height


def draw_progress_bar(fraction: float, screen_size: tuple):
    """Filled bar at the bottom of the window showing playback position."""
    x, y, w, h = progress_rect(screen_size)
    top = screen_size[1] - y
    bottom = top - h
    filled = x + w * min(max(fraction, 0.0), 1.0)

    glMatrixMode(GL_PROJECTION)
    glPushMatrix()
    glLoadIdentity()
    glOrtho(0, screen_size[0], 0, screen_size[1], -1, 1)
    glMatrixMode(GL_MODELVIEW)
    glPushMatrix()
    glLoadIdentity()
    glDisable(GL_DEPTH_TEST)

    glColor3f(*config.COLORS["grid"])
    glBegin(GL_QUADS)
    glVertex2f(x, bottom); glVertex2f(x + w, bottom)
    glVertex2f(x + w, top); glVertex2f(x, top)
    glEnd()

    glColor3f(*[c / 255.0 for c in config.COLORS["text"]])
    glBegin(GL_QUADS)
    glVertex2f(x, bottom); glVertex2f(filled, bottom)
    glVertex2f(filled, top); glVertex2f(x, top)
    glEnd()

    glEnable(GL_DEPTH_TEST)
    glPopMatrix()
    glMatrixMode(GL_PROJECTION)
    glPopMatrix()
    glMatrixMode(GL_MODELVIEW)
