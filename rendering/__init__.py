"""Rendering components for the trajectory viewer."""

from .bodies import BodyRenderer, ObjectView, arrow_scale, make_object_views, object_color
from .grid import Grid, scene_bounds
from .hud import TextRenderer, draw_progress_bar, progress_rect, status_lines

__all__ = [
    "BodyRenderer", "ObjectView", "arrow_scale", "make_object_views", "object_color",
    "Grid", "scene_bounds", "TextRenderer", "draw_progress_bar", "progress_rect", "status_lines",
]
