"""Main application class that ties everything together."""

import numpy as np
import pygame
from pygame.locals import *
from OpenGL.GL import *
from OpenGL.GLU import *

from config import animated as config
from trajectory import TrajectorySession, View
from rendering import (
    BodyRenderer, Grid, TextRenderer, arrow_scale, draw_progress_bar, make_object_views,
    progress_rect, scene_bounds, status_lines,
)
from .camera import Camera
from .input_handler import InputHandler
from .playback import PlaybackController, RecordingState
from .scheduler import Scheduler

VIEW_NAMES = {View.HILL: "Hill frame", View.INERTIAL: "Inertial frame"}


class ViewState:
    """Camera, bounds and arrow scale of one displayed reference frame."""

    def __init__(self, session: TrajectorySession, view: View):
        self.view = view
        points = session.data.states[view, :, :, 0:3].reshape(-1, 3)
        if view == View.INERTIAL and session.reference_path is not None:
            points = np.vstack([points, session.reference_path.T, np.zeros((1, 3))])
        lo, hi = scene_bounds(points)
        reach = float(np.max(np.abs(np.concatenate([lo, hi]))))

        self.median_extent = session.median_extent(view)
        self.arrow_scale = arrow_scale(self.median_extent, view)
        self.camera = Camera(reach)
        self.grid = Grid(lo, hi, axis_length=self.median_extent / 4.0)


class Application:
    """Main application managing the event loop, playback ticks and rendering."""

    def __init__(self, session: TrajectorySession, output_file: str = None,
                 quality: int = None, fps: int = None, loop: bool = True):
        pygame.init()
        self.width = config.WINDOW["width"]
        self.height = config.WINDOW["height"]
        pygame.display.set_mode((self.width, self.height), DOUBLEBUF | OPENGL)
        pygame.display.set_caption(config.WINDOW["title"])

        self.session = session

        # Playback: frame-advance and UI-refresh run as separate tasks
        self.scheduler = Scheduler(clock=lambda: pygame.time.get_ticks() / 1000.0)
        self.controller = PlaybackController(
            session.num_frames,
            scheduler=self.scheduler,
            period=config.TIMER["period"],
            start_time=session.grid.start,
            step=session.grid.step,
        )
        self._apply_recording_options(output_file, quality, fps)
        if not loop:
            self.controller.loop_off()
        self.controller.attach_renderer(self._render_tick)
        self.ui_task = self.scheduler.every(config.TIMER["ui_period"], self._refresh_ui, name="ui")
        self.status = self.controller.status()

        # Views
        self.views = [ViewState(session, view) for view in session.views]
        self.object_views = make_object_views(session.num_objects)

        # Input and rendering
        self.input_handler = InputHandler(self.controller, self.views[0].camera, self.object_views)
        self.bodies = BodyRenderer()
        self.text_renderer = TextRenderer()

        self.clock = pygame.time.Clock()
        self.running = True
        self._closed = False
        self.scrubbing = False

        self._setup_gl()

    def _apply_recording_options(self, output_file, quality, fps):
        if output_file is not None and not self.controller.set_output_file(output_file):
            print(f"[App] Ignoring output file '{output_file}' "
                  f"(1..{config.RECORDING['max_path_length']} characters)")
        if quality is not None and not self.controller.set_quality(quality):
            print(f"[App] Ignoring quality {quality} (1..100)")
        if fps is not None and not self.controller.set_fps(fps):
            print(f"[App] Ignoring fps {fps} "
                  f"({config.RECORDING['min_fps']}..{config.RECORDING['max_fps']})")

    def _setup_gl(self):
        """Initialize OpenGL settings."""
        glClearColor(*config.COLORS["background"])
        glEnable(GL_DEPTH_TEST)
        glEnable(GL_POINT_SMOOTH)
        glEnable(GL_LINE_SMOOTH)

    def _viewports(self) -> list:
        """(x, y, w, h) for each view, side by side."""
        count = len(self.views)
        w = self.width // count
        return [(i * w, 0, w, self.height) for i in range(count)]

    def _view_at(self, x: int) -> ViewState:
        for state, (vx, _, vw, _) in zip(self.views, self._viewports()):
            if vx <= x < vx + vw:
                return state
        return self.views[-1]

    def _bar_fraction(self, pos: tuple):
        """Slider fraction under pos, or None when pos is off the bar."""
        x, y, w, h = progress_rect((self.width, self.height))
        if not (x <= pos[0] <= x + w and y - h <= pos[1] <= y + 2 * h):
            return None
        return (pos[0] - x) / max(w, 1)

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == MOUSEBUTTONDOWN and event.button == 1:
                fraction = self._bar_fraction(event.pos)
                if fraction is not None:
                    self.scrubbing = True
                    self.controller.scrub_to_fraction(fraction)
                    continue
            elif event.type == MOUSEMOTION and self.scrubbing:
                x, _, w, _ = progress_rect((self.width, self.height))
                self.controller.scrub_to_fraction((event.pos[0] - x) / max(w, 1))
                continue
            elif event.type == MOUSEBUTTONUP and event.button == 1 and self.scrubbing:
                self.scrubbing = False
                self.controller.scrub_end()
                continue

            if event.type == MOUSEBUTTONDOWN or event.type == MOUSEWHEEL:
                self.input_handler.camera = self._view_at(pygame.mouse.get_pos()[0]).camera
            if not self.input_handler.handle_event(event):
                self.running = False

    def _update(self, dt: float):
        dt = min(dt, 0.05)
        self.input_handler.handle_continuous_input(dt)
        for state in self.views:
            state.camera.update(dt)

    def _draw_view(self, state: ViewState, viewport: tuple, index: int):
        x, y, w, h = viewport
        glViewport(x, y, w, h)
        state.camera.apply_projection(w / max(h, 1))
        state.camera.apply()

        session = self.session
        view = state.view
        state.grid.draw()

        if view == View.INERTIAL:
            self.bodies.draw_reference_orbit(session.reference_path)
            self.bodies.draw_central_body(
                session.center,
                state.median_extent / config.CENTER_BODIES[session.center.keyword]["extent_divisor"],
            )

        traces = [session.trace(view, obj, index) for obj in range(session.num_objects)]
        self.bodies.draw_traces(traces, self.object_views)

        positions = session.positions(view, index)
        velocities = session.velocities(view, index)
        self.bodies.draw_velocities(positions, velocities, self.object_views, state.arrow_scale)
        self.bodies.draw_objects(positions, self.object_views)

        self.text_renderer.draw_text(VIEW_NAMES[view], 10, 10, (w, h))

    def _draw_scene(self, index: int):
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)
        for state, viewport in zip(self.views, self._viewports()):
            self._draw_view(state, viewport, index)

        glViewport(0, 0, self.width, self.height)
        names = " / ".join(VIEW_NAMES[state.view] for state in self.views)
        lines = status_lines(self.status, self.session.time_at(index), names)
        self.text_renderer.draw_lines(lines, 10, self.height - 20 * len(lines) - 30,
                                      (self.width, self.height))
        draw_progress_bar((index - 1) / max(self.session.num_frames - 1, 1), (self.width, self.height))

    def _capture_frame(self) -> np.ndarray:
        """Read the back buffer as an (H, W, 3) RGB image."""
        glPixelStorei(GL_PACK_ALIGNMENT, 1)
        pixels = glReadPixels(0, 0, self.width, self.height, GL_RGB, GL_UNSIGNED_BYTE)
        frame = np.frombuffer(pixels, dtype=np.uint8).reshape(self.height, self.width, 3)
        return np.flipud(frame)  # OpenGL has origin at bottom-left

    def _render_tick(self, index: int):
        """Frame-advance hook: draw and capture the frame being recorded."""
        if self.controller.recording is not RecordingState.STARTED:
            return None
        self._draw_scene(index)
        frame = self._capture_frame()
        pygame.display.flip()
        return frame

    def _refresh_ui(self):
        previous = self.status
        self.status = self.controller.status()
        if previous.recording_gui != self.status.recording_gui:
            suffix = "" if self.status.recording_gui else f"  [REC {self.status.output_file}]"
            pygame.display.set_caption(config.WINDOW["title"] + suffix)

    def run(self):
        """Main application loop."""
        self.controller.start()
        self.ui_task.start()
        try:
            while self.running:
                dt = self.clock.tick(60) / 1000.0

                self._handle_events()
                self._update(dt)
                self.scheduler.poll()

                self._draw_scene(self.controller.index)
                pygame.display.flip()
        finally:
            self.shutdown()

    def shutdown(self):
        """Stop both tasks, close any recording and release the window."""
        if self._closed:
            return
        self._closed = True
        self.controller.close()
        self.scheduler.shutdown()
        self.bodies.release()
        pygame.quit()
