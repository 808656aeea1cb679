"""Input handling for keyboard and mouse events."""

import pygame
from pygame.locals import *
from config import animated as config

from .playback import PlaybackController, RecordingState


class InputHandler:
    """
    Maps keys onto playback commands and mouse/WASD onto the camera.

    Keys:
        p       pause / unpause
        r       restart
        R       start / stop recording
        > <     speed up / down
        l       loop on / off
        RIGHT   step forward (2 x speed)
        LEFT    step backward (2 x speed)
        v t     velocity arrows / traces for the selected object
        1..9    select object, TAB toggles its visibility, o shows only it
    """

    def __init__(self, controller: PlaybackController, camera=None, views=None):
        self.controller = controller
        self.camera = camera
        self.views = views
        self.selected = 0
        self.mouse_dragging = False
        self.last_mouse_pos = (0, 0)

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle a single pygame event.
        Returns False if the application should quit, True otherwise.
        """
        if event.type == QUIT:
            return False
        elif event.type == KEYDOWN:
            if event.key == K_ESCAPE:
                return False
            self.handle_key(event)
        elif self.camera is None:
            pass
        elif event.type == MOUSEBUTTONDOWN:
            if event.button == 1:
                self.mouse_dragging = True
                self.last_mouse_pos = pygame.mouse.get_pos()
        elif event.type == MOUSEBUTTONUP:
            if event.button == 1:
                self.mouse_dragging = False
        elif event.type == MOUSEWHEEL:
            self.camera.zoom_smooth(-event.y * config.CAMERA["keyboard_zoom_ratio"] * 0.2)

        return True

    def handle_key(self, event: pygame.event.Event):
        """Playback keyboard commands."""
        controller = self.controller
        char = getattr(event, "unicode", "")

        if char == "p":
            if controller.toggle_pause():
                print("[Animated] Pause")
            else:
                print("[Animated] Resume")
        elif char == "r":
            controller.restart()
            print("[Animated] Restart")
        elif char == "R":
            if controller.recording is RecordingState.STARTED:
                print("[Animated] Stop recording")
                controller.set_recording(False)
            else:
                print("[Animated] Start recording")
                controller.set_recording(True)
        elif char == ">":
            print(f"[Animated] Speed x{controller.increase_velocity()}")
        elif char == "<":
            print(f"[Animated] Speed x{controller.decrease_velocity()}")
        elif char == "l":
            print(f"[Animated] Loop {'on' if controller.toggle_loop() else 'off'}")
        elif event.key == K_RIGHT:
            controller.move_forward()
            print("[Animated] Step forward")
        elif event.key == K_LEFT:
            controller.move_backward()
            print("[Animated] Step backward")
        elif self.views is not None:
            self._handle_view_key(event, char)

    def _handle_view_key(self, event: pygame.event.Event, char: str):
        if char.isdigit() and char != "0":
            selected = int(char) - 1
            if selected < len(self.views):
                self.selected = selected
                print(f"[Animated] Object {selected + 1} selected")
            return

        view = self.views[self.selected]
        if event.key == K_TAB:
            view.enabled = not view.enabled
        elif char == "v":
            view.velocity = not view.velocity
        elif char == "t":
            view.trace = not view.trace
        elif char == "o":
            for idx, other in enumerate(self.views):
                other.enabled = idx == self.selected

    def handle_continuous_input(self, dt: float):
        """Handle continuous keyboard input (called each frame)."""
        if self.camera is None:
            return
        keys = pygame.key.get_pressed()
        rot_speed = config.CAMERA["keyboard_rotate_speed"] * dt
        zoom_speed = config.CAMERA["keyboard_zoom_ratio"] * dt

        # Keyboard rotation
        if keys[K_a]:
            self.camera.rotate(-rot_speed, 0)
        if keys[K_d]:
            self.camera.rotate(rot_speed, 0)
        if keys[K_w]:
            self.camera.rotate(0, rot_speed)
        if keys[K_s]:
            self.camera.rotate(0, -rot_speed)

        # Keyboard zoom
        if keys[K_q]:
            self.camera.zoom(-zoom_speed)
        if keys[K_e]:
            self.camera.zoom(zoom_speed)

        # Mouse drag rotation
        if self.mouse_dragging:
            current_pos = pygame.mouse.get_pos()
            dx = current_pos[0] - self.last_mouse_pos[0]
            dy = current_pos[1] - self.last_mouse_pos[1]
            self.camera.rotate(
                dx * config.CAMERA["mouse_sensitivity"],
                -dy * config.CAMERA["mouse_sensitivity"]
            )
            self.last_mouse_pos = current_pos
