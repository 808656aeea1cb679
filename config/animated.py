"""Configuration for the Hill/inertial trajectory animator."""

# =============================================================================
# TIMING
# =============================================================================

# A period lower than this makes slower machines struggle to keep up.
TIMER = {
    "period": 0.1,       # Frame-advance tick (seconds)
    "ui_period": 0.1,    # UI-state refresh tick (seconds)
}

PLAYBACK = {
    "speeds": (1, 5, 10, 15, 50, 100, 200),  # Allowed speed multipliers, in order
    "loop": True,
    "normal_increment": 1,                   # Frames per tick at 1x
    "step_factor": 2,                        # Arrow keys jump by step_factor * speed
}

RESAMPLE = {
    "step": 1.0,         # Uniform grid spacing in input time units
}

# =============================================================================
# RECORDING
# =============================================================================

RECORDING = {
    "output_file": "file_movie.mp4",
    "quality": 100,             # 1 (worst) .. 100 (best)
    "fps": 15,
    "min_quality": 1,
    "max_quality": 100,
    "min_fps": 1,
    "max_fps": 120,
    "max_path_length": 64,
    "codec": "h264",            # h264, h265, vp9
    "encoding_preset": "medium",
    "max_crf": 51,              # CRF used for quality 0
}

# =============================================================================
# VIEWER
# =============================================================================

WINDOW = {
    "width": 1280,
    "height": 720,
    "title": "Animated - Hill Frame Trajectories"
}

CAMERA = {
    "fov": 60.0,
    "near_clip_ratio": 0.001,   # Clip planes scale with the scene extent
    "far_clip_ratio": 20.0,
    "initial_radius_ratio": 2.5,
    "initial_theta": 45.0,
    "initial_phi": 30.0,
    "min_phi": -89.0,
    "max_phi": 89.0,
    "keyboard_rotate_speed": 60.0,
    "keyboard_zoom_ratio": 0.5,  # Fraction of the extent per second
    "mouse_sensitivity": 0.3,
    "zoom_smoothing": 8.0,
}

COLORS = {
    "background": (0.6, 0.7, 0.7, 1.0),
    "text": (20, 20, 30),
    "grid": (0.45, 0.5, 0.5),
    "velocity": (1.0, 0.0, 0.0),
    "reference_orbit": (1.0, 0.0, 1.0),
    # b g k y m c r
    "objects": [
        (0.0, 0.0, 1.0),
        (0.0, 0.5, 0.0),
        (0.0, 0.0, 0.0),
        (0.75, 0.75, 0.0),
        (0.75, 0.0, 0.75),
        (0.0, 0.75, 0.75),
        (1.0, 0.0, 0.0),
    ],
}

# Scale of velocity arrows relative to the median extent of each view
ARROWS = {
    "hill_divisor": 2.0,
    "inertial_divisor": 100.0,
}

# Central bodies available for the inertial view
CENTER_BODIES = {
    "earth-centered": {
        "texture": "images/earth.jpg",
        "color": (0.2, 0.4, 0.9),
        "extent_divisor": 10.0,   # Sphere radius = median extent / divisor
    },
    "sun-centered": {
        "texture": "images/sun.jpg",
        "color": (1.0, 0.8, 0.1),
        "extent_divisor": 10.0,
    },
}
