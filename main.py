"""
Hill Frame Trajectory Animator
==============================

Plays back relative trajectories in the Hill frame and, optionally, in an
Earth- or Sun-centered inertial frame, with movie recording.

Usage:
    python main.py traject.mat
    python main.py traject.npz earth-centered
    python main.py traject.npz sun-centered --velocity-model full
    python main.py traject.mat --output run1.mp4 --quality 90 --fps 30

Controls:
    - p: Pause / resume
    - r: Restart
    - R: Start / stop recording
    - > / <: Speed up / down
    - l: Loop on / off
    - Left / Right: Step backward / forward
    - 1-9: Select object, TAB: show/hide it, v: velocity arrow, t: trace
    - W/S/A/D, mouse drag: Rotate camera
    - Q/E, mouse wheel: Zoom
    - ESC: Quit
"""

import argparse
import sys

from core.errors import AnimatedError
from trajectory import CenterType, TrajectorySession, VelocityModel


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Animate Hill frame trajectories")
    parser.add_argument("file", help="Trajectory file (.mat or .npz)")
    parser.add_argument("mode", nargs="?", default=None,
                        help=f"Inertial frame: {' or '.join(c.keyword for c in CenterType)}")
    parser.add_argument("--velocity-model", choices=[m.value for m in VelocityModel],
                        default=VelocityModel.REFERENCE.value,
                        help="Inertial velocity: reference orbit only, or full transport (default: reference)")
    parser.add_argument("--output", "-o", type=str, help="Movie file (default: file_movie.mp4)")
    parser.add_argument("--quality", "-q", type=int, help="Movie quality 1-100")
    parser.add_argument("--fps", type=int, help="Movie frame rate")
    parser.add_argument("--no-loop", action="store_true", help="Stop at the last frame instead of looping")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        session = TrajectorySession.from_file(
            args.file, args.mode, VelocityModel(args.velocity_model)
        )
    except (AnimatedError, FileNotFoundError) as e:
        print(f"[Animated] Error: {e}")
        return 1

    # Imported late so loading errors surface without opening a window
    from core.application import Application

    app = Application(session, output_file=args.output, quality=args.quality,
                      fps=args.fps, loop=not args.no_loop)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
