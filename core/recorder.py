"""
Video recorder - streams captured frames to an MP4 through FFmpeg.

The output file is never overwritten: open() refuses an existing path and
FFmpeg is started with -n. FFmpeg itself is spawned on the first frame,
once the frame size is known.
"""

import shutil
import subprocess
from pathlib import Path
from typing import Optional

import numpy as np

from config import animated as config
from .errors import AnimatedError, OutputExists, OutputMissing


def check_ffmpeg() -> bool:
    """Check if FFmpeg is available."""
    if shutil.which("ffmpeg") is None:
        return False
    try:
        result = subprocess.run(
            ["ffmpeg", "-version"],
            capture_output=True,
            text=True
        )
        return result.returncode == 0
    except FileNotFoundError:
        return False


def quality_to_crf(quality: int, max_crf: int = None) -> int:
    """Map quality 1..100 (best) onto an x264 CRF (0 = lossless)."""
    max_crf = config.RECORDING["max_crf"] if max_crf is None else max_crf
    quality = min(max(int(quality), 0), 100)
    return int(round(max_crf * (100 - quality) / 100.0))


class VideoRecorder:
    """One recording session writing to one output file."""

    def __init__(self, output_path, fps: int = None, quality: int = None,
                 codec: str = None, encoding_preset: str = None):
        self.output_path = Path(output_path)
        self.fps = config.RECORDING["fps"] if fps is None else int(fps)
        self.quality = config.RECORDING["quality"] if quality is None else int(quality)
        self.codec = codec or config.RECORDING["codec"]
        self.encoding_preset = encoding_preset or config.RECORDING["encoding_preset"]

        self.width = 0
        self.height = 0
        self.frames_written = 0
        self._process: Optional[subprocess.Popen] = None
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self):
        """Reserve the output. Raises OutputExists if the file is already there."""
        if self._open:
            raise AnimatedError(f"{self.output_path} is already being recorded")
        if self.output_path.exists():
            raise OutputExists(f"{self.output_path} already exists")
        if not check_ffmpeg():
            raise AnimatedError("FFmpeg not found (install it to record movies)")
        self.frames_written = 0
        self._open = True

    def _get_ffmpeg_command(self) -> list:
        """Build FFmpeg command for encoding."""
        crf = quality_to_crf(self.quality)

        cmd = [
            "ffmpeg",
            "-n",  # Never overwrite output
            "-loglevel", "error",
            "-f", "rawvideo",
            "-vcodec", "rawvideo",
            "-pix_fmt", "rgb24",
            "-s", f"{self.width}x{self.height}",
            "-r", str(self.fps),
            "-i", "-",  # Read from pipe
            # yuv420p needs even dimensions
            "-vf", "scale=trunc(iw/2)*2:trunc(ih/2)*2",
        ]

        if self.codec == "h264":
            cmd.extend([
                "-c:v", "libx264",
                "-preset", self.encoding_preset,
                "-crf", str(crf),
                "-pix_fmt", "yuv420p",
            ])
        elif self.codec == "h265":
            cmd.extend([
                "-c:v", "libx265",
                "-preset", self.encoding_preset,
                "-crf", str(crf),
                "-pix_fmt", "yuv420p",
                "-tag:v", "hvc1",
            ])
        elif self.codec == "vp9":
            cmd.extend([
                "-c:v", "libvpx-vp9",
                "-crf", str(min(crf, 63)),
                "-b:v", "0",
                "-pix_fmt", "yuv420p",
            ])
        else:
            raise AnimatedError(f"unknown codec '{self.codec}'")

        # Faststart for web playback
        cmd.extend(["-movflags", "+faststart"])
        cmd.append(str(self.output_path))
        return cmd

    def _spawn(self, height: int, width: int):
        self.height = height
        self.width = width
        self._process = subprocess.Popen(
            self._get_ffmpeg_command(),
            stdin=subprocess.PIPE,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,  # Discard stderr to prevent blocking
        )

    def write_frame(self, frame: np.ndarray):
        """Append one (H, W, 3) RGB frame."""
        if not self._open:
            raise OutputMissing("recording output is not open")
        frame = np.ascontiguousarray(frame, dtype=np.uint8)
        if frame.ndim != 3 or frame.shape[2] != 3:
            raise AnimatedError(f"expected an (H, W, 3) frame, got {frame.shape}")

        if self._process is None:
            self._spawn(frame.shape[0], frame.shape[1])
        elif frame.shape[:2] != (self.height, self.width):
            raise AnimatedError(
                f"frame size changed from {self.width}x{self.height} "
                f"to {frame.shape[1]}x{frame.shape[0]} while recording"
            )

        self._process.stdin.write(frame.tobytes())
        self.frames_written += 1

    def close(self) -> Optional[Path]:
        """
        Finish the movie. Raises OutputMissing if nothing was opened.

        Returns the output path, or None when no frame was ever written.
        """
        if not self._open:
            raise OutputMissing("no recording output to close")
        self._open = False

        process, self._process = self._process, None
        if process is None:
            print(f"[Recorder] Warning: no frames captured, {self.output_path} not written")
            return None

        process.stdin.close()
        returncode = process.wait()
        if returncode != 0:
            raise AnimatedError(f"FFmpeg exited with code {returncode} writing {self.output_path}")
        return self.output_path

    def abort(self):
        """Drop the session without waiting for the encoder."""
        self._open = False
        process, self._process = self._process, None
        if process is not None:
            try:
                process.stdin.close()
            except OSError:
                pass
            process.terminate()
            process.wait()
