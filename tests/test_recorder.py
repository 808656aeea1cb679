"""FFmpeg-backed video recorder (FFmpeg itself is faked)."""

import io

import numpy as np
import pytest

from core import recorder as recorder_module
from core.errors import AnimatedError, OutputExists, OutputMissing
from core.recorder import VideoRecorder, quality_to_crf


class CapturingPipe(io.BytesIO):
    """stdin stand-in that keeps its bytes after close()."""

    data = None

    def close(self):
        if not self.closed:
            self.data = self.getvalue()
        super().close()


class FakeProcess:
    def __init__(self, cmd, **kwargs):
        self.cmd = cmd
        self.stdin = CapturingPipe()
        self.returncode = None
        self.terminated = False

    def wait(self):
        self.returncode = 0
        return 0

    def terminate(self):
        self.terminated = True


@pytest.fixture
def fake_ffmpeg(monkeypatch):
    spawned = []

    def popen(cmd, **kwargs):
        process = FakeProcess(cmd, **kwargs)
        spawned.append(process)
        return process

    monkeypatch.setattr(recorder_module, "check_ffmpeg", lambda: True)
    monkeypatch.setattr(recorder_module.subprocess, "Popen", popen)
    return spawned


class TestQuality:
    """Quality to CRF mapping."""

    def test_extremes(self):
        assert quality_to_crf(100) == 0
        assert quality_to_crf(1) == 50
        assert quality_to_crf(50, max_crf=51) == 26


class TestVideoRecorder:
    """Open / write / close lifecycle."""

    def test_refuses_existing_file(self, tmp_path, fake_ffmpeg):
        path = tmp_path / "movie.mp4"
        path.write_bytes(b"old")

        with pytest.raises(OutputExists):
            VideoRecorder(path).open()
        assert path.read_bytes() == b"old"

    def test_close_without_open(self, tmp_path):
        with pytest.raises(OutputMissing):
            VideoRecorder(tmp_path / "movie.mp4").close()

    def test_write_without_open(self, tmp_path):
        with pytest.raises(OutputMissing):
            VideoRecorder(tmp_path / "movie.mp4").write_frame(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_missing_ffmpeg(self, tmp_path, monkeypatch):
        monkeypatch.setattr(recorder_module, "check_ffmpeg", lambda: False)
        with pytest.raises(AnimatedError):
            VideoRecorder(tmp_path / "movie.mp4").open()

    def test_spawns_on_first_frame(self, tmp_path, fake_ffmpeg):
        rec = VideoRecorder(tmp_path / "movie.mp4", fps=24, quality=100)
        rec.open()
        assert fake_ffmpeg == []

        frame = np.full((4, 6, 3), 7, dtype=np.uint8)
        rec.write_frame(frame)
        rec.write_frame(frame)

        assert len(fake_ffmpeg) == 1
        cmd = fake_ffmpeg[0].cmd
        assert "-n" in cmd and "-y" not in cmd
        assert cmd[cmd.index("-s") + 1] == "6x4"
        assert cmd[cmd.index("-r") + 1] == "24"
        assert cmd[cmd.index("-crf") + 1] == "0"
        assert cmd[-1] == str(tmp_path / "movie.mp4")
        assert rec.frames_written == 2

        assert rec.close() == tmp_path / "movie.mp4"
        assert fake_ffmpeg[0].stdin.data == frame.tobytes() * 2
        assert not rec.is_open

    def test_frame_size_cannot_change(self, tmp_path, fake_ffmpeg):
        rec = VideoRecorder(tmp_path / "movie.mp4")
        rec.open()
        rec.write_frame(np.zeros((4, 6, 3), dtype=np.uint8))

        with pytest.raises(AnimatedError):
            rec.write_frame(np.zeros((8, 6, 3), dtype=np.uint8))

    def test_close_with_no_frames(self, tmp_path, fake_ffmpeg):
        rec = VideoRecorder(tmp_path / "movie.mp4")
        rec.open()

        assert rec.close() is None
        assert fake_ffmpeg == []

    def test_abort(self, tmp_path, fake_ffmpeg):
        rec = VideoRecorder(tmp_path / "movie.mp4")
        rec.open()
        rec.write_frame(np.zeros((2, 2, 3), dtype=np.uint8))

        rec.abort()

        assert fake_ffmpeg[0].terminated
        assert not rec.is_open
