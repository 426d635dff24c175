"""Unit tests for the ffmpeg remuxer."""

import io
from unittest.mock import Mock, patch

import pytest

from trackswitch.core.prober import TrackProber
from trackswitch.core.remuxer import TrackRemuxer
from trackswitch.exceptions import ProbeError, RemuxError

PROGRESS_OUTPUT = (
    "out_time_us=2500000\nspeed=1x\nprogress=continue\n"
    "out_time_us=5000000\nprogress=continue\n"
    "out_time_us=5000000\nprogress=continue\n"
    "out_time_us=4000000\nprogress=continue\n"
    "out_time_us=10000000\nprogress=end\n"
)


def make_process(stdout="", returncode=0):
    """Create a Popen double with the given stdout text."""
    proc = Mock()
    proc.stdout = io.StringIO(stdout)
    proc.wait.return_value = returncode
    return proc


class TestTrackRemuxer:
    """Test TrackRemuxer class."""

    @pytest.fixture
    def prober(self, sample_video_info):
        """Create a prober double returning the sample tracks."""
        prober = Mock(spec=TrackProber)
        prober.inspect.return_value = sample_video_info
        prober.probe_duration.return_value = 10.0
        return prober

    @pytest.fixture
    def remuxer(self, prober):
        """Create TrackRemuxer instance."""
        return TrackRemuxer(prober, ffmpeg_path="/usr/bin/ffmpeg", timeout_seconds=60)

    def test_build_command(self, remuxer):
        """Test ffmpeg command building."""
        cmd = remuxer.build_command("/in.mkv", "/out.mkv", 1)

        assert cmd[0] == "/usr/bin/ffmpeg"
        assert cmd[cmd.index("-i") + 1] == "/in.mkv"
        assert cmd[cmd.index("-map") + 1] == "0"
        assert cmd[cmd.index("-c") + 1] == "copy"
        assert cmd[cmd.index("-disposition:a") + 1] == "0"
        assert cmd[cmd.index("-disposition:a:1") + 1] == "default"
        assert cmd[cmd.index("-progress") + 1] == "pipe:1"
        assert "-y" in cmd
        assert cmd[-1] == "/out.mkv"

    def test_switch_reports_progress(self, remuxer, tmp_path):
        """Test progress is forwarded as a non-decreasing sequence."""
        output = tmp_path / "out" / "movie_track2_jpn.mkv"
        seen = []

        with patch("subprocess.Popen", return_value=make_process(PROGRESS_OUTPUT)) as mock_popen:
            remuxer.switch("/videos/movie.mkv", 2, str(output), seen.append)

        assert seen == [25.0, 50.0, 100.0]
        assert output.parent.is_dir()
        cmd = mock_popen.call_args[0][0]
        # Stream index 2 is the second audio stream
        assert "-disposition:a:1" in cmd

    def test_switch_without_callback(self, remuxer, tmp_path):
        """Test switching works without a progress callback."""
        with patch("subprocess.Popen", return_value=make_process(PROGRESS_OUTPUT)):
            remuxer.switch("/videos/movie.mkv", 1, str(tmp_path / "out.mkv"))

    def test_switch_unknown_duration_only_reports_end(self, remuxer, prober, tmp_path):
        """Test only the final block yields progress without a duration."""
        prober.probe_duration.return_value = None
        seen = []

        with patch("subprocess.Popen", return_value=make_process(PROGRESS_OUTPUT)):
            remuxer.switch("/videos/movie.mkv", 1, str(tmp_path / "out.mkv"), seen.append)

        assert seen == [100.0]

    def test_switch_unknown_track(self, remuxer, tmp_path):
        """Test a track index missing from the file is rejected."""
        with patch("subprocess.Popen") as mock_popen:
            with pytest.raises(RemuxError, match="audio track 9 not found"):
                remuxer.switch("/videos/movie.mkv", 9, str(tmp_path / "out.mkv"))

        mock_popen.assert_not_called()

    def test_switch_same_path_rejected(self, remuxer):
        """Test the input is never overwritten."""
        with pytest.raises(RemuxError, match="must differ"):
            remuxer.switch("/videos/movie.mkv", 1, "/videos/movie.mkv")

    def test_switch_probe_failure(self, remuxer, prober, tmp_path):
        """Test probe failures surface as RemuxError."""
        prober.inspect.side_effect = ProbeError("failed to execute ffprobe: exit status 1")

        with pytest.raises(RemuxError, match="exit status 1"):
            remuxer.switch("/videos/movie.mkv", 1, str(tmp_path / "out.mkv"))

    def test_switch_ffmpeg_failure_cleans_up(self, remuxer, tmp_path):
        """Test a failed remux removes partial output."""
        output = tmp_path / "out.mkv"
        output.write_bytes(b"partial")

        with patch("subprocess.Popen", return_value=make_process("", returncode=1)):
            with pytest.raises(RemuxError, match="exit status 1"):
                remuxer.switch("/videos/movie.mkv", 1, str(output))

        assert not output.exists()

    def test_switch_callback_error_kills_ffmpeg(self, remuxer, tmp_path):
        """Test ffmpeg is killed and reaped when the progress callback fails."""
        output = tmp_path / "out.mkv"
        output.write_bytes(b"partial")
        proc = make_process(PROGRESS_OUTPUT)

        def broken(_percent):
            raise RuntimeError("display gone")

        with patch("subprocess.Popen", return_value=proc):
            with pytest.raises(RuntimeError, match="display gone"):
                remuxer.switch("/videos/movie.mkv", 1, str(output), broken)

        proc.kill.assert_called_once()
        proc.wait.assert_called_once()
        assert not output.exists()

    def test_switch_missing_ffmpeg(self, remuxer, tmp_path):
        """Test a missing ffmpeg raises RemuxError."""
        with patch("subprocess.Popen", side_effect=FileNotFoundError("ffmpeg")):
            with pytest.raises(RemuxError, match="failed to start ffmpeg"):
                remuxer.switch("/videos/movie.mkv", 1, str(tmp_path / "out.mkv"))
