"""Unit tests for the ffprobe track prober."""

import json
import subprocess
from unittest.mock import Mock, patch

import pytest

from trackswitch.core.prober import TrackProber
from trackswitch.exceptions import ProbeError

FFPROBE_STREAMS = {
    "streams": [
        {
            "index": 1,
            "codec_name": "aac",
            "codec_type": "audio",
            "tags": {"language": "eng", "title": "English 2.0"},
        },
        {
            "index": 2,
            "codec_name": "ac3",
            "codec_type": "audio",
            "tags": {"language": "jpn"},
        },
        {"index": 4, "codec_name": "opus", "codec_type": "audio"},
    ]
}


class TestTrackProber:
    """Test TrackProber class."""

    @pytest.fixture
    def prober(self):
        """Create TrackProber instance."""
        return TrackProber(ffprobe_path="/usr/bin/ffprobe", timeout_seconds=5)

    def test_inspect_maps_streams(self, prober):
        """Test ffprobe streams become AudioTracks."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout=json.dumps(FFPROBE_STREAMS))
            info = prober.inspect("/videos/movie.mkv")

        assert info.file_path == "/videos/movie.mkv"
        assert [t.index for t in info.audio_tracks] == [1, 2, 4]
        assert info.audio_tracks[0].title == "English 2.0"
        assert info.audio_tracks[1].language == "jpn"
        assert info.audio_tracks[1].title == ""
        assert info.audio_tracks[2].language == ""
        assert info.audio_tracks[2].codec == "opus"

    def test_inspect_command(self, prober):
        """Test the ffprobe command line."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout='{"streams": []}')
            prober.inspect("/videos/movie.mkv")

        cmd = mock_run.call_args[0][0]
        assert cmd == [
            "/usr/bin/ffprobe",
            "-v", "quiet",
            "-print_format", "json",
            "-show_streams",
            "-select_streams", "a",
            "/videos/movie.mkv",
        ]
        assert mock_run.call_args[1]["timeout"] == 5

    def test_inspect_no_audio_is_not_an_error(self, prober):
        """Test a file without audio yields an empty track list."""
        with patch("subprocess.run", return_value=Mock(returncode=0, stdout="{}")):
            info = prober.inspect("/videos/silent.mp4")

        assert info.audio_tracks == ()

    def test_inspect_ffprobe_failure(self, prober):
        """Test a failing ffprobe raises ProbeError."""
        error = subprocess.CalledProcessError(1, "ffprobe", stderr="Invalid data")
        with patch("subprocess.run", side_effect=error):
            with pytest.raises(ProbeError, match="exit status 1"):
                prober.inspect("/videos/broken.mkv")

    def test_inspect_missing_executable(self, prober):
        """Test a missing ffprobe raises ProbeError."""
        with patch("subprocess.run", side_effect=FileNotFoundError("ffprobe")):
            with pytest.raises(ProbeError, match="failed to execute ffprobe"):
                prober.inspect("/videos/movie.mkv")

    def test_inspect_timeout(self, prober):
        """Test an ffprobe timeout raises ProbeError."""
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("ffprobe", 5)):
            with pytest.raises(ProbeError, match="timed out"):
                prober.inspect("/videos/movie.mkv")

    def test_inspect_invalid_json(self, prober):
        """Test unparsable output raises ProbeError."""
        with patch("subprocess.run", return_value=Mock(returncode=0, stdout="not json")):
            with pytest.raises(ProbeError, match="failed to parse"):
                prober.inspect("/videos/movie.mkv")

    def test_probe_duration(self, prober):
        """Test the container duration is read from the format section."""
        output = json.dumps({"format": {"duration": "5400.250000"}})
        with patch("subprocess.run", return_value=Mock(returncode=0, stdout=output)) as mock_run:
            assert prober.probe_duration("/videos/movie.mkv") == pytest.approx(5400.25)

        assert "-show_format" in mock_run.call_args[0][0]

    @pytest.mark.parametrize("format_section", [{}, {"duration": "N/A"}, {"duration": "0"}])
    def test_probe_duration_unknown(self, prober, format_section):
        """Test missing or unusable durations return None."""
        output = json.dumps({"format": format_section})
        with patch("subprocess.run", return_value=Mock(returncode=0, stdout=output)):
            assert prober.probe_duration("/videos/movie.mkv") is None
