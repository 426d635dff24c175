"""Shared pytest fixtures for trackswitch tests."""

from typing import Optional

import pytest

from trackswitch.backend.interface import MediaBackend
from trackswitch.config import LoggingConfig
from trackswitch.models.track import AudioTrack, VideoInfo
from trackswitch.shell.i18n import Localizer
from trackswitch.utils.logger import setup_logging


class FakeBackend(MediaBackend):
    """Backend double recording every call."""

    def __init__(
        self,
        info: Optional[VideoInfo] = None,
        inspect_error: Optional[Exception] = None,
        switch_error: Optional[Exception] = None,
        progress_values=(),
    ):
        self.info = info
        self.inspect_error = inspect_error
        self.switch_error = switch_error
        self.progress_values = list(progress_values)
        self.inspect_calls = []
        self.switch_calls = []
        self.last_sink = None

    async def inspect_tracks(self, video_path):
        self.inspect_calls.append(video_path)
        if self.inspect_error is not None:
            raise self.inspect_error
        if self.info is None:
            return VideoInfo(file_path=video_path)
        return VideoInfo(file_path=video_path, audio_tracks=self.info.audio_tracks)

    async def switch_track(self, input_path, track_index, output_path, on_progress=None):
        self.switch_calls.append((input_path, track_index, output_path))
        self.last_sink = on_progress
        for value in self.progress_values:
            if on_progress is not None:
                on_progress(value)
        if self.switch_error is not None:
            raise self.switch_error


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Route structured logs through stdlib logging on stderr."""
    setup_logging(LoggingConfig(format="text", level="debug"))


@pytest.fixture
def sample_audio_tracks():
    """Audio tracks as ffprobe reports them after a video stream at index 0."""
    return (
        AudioTrack(index=1, language="eng", title="English", codec="aac"),
        AudioTrack(index=2, language="jpn", title="Japanese", codec="ac3"),
        AudioTrack(index=3, language="", title="", codec="opus"),
    )


@pytest.fixture
def sample_video_info(sample_audio_tracks):
    """VideoInfo with three audio tracks."""
    return VideoInfo(file_path="/videos/movie.mkv", audio_tracks=sample_audio_tracks)


@pytest.fixture
def localizer():
    """English localizer from the packaged bundles."""
    return Localizer.load("en", "en")


@pytest.fixture
def fake_backend_cls():
    """The FakeBackend class, for tests building their own instances."""
    return FakeBackend
