"""In-process backend running ffprobe/ffmpeg from worker threads."""

import asyncio
from typing import Optional

from trackswitch.backend.interface import MediaBackend, ProgressSink
from trackswitch.config import BackendConfig
from trackswitch.core.prober import TrackProber
from trackswitch.core.remuxer import TrackRemuxer
from trackswitch.models.track import VideoInfo
from trackswitch.utils.logger import get_logger

logger = get_logger(__name__)


class LocalBackend(MediaBackend):
    """Backend that calls the prober and remuxer directly.

    The blocking subprocess work runs in the loop's default executor. Progress
    reported from the worker thread is handed back to the loop with
    ``call_soon_threadsafe`` so sinks only ever run on the loop thread.
    """

    def __init__(self, prober: TrackProber, remuxer: TrackRemuxer):
        self.prober = prober
        self.remuxer = remuxer

    @classmethod
    def from_config(cls, config: BackendConfig) -> "LocalBackend":
        """Build a backend from configuration."""
        prober = TrackProber(config.ffprobe_path, config.probe_timeout_seconds)
        remuxer = TrackRemuxer(prober, config.ffmpeg_path, config.switch_timeout_seconds)
        return cls(prober, remuxer)

    async def inspect_tracks(self, video_path: str) -> VideoInfo:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.prober.inspect, video_path)

    async def switch_track(
        self,
        input_path: str,
        track_index: int,
        output_path: str,
        on_progress: Optional[ProgressSink] = None,
    ) -> None:
        loop = asyncio.get_running_loop()

        def _report(percent: float) -> None:
            if on_progress is not None:
                loop.call_soon_threadsafe(on_progress, percent)

        await loop.run_in_executor(
            None, self.remuxer.switch, input_path, track_index, output_path, _report
        )
