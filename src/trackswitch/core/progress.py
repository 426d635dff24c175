"""FFmpeg ``-progress`` output parsing.

With ``-progress pipe:1`` ffmpeg writes blocks of ``key=value`` lines to
stdout. Each block ends with a ``progress=continue`` or ``progress=end`` line.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class FFmpegProgress:
    """One parsed progress block."""

    out_time_us: Optional[int] = None  # Output time in microseconds
    speed: Optional[str] = None
    finished: bool = False  # True for the final "progress=end" block

    @property
    def out_time_seconds(self) -> Optional[float]:
        """Get output time in seconds."""
        if self.out_time_us is not None:
            return self.out_time_us / 1_000_000
        return None

    def get_percent(self, duration_seconds: Optional[float]) -> Optional[float]:
        """Calculate progress percentage based on duration.

        Args:
            duration_seconds: Total duration of the input in seconds

        Returns:
            Percentage clamped to [0, 100], or None if it cannot be computed
        """
        if self.finished:
            return 100.0
        if duration_seconds is None or duration_seconds <= 0:
            return None
        out_time = self.out_time_seconds
        if out_time is None:
            return None
        return max(0.0, min(100.0, (out_time / duration_seconds) * 100))


class ProgressParser:
    """Incrementally assemble ffmpeg progress blocks from lines."""

    def __init__(self):
        self._fields: dict[str, str] = {}

    def feed(self, line: str) -> Optional[FFmpegProgress]:
        """Consume one line of output.

        Returns:
            The completed block when ``line`` terminates one, otherwise None
        """
        line = line.strip()
        key, sep, value = line.partition("=")
        if not sep:
            return None

        key = key.strip()
        value = value.strip()

        if key != "progress":
            self._fields[key] = value
            return None

        block = self._build(finished=value == "end")
        self._fields = {}
        return block

    def _build(self, finished: bool) -> FFmpegProgress:
        # out_time_ms is also microseconds in ffmpeg's output, older builds
        # only print that one
        raw_time = self._fields.get("out_time_us") or self._fields.get("out_time_ms")
        try:
            out_time_us = int(raw_time) if raw_time is not None else None
        except ValueError:
            out_time_us = None

        speed = self._fields.get("speed")
        return FFmpegProgress(
            out_time_us=out_time_us,
            speed=speed if speed and speed != "N/A" else None,
            finished=finished,
        )
