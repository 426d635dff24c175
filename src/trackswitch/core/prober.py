"""Audio track inspection using ffprobe."""

import json
import subprocess
from pathlib import Path
from typing import Optional

from trackswitch.exceptions import ProbeError
from trackswitch.models.track import AudioTrack, VideoInfo
from trackswitch.utils.logger import get_logger

logger = get_logger(__name__)


class TrackProber:
    """Inspect audio tracks in video files using ffprobe."""

    def __init__(self, ffprobe_path: str = "ffprobe", timeout_seconds: int = 30):
        """Initialize prober.

        Args:
            ffprobe_path: ffprobe executable name or path
            timeout_seconds: Maximum time for a single ffprobe call
        """
        self.ffprobe_path = ffprobe_path
        self.timeout_seconds = timeout_seconds

    def _run(self, args: list[str], file_path: str) -> dict:
        """Run ffprobe with JSON output and return the decoded document.

        Raises:
            ProbeError: If ffprobe cannot be run, fails or prints invalid JSON
        """
        cmd = [self.ffprobe_path, "-v", "quiet", "-print_format", "json", *args, file_path]

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as e:
            logger.error("ffprobe not found", ffprobe=self.ffprobe_path)
            raise ProbeError(f"failed to execute ffprobe: {e}") from e
        except subprocess.TimeoutExpired as e:
            logger.error("ffprobe timeout", file=file_path, timeout=self.timeout_seconds)
            raise ProbeError(
                f"ffprobe timed out after {self.timeout_seconds}s"
            ) from e
        except subprocess.CalledProcessError as e:
            logger.error(
                "ffprobe failed",
                file=file_path,
                returncode=e.returncode,
                stderr=e.stderr,
            )
            raise ProbeError(
                f"failed to execute ffprobe: exit status {e.returncode}"
            ) from e

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse ffprobe output", file=file_path, error=str(e))
            raise ProbeError(f"failed to parse ffprobe output: {e}") from e

        if not isinstance(data, dict):
            raise ProbeError("failed to parse ffprobe output: not a JSON object")
        return data

    def inspect(self, file_path: str) -> VideoInfo:
        """Extract audio track information from a video file.

        The path is passed to ffprobe as-is; a missing or unreadable file
        surfaces as a ProbeError.

        Args:
            file_path: Path to video file

        Returns:
            VideoInfo, possibly with no audio tracks

        Raises:
            ProbeError: If ffprobe fails
        """
        logger.debug("Analyzing audio tracks", file=file_path)

        data = self._run(["-show_streams", "-select_streams", "a"], file_path)

        tracks = []
        for stream in data.get("streams") or []:
            tags = stream.get("tags") or {}
            tracks.append(
                AudioTrack(
                    index=int(stream.get("index", len(tracks))),
                    language=tags.get("language", ""),
                    title=tags.get("title", ""),
                    codec=stream.get("codec_name", ""),
                )
            )

        logger.info(
            "Audio tracks analyzed",
            file=file_path,
            track_count=len(tracks),
            languages=[t.language for t in tracks],
        )

        return VideoInfo(file_path=file_path, audio_tracks=tuple(tracks))

    def probe_duration(self, file_path: str | Path) -> Optional[float]:
        """Return the container duration in seconds, or None if unknown.

        Raises:
            ProbeError: If ffprobe fails
        """
        data = self._run(["-show_format"], str(file_path))
        duration = (data.get("format") or {}).get("duration")

        try:
            seconds = float(duration)
        except (TypeError, ValueError):
            logger.debug("Duration unavailable", file=str(file_path), duration=duration)
            return None

        return seconds if seconds > 0 else None
