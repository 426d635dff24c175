"""Default audio track switching using an ffmpeg stream-copy remux."""

import subprocess
import tempfile
import threading
from pathlib import Path
from typing import Callable, Optional

from trackswitch.core.progress import ProgressParser
from trackswitch.core.prober import TrackProber
from trackswitch.exceptions import ProbeError, RemuxError
from trackswitch.utils.logger import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[float], None]

STDERR_TAIL_CHARS = 500


class TrackRemuxer:
    """Write a copy of a video with one audio track flagged as default.

    All streams are copied without re-encoding. Every audio stream loses its
    ``default`` disposition except the selected one.
    """

    def __init__(
        self,
        prober: TrackProber,
        ffmpeg_path: str = "ffmpeg",
        timeout_seconds: int = 3600,
    ):
        """Initialize remuxer.

        Args:
            prober: Prober used to resolve track positions and duration
            ffmpeg_path: ffmpeg executable name or path
            timeout_seconds: Maximum time for the ffmpeg run
        """
        self.prober = prober
        self.ffmpeg_path = ffmpeg_path
        self.timeout_seconds = timeout_seconds

    def build_command(self, input_path: str, output_path: str, audio_position: int) -> list[str]:
        """Build the ffmpeg command line.

        Args:
            input_path: Source file
            output_path: Destination file
            audio_position: Audio-relative position (``a:N``) of the new default

        Returns:
            Command list for subprocess
        """
        return [
            self.ffmpeg_path,
            "-i", input_path,
            "-map", "0",  # Map all streams
            "-c", "copy",  # Copy codecs (no re-encode)
            "-disposition:a", "0",  # Clear default from every audio stream
            f"-disposition:a:{audio_position}", "default",
            "-y",
            "-progress", "pipe:1",
            "-nostats",
            output_path,
        ]

    def switch(
        self,
        input_path: str,
        track_index: int,
        output_path: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        """Remux ``input_path`` into ``output_path`` with a new default track.

        Args:
            input_path: Source video file
            track_index: Stream index of the audio track to make default
            output_path: Where to write the remuxed copy
            on_progress: Called with non-decreasing percentages in [0, 100]

        Raises:
            RemuxError: If the track is unknown or ffmpeg fails
        """
        if Path(input_path).resolve() == Path(output_path).resolve():
            raise RemuxError("output path must differ from input path")

        try:
            info = self.prober.inspect(input_path)
            duration = self.prober.probe_duration(input_path)
        except ProbeError as e:
            raise RemuxError(e.cause) from e

        position = info.audio_position(track_index)
        if position is None:
            logger.error(
                "Track index not found",
                file=input_path,
                track_index=track_index,
                available=[t.index for t in info.audio_tracks],
            )
            raise RemuxError(f"audio track {track_index} not found in {input_path}")

        try:
            Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RemuxError(f"failed to create output directory: {e}") from e

        cmd = self.build_command(input_path, output_path, position)

        logger.info(
            "Switching default audio track",
            file=input_path,
            output=output_path,
            track_index=track_index,
            audio_position=position,
            duration=duration,
        )
        logger.debug("Executing ffmpeg remux", command=cmd)

        self._run(cmd, output_path, duration, on_progress)

        logger.info(
            "Audio track switched",
            file=input_path,
            output=output_path,
            track_index=track_index,
        )

    def _run(
        self,
        cmd: list[str],
        output_path: str,
        duration: Optional[float],
        on_progress: Optional[ProgressCallback],
    ) -> None:
        """Run ffmpeg, forwarding progress until it exits."""
        parser = ProgressParser()
        last_percent = -1.0

        with tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace") as stderr:
            try:
                proc = subprocess.Popen(
                    cmd,
                    stdout=subprocess.PIPE,
                    stderr=stderr,
                    stdin=subprocess.DEVNULL,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                )
            except FileNotFoundError as e:
                logger.error("ffmpeg not found", ffmpeg=self.ffmpeg_path)
                raise RemuxError(f"failed to start ffmpeg: {e}") from e

            timed_out = threading.Event()

            def _kill():
                timed_out.set()
                proc.kill()

            timer = threading.Timer(self.timeout_seconds, _kill)
            timer.start()
            try:
                for line in proc.stdout:
                    block = parser.feed(line)
                    if block is None:
                        continue
                    percent = block.get_percent(duration)
                    if percent is None or percent <= last_percent:
                        continue
                    last_percent = percent
                    if on_progress is not None:
                        on_progress(percent)
                returncode = proc.wait()
            except BaseException:
                # ffmpeg must not outlive an aborted switch
                proc.kill()
                proc.wait()
                self._cleanup(output_path)
                raise
            finally:
                timer.cancel()
                proc.stdout.close()

            if timed_out.is_set():
                logger.error("ffmpeg timeout", output=output_path, timeout=self.timeout_seconds)
                self._cleanup(output_path)
                raise RemuxError(f"ffmpeg timed out after {self.timeout_seconds}s")

            if returncode != 0:
                stderr.seek(0)
                tail = stderr.read()[-STDERR_TAIL_CHARS:].strip()
                logger.error(
                    "ffmpeg failed",
                    output=output_path,
                    returncode=returncode,
                    stderr=tail,
                )
                self._cleanup(output_path)
                raise RemuxError(f"ffmpeg error: exit status {returncode}\nOutput: {tail}")

    def _cleanup(self, output_path: str) -> None:
        """Remove a partially written output file."""
        path = Path(output_path)
        try:
            if path.exists():
                path.unlink()
                logger.debug("Cleaned up file", file=output_path)
        except OSError as e:
            logger.warning("Failed to cleanup file", file=output_path, error=str(e))

