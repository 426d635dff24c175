"""Out-of-process backend driving the ``trackswitch-backend`` command."""

import asyncio
from typing import Optional

from trackswitch.backend import protocol
from trackswitch.backend.interface import MediaBackend, ProgressSink
from trackswitch.config import BackendConfig
from trackswitch.exceptions import BackendError
from trackswitch.models.track import VideoInfo
from trackswitch.utils.logger import get_logger

logger = get_logger(__name__)

STREAM_LIMIT = 1024 * 1024


class ProcessBackend(MediaBackend):
    """Backend that runs one child process per operation.

    The child writes JSON-lines protocol messages to stdout. Progress messages
    are forwarded to the caller's sink as they arrive; the single final message
    decides the outcome.
    """

    def __init__(self, command: list[str]):
        """Initialize backend.

        Args:
            command: argv prefix of the backend command
        """
        self.command = list(command)

    @classmethod
    def from_config(cls, config: BackendConfig) -> "ProcessBackend":
        """Build a backend from configuration."""
        return cls(config.command)

    async def inspect_tracks(self, video_path: str) -> VideoInfo:
        response = await self._call(["get-tracks", video_path])
        if not isinstance(response.data, dict):
            raise BackendError("Failed to parse video info: missing data")
        try:
            return VideoInfo.from_dict(response.data)
        except ValueError as e:
            raise BackendError(f"Failed to parse video info: {e}") from e

    async def switch_track(
        self,
        input_path: str,
        track_index: int,
        output_path: str,
        on_progress: Optional[ProgressSink] = None,
    ) -> None:
        await self._call(
            ["switch-track", input_path, str(track_index), output_path], on_progress
        )

    async def _call(
        self, args: list[str], on_progress: Optional[ProgressSink] = None
    ) -> protocol.Response:
        """Run the backend command and return its final success message.

        Raises:
            BackendError: If the command cannot run or reports a failure
        """
        cmd = [*self.command, *args]
        logger.debug("Executing backend", command=cmd)

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=STREAM_LIMIT,
            )
        except OSError as e:
            logger.error("Backend failed to start", command=cmd, error=str(e))
            raise BackendError(f"Failed to execute backend: {e}") from e

        stderr_task = asyncio.ensure_future(proc.stderr.read())
        final: Optional[protocol.Response] = None

        try:
            while True:
                try:
                    raw = await proc.stdout.readline()
                except ValueError as e:
                    logger.error("Backend output line too long", command=cmd, limit=STREAM_LIMIT)
                    raise BackendError(f"Backend output line too long: {e}") from e
                if not raw:
                    break
                response = protocol.decode(raw.decode("utf-8", errors="replace"))
                if response is None:
                    continue
                if response.is_progress:
                    percent = response.progress
                    if percent is not None and on_progress is not None:
                        on_progress(percent)
                else:
                    final = response
        except BaseException:
            await self._terminate(proc, stderr_task)
            raise

        returncode = await proc.wait()
        stderr = (await stderr_task).decode("utf-8", errors="replace").strip()

        if final is None:
            logger.error(
                "Backend produced no result",
                command=cmd,
                returncode=returncode,
                stderr=stderr,
            )
            if returncode != 0:
                raise BackendError(f"Command failed with status {returncode}: {stderr}")
            raise BackendError("No final response received")

        if not final.success:
            logger.warning("Backend reported failure", command=cmd, cause=final.message)
            raise BackendError(final.message or "Unknown error")

        return final

    @staticmethod
    async def _terminate(proc: asyncio.subprocess.Process, stderr_task: asyncio.Future) -> None:
        """Kill and reap an abandoned backend process."""
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
        await proc.wait()
        stderr_task.cancel()
        logger.debug("Backend process terminated", returncode=proc.returncode)
