"""Presentation shell: file selection, track listing and switching.

The controller owns all display state and is driven from a single asyncio
event loop. Rendering is left to the caller, which reads the public
attributes after each call and listens on the progress channel.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from trackswitch.backend.interface import MediaBackend
from trackswitch.exceptions import BackendError, NoSelectionError, UnsupportedFileError
from trackswitch.models.track import AudioTrack, VideoInfo
from trackswitch.shell.events import ProgressChannel, Subscription
from trackswitch.shell.i18n import Localizer
from trackswitch.shell.naming import UNKNOWN_LANGUAGE, derive_output_path
from trackswitch.shell.picker import FilePicker
from trackswitch.shell.state import ShellState, ShellStateMachine
from trackswitch.utils.logger import get_logger

logger = get_logger(__name__)


class MessageKind(Enum):
    """How a shell message should be presented."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Message:
    """A user-facing status line."""

    kind: MessageKind
    text: str

    @property
    def is_error(self) -> bool:
        return self.kind is MessageKind.ERROR

    def __str__(self) -> str:
        return self.text


class ShellController:
    """Drive inspection and switching against a media backend."""

    def __init__(
        self,
        backend: MediaBackend,
        localizer: Localizer,
        channel: Optional[ProgressChannel] = None,
        include_language: bool = True,
        unknown_language: str = UNKNOWN_LANGUAGE,
    ):
        """Initialize controller.

        Args:
            backend: Backend performing inspection and switching
            localizer: Translates every user-facing message
            channel: Progress channel, a private one is created if omitted
            include_language: Append the track language to output names
            unknown_language: Language tag for untagged tracks in output names
        """
        self.backend = backend
        self.localizer = localizer
        self.channel = channel or ProgressChannel()
        self.include_language = include_language
        self.unknown_language = unknown_language

        self.machine = ShellStateMachine()
        self.video_path: str = ""
        self.video_info: Optional[VideoInfo] = None
        self.selected_index: Optional[int] = None
        self.message: Optional[Message] = None
        self.progress: float = 0.0

        self._subscription: Optional[Subscription] = None

    # Lifecycle

    def start(self) -> None:
        """Subscribe to progress updates for the lifetime of the shell."""
        if self._subscription is None or not self._subscription.active:
            self._subscription = self.channel.subscribe(self._on_progress)

    def shutdown(self) -> None:
        """Drop the progress subscription."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_progress(self, value: float) -> None:
        # Last value wins; ordering is the backend's responsibility
        self.progress = value

    # Derived state

    @property
    def state(self) -> ShellState:
        return self.machine.state

    @property
    def selected_track(self) -> Optional[AudioTrack]:
        """The selected track, or None if the selection is empty or stale."""
        if self.video_info is None or self.selected_index is None:
            return None
        return self.video_info.find_track(self.selected_index)

    @property
    def can_select_file(self) -> bool:
        return not self.machine.is_busy

    @property
    def can_switch(self) -> bool:
        return (
            not self.machine.is_busy
            and bool(self.video_path)
            and self.selected_track is not None
        )

    @property
    def display_progress(self) -> int:
        """Progress for display, clamped to [0, 100] and rounded."""
        return int(round(min(100.0, max(0.0, self.progress))))

    def _set_message(self, kind: MessageKind, key: str, **params) -> None:
        self.message = Message(kind, self.localizer.translate(key, **params))

    # Operations

    async def select_file(self, picker: FilePicker) -> bool:
        """Let the user pick a video and inspect it.

        Returns:
            True if a file was chosen (whatever the inspection outcome)
        """
        if not self.can_select_file:
            self._set_message(MessageKind.ERROR, "errors.busy")
            return False

        try:
            path = picker.pick()
        except UnsupportedFileError as e:
            logger.warning("Unsupported file selected", file=e.path)
            self._set_message(MessageKind.ERROR, "file.unsupported", path=e.path)
            return False
        except Exception as e:
            logger.warning("File selection failed", error=str(e))
            self._set_message(MessageKind.ERROR, "errors.select_file", error=e)
            return False

        if path is None:
            logger.debug("File selection cancelled")
            return False

        self.video_path = path
        self.message = None
        await self.load_tracks(path)
        return True

    async def load_tracks(self, path: str) -> Optional[VideoInfo]:
        """Inspect ``path`` and replace the held track list.

        Raises:
            InvalidTransitionError: If another operation is outstanding
        """
        self.machine.transition(ShellState.INSPECTING)
        self.message = None

        try:
            info = await self.backend.inspect_tracks(path)
        except BackendError as e:
            logger.warning("Inspection failed", file=path, cause=e.cause)
            self.video_info = None
            self.selected_index = None
            self._set_message(MessageKind.ERROR, "errors.load_tracks", error=e.cause)
            return None
        finally:
            self.machine.transition(ShellState.IDLE)

        self.video_info = info
        self.selected_index = info.audio_tracks[0].index if info.audio_tracks else None
        self._set_message(MessageKind.INFO, "tracks.found", count=len(info.audio_tracks))
        logger.info(
            "Tracks loaded",
            file=path,
            track_count=len(info.audio_tracks),
            selected=self.selected_index,
        )
        return info

    def select_track(self, index: int) -> bool:
        """Change the selected track.

        Returns:
            False if the shell is busy or ``index`` is not in the held list
        """
        if self.machine.is_busy:
            self._set_message(MessageKind.ERROR, "errors.busy")
            return False
        if self.video_info is None or self.video_info.find_track(index) is None:
            self._set_message(MessageKind.ERROR, "errors.unknown_track", index=index)
            return False

        self.selected_index = index
        return True

    def output_path(self) -> str:
        """Output path for the current file and selection.

        Raises:
            NoSelectionError: If there is no file or valid selection
        """
        track = self.selected_track
        if not self.video_path or track is None:
            raise NoSelectionError("No file or track selected")
        return derive_output_path(
            self.video_path,
            track.index,
            track.language,
            include_language=self.include_language,
            unknown_language=self.unknown_language,
        )

    async def switch_track(self, output_path: Optional[str] = None) -> Optional[str]:
        """Write a copy of the file with the selected track as default.

        The request is refused locally, without touching the backend, when no
        file, inspection result or valid selection is held.

        Args:
            output_path: Destination, derived from the input name if omitted

        Returns:
            The output path on success, otherwise None

        Raises:
            InvalidTransitionError: If another operation is outstanding
        """
        if not self.video_path or self.video_info is None:
            self._set_message(MessageKind.ERROR, "errors.no_file")
            return None
        if self.selected_track is None:
            self._set_message(MessageKind.ERROR, "errors.no_track")
            return None

        if output_path is None:
            output_path = self.output_path()
        elif output_path == self.video_path:
            self._set_message(
                MessageKind.ERROR, "errors.switch", error="output path must differ from input path"
            )
            return None

        track_index = self.selected_index

        self.machine.transition(ShellState.SWITCHING)
        self.progress = 0.0
        self._set_message(MessageKind.INFO, "switch.processing")
        scope = self.channel.open_scope()

        logger.info(
            "Switching track",
            file=self.video_path,
            track_index=track_index,
            output=output_path,
            operation_id=scope.operation_id,
        )

        try:
            await self.backend.switch_track(
                self.video_path, track_index, output_path, on_progress=scope.publish
            )
        except BackendError as e:
            logger.warning("Switch failed", file=self.video_path, cause=e.cause)
            self._set_message(MessageKind.ERROR, "errors.switch", error=e.cause)
            return None
        finally:
            scope.close()
            self.progress = 0.0
            self.machine.transition(ShellState.IDLE)

        self._set_message(MessageKind.SUCCESS, "switch.success", path=output_path)
        return output_path
