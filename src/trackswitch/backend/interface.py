"""Interface the presentation shell requires of a media backend."""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from trackswitch.models.track import VideoInfo

ProgressSink = Callable[[float], None]


class MediaBackend(ABC):
    """Abstract base class for media backends.

    Implementations raise ``BackendError`` (or a subclass) carrying a
    human-readable cause when an operation fails.
    """

    @abstractmethod
    async def inspect_tracks(self, video_path: str) -> VideoInfo:
        """Return the audio tracks of ``video_path``.

        An empty track list is a valid result.
        """

    @abstractmethod
    async def switch_track(
        self,
        input_path: str,
        track_index: int,
        output_path: str,
        on_progress: Optional[ProgressSink] = None,
    ) -> None:
        """Write ``output_path`` with ``track_index`` as the default audio track.

        ``on_progress`` is invoked on the event loop thread with percentages in
        [0, 100] while the operation runs.
        """
