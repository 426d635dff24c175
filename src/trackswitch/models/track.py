"""Audio track data models."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class AudioTrack:
    """Represents an audio track in a video file."""

    index: int  # Stream index assigned by the demuxer
    language: str = ""  # Language tag, empty when untagged
    title: str = ""  # Track title, empty when untagged
    codec: str = ""  # Codec name (e.g., "aac", "ac3")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire representation."""
        return {
            "index": self.index,
            "language": self.language,
            "title": self.title,
            "codec": self.codec,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AudioTrack":
        """Build a track from its wire representation.

        Raises:
            ValueError: If the entry is not an object or its index is not an integer
        """
        if not isinstance(data, dict):
            raise ValueError(f"Invalid track entry: {data!r}")
        index = data.get("index")
        if isinstance(index, bool) or not isinstance(index, int):
            raise ValueError(f"Invalid track index: {index!r}")
        return cls(
            index=index,
            language=data.get("language") or "",
            title=data.get("title") or "",
            codec=data.get("codec") or "",
        )

    def __str__(self) -> str:
        """Human-readable representation."""
        lang_part = f" {self.language}" if self.language else ""
        title_part = f" ({self.title})" if self.title else ""
        return f"Track {self.index}:{lang_part} {self.codec}{title_part}"


@dataclass(frozen=True)
class VideoInfo:
    """Result of inspecting one video file."""

    file_path: str
    audio_tracks: tuple[AudioTrack, ...] = field(default_factory=tuple)

    def find_track(self, index: int) -> Optional[AudioTrack]:
        """Return the track with the given stream index, if present."""
        return next((t for t in self.audio_tracks if t.index == index), None)

    def audio_position(self, index: int) -> Optional[int]:
        """Return the audio-relative position of the track with ``index``.

        ffmpeg addresses audio streams as ``a:N`` where N counts audio streams
        only, in container order.
        """
        for position, track in enumerate(self.audio_tracks):
            if track.index == index:
                return position
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire representation."""
        return {
            "filePath": self.file_path,
            "audioTracks": [t.to_dict() for t in self.audio_tracks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VideoInfo":
        """Build from the wire representation.

        Raises:
            ValueError: If required fields are missing or malformed
        """
        file_path = data.get("filePath")
        if not isinstance(file_path, str):
            raise ValueError("Missing filePath")
        tracks = data.get("audioTracks") or []
        if not isinstance(tracks, list):
            raise ValueError("audioTracks must be a list")
        return cls(
            file_path=file_path,
            audio_tracks=tuple(AudioTrack.from_dict(t) for t in tracks),
        )

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"{self.file_path} ({len(self.audio_tracks)} audio tracks)"
