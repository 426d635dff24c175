"""Data models shared by the shell and the backend."""

from trackswitch.models.track import AudioTrack, VideoInfo

__all__ = ["AudioTrack", "VideoInfo"]
