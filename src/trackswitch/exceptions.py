"""Exceptions raised by trackswitch."""


class TrackSwitchError(Exception):
    """Base class for all trackswitch errors."""


class BackendError(TrackSwitchError):
    """A backend operation failed.

    Attributes:
        cause: Human-readable description of the failure
    """

    def __init__(self, cause: str):
        super().__init__(cause)
        self.cause = cause


class ProbeError(BackendError):
    """Inspecting a file with ffprobe failed."""


class RemuxError(BackendError):
    """Remuxing a file with ffmpeg failed."""


class InvalidTransitionError(TrackSwitchError):
    """The shell was asked to move between two incompatible states."""


class NoSelectionError(TrackSwitchError):
    """A switch was requested without a file, inspection result or track."""


class ConfigError(TrackSwitchError):
    """The configuration file could not be loaded."""


class UnsupportedFileError(TrackSwitchError):
    """The chosen file does not have a supported video extension."""

    def __init__(self, path: str):
        super().__init__(f"Unsupported file type: {path}")
        self.path = path
