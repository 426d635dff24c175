"""Media backends: inspect audio tracks and switch the default track.

``LocalBackend`` runs ffprobe/ffmpeg in-process; ``ProcessBackend`` drives
the ``trackswitch-backend`` command over its JSON-lines protocol.
"""

from trackswitch.backend.interface import MediaBackend
from trackswitch.backend.local import LocalBackend
from trackswitch.backend.process import ProcessBackend
from trackswitch.config import BackendConfig


def create_backend(config: BackendConfig) -> MediaBackend:
    """Get the backend selected by ``config.mode``.

    Raises:
        ValueError: If the mode is not supported
    """
    if config.mode == "local":
        return LocalBackend.from_config(config)
    elif config.mode == "process":
        return ProcessBackend.from_config(config)
    else:
        raise ValueError(f"Unsupported backend mode: {config.mode}")


__all__ = ["MediaBackend", "LocalBackend", "ProcessBackend", "create_backend"]
