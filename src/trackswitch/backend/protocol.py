"""JSON-lines protocol spoken by the backend command on stdout.

Each message is one JSON object on its own line::

    {"success": true, "message": "progress", "data": {"progress": 42.0}}
    {"success": true, "message": "Audio tracks retrieved successfully", "data": {...}}
    {"success": false, "message": "failed to execute ffprobe: ..."}

Progress messages may appear any number of times before the single final
message.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

PROGRESS_MESSAGE = "progress"
TRACKS_RETRIEVED_MESSAGE = "Audio tracks retrieved successfully"
TRACK_SWITCHED_MESSAGE = "Audio track switched successfully"


@dataclass
class Response:
    """One protocol message."""

    success: bool
    message: Optional[str] = None
    data: Any = None

    @property
    def is_progress(self) -> bool:
        """Whether this is an intermediate progress update."""
        return self.success and self.message == PROGRESS_MESSAGE

    @property
    def progress(self) -> Optional[float]:
        """Progress percentage carried by a progress message."""
        if not self.is_progress or not isinstance(self.data, dict):
            return None
        value = self.data.get("progress")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return float(value)

    def encode(self) -> str:
        """Serialize to a single line (without trailing newline)."""
        payload: dict[str, Any] = {"success": self.success}
        if self.message:
            payload["message"] = self.message
        if self.data is not None:
            payload["data"] = self.data
        return json.dumps(payload, ensure_ascii=False)


def success(message: str, data: Any = None) -> Response:
    """Build a final success message."""
    return Response(success=True, message=message, data=data)


def failure(message: str) -> Response:
    """Build a final failure message."""
    return Response(success=False, message=message)


def progress(percent: float) -> Response:
    """Build a progress message."""
    return Response(success=True, message=PROGRESS_MESSAGE, data={"progress": percent})


def decode(line: str) -> Optional[Response]:
    """Parse one line of backend output.

    Returns:
        The message, or None if the line is not a protocol message
    """
    line = line.strip()
    if not line:
        return None

    try:
        payload = json.loads(line)
    except json.JSONDecodeError:
        return None

    if not isinstance(payload, dict) or not isinstance(payload.get("success"), bool):
        return None

    message = payload.get("message")
    return Response(
        success=payload["success"],
        message=message if isinstance(message, str) else None,
        data=payload.get("data"),
    )
