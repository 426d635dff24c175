"""Backend-to-shell progress event channel.

Listeners subscribe once for the lifetime of the shell. Each switch operation
publishes through its own ``ProgressScope``; once that scope is closed, late
events from the finished operation are dropped instead of reaching a display
that may already belong to the next operation.
"""

import itertools
from typing import Callable, Optional

from trackswitch.utils.logger import get_logger

logger = get_logger(__name__)

PROGRESS_UPDATE = "progress-update"

ProgressListener = Callable[[float], None]


class Subscription:
    """Handle returned by ``ProgressChannel.subscribe``."""

    def __init__(self, channel: "ProgressChannel", listener: ProgressListener):
        self._channel = channel
        self._listener = listener

    @property
    def active(self) -> bool:
        return self._listener in self._channel._listeners

    def unsubscribe(self) -> None:
        """Stop receiving events. Safe to call more than once."""
        if self.active:
            self._channel._listeners.remove(self._listener)


class ProgressScope:
    """Publishing handle for a single operation."""

    def __init__(self, channel: "ProgressChannel", operation_id: int):
        self._channel = channel
        self.operation_id = operation_id
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed or self._channel._active_scope is not self

    def publish(self, value: float) -> bool:
        """Deliver ``value`` to every listener.

        Returns:
            False if the scope was already closed and the event was dropped
        """
        if self.closed:
            logger.debug(
                "Dropped stale progress event",
                channel=PROGRESS_UPDATE,
                operation_id=self.operation_id,
                value=value,
            )
            return False
        self._channel._dispatch(value)
        return True

    def close(self) -> None:
        self._closed = True
        if self._channel._active_scope is self:
            self._channel._active_scope = None

    def __enter__(self) -> "ProgressScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ProgressChannel:
    """Fan ``progress-update`` events out to subscribed listeners."""

    def __init__(self):
        self._listeners: list[ProgressListener] = []
        self._active_scope: Optional[ProgressScope] = None
        self._ids = itertools.count(1)

    def subscribe(self, listener: ProgressListener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    def open_scope(self) -> ProgressScope:
        """Start a new operation, closing any previous one."""
        if self._active_scope is not None:
            self._active_scope.close()
        scope = ProgressScope(self, next(self._ids))
        self._active_scope = scope
        return scope

    def _dispatch(self, value: float) -> None:
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception as e:
                logger.error(
                    "Progress listener failed",
                    channel=PROGRESS_UPDATE,
                    error=str(e),
                    exc_info=True,
                )
