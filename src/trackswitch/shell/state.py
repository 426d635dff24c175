"""Explicit lifecycle of the presentation shell."""

from enum import Enum

from trackswitch.exceptions import InvalidTransitionError
from trackswitch.utils.logger import get_logger

logger = get_logger(__name__)


class ShellState(Enum):
    """What the shell is currently doing."""

    IDLE = "idle"
    INSPECTING = "inspecting"
    SWITCHING = "switching"


# Busy states can only return to IDLE; failures are reported via the message
ALLOWED_TRANSITIONS = {
    ShellState.IDLE: frozenset({ShellState.INSPECTING, ShellState.SWITCHING}),
    ShellState.INSPECTING: frozenset({ShellState.IDLE}),
    ShellState.SWITCHING: frozenset({ShellState.IDLE}),
}


class ShellStateMachine:
    """Holds the current ShellState and validates every transition."""

    def __init__(self, initial: ShellState = ShellState.IDLE):
        self._state = initial

    @property
    def state(self) -> ShellState:
        return self._state

    @property
    def is_busy(self) -> bool:
        """Whether an inspection or switch is outstanding."""
        return self._state is not ShellState.IDLE

    def can_transition(self, target: ShellState) -> bool:
        return target in ALLOWED_TRANSITIONS[self._state]

    def transition(self, target: ShellState) -> None:
        """Move to ``target``.

        Raises:
            InvalidTransitionError: If ``target`` is not reachable from the
                current state
        """
        if not self.can_transition(target):
            raise InvalidTransitionError(
                f"Cannot move from {self._state.value} to {target.value}"
            )
        logger.debug("Shell state changed", source=self._state.value, target=target.value)
        self._state = target
