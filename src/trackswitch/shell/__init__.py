"""Presentation shell: selection, track list, progress and messages."""

from trackswitch.shell.controller import Message, MessageKind, ShellController
from trackswitch.shell.events import ProgressChannel
from trackswitch.shell.i18n import Localizer
from trackswitch.shell.naming import derive_output_path
from trackswitch.shell.state import ShellState

__all__ = [
    "Localizer",
    "Message",
    "MessageKind",
    "ProgressChannel",
    "ShellController",
    "ShellState",
    "derive_output_path",
]
