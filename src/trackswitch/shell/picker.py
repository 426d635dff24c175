"""File pickers used by the shell to choose a video."""

import os
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import click

from trackswitch.config import DEFAULT_VIDEO_EXTENSIONS
from trackswitch.exceptions import UnsupportedFileError


class FilePicker(ABC):
    """Abstract base class for single-file video pickers."""

    def __init__(
        self,
        extensions: Sequence[str] = DEFAULT_VIDEO_EXTENSIONS,
        title: str = "Select Video File",
        filter_name: str = "Video",
    ):
        self.extensions = [ext.lower().lstrip(".") for ext in extensions]
        self.title = title
        self.filter_name = filter_name

    def accepts(self, path: str) -> bool:
        """Whether ``path`` has one of the allowed extensions."""
        _, ext = os.path.splitext(path)
        return ext.lower().lstrip(".") in self.extensions

    @abstractmethod
    def pick(self) -> Optional[str]:
        """Ask the user for one video file.

        Returns:
            Absolute path of the chosen file, or None if the user cancelled

        Raises:
            Exception: Anything the underlying dialog raises; the shell reports
                it as a selection failure
        """


class DialogFilePicker(FilePicker):
    """Native open-file dialog through tkinter."""

    def pick(self) -> Optional[str]:
        import tkinter
        from tkinter import filedialog

        root = tkinter.Tk()
        root.withdraw()
        try:
            patterns = " ".join(f"*.{ext}" for ext in self.extensions)
            selected = filedialog.askopenfilename(
                parent=root,
                title=self.title,
                filetypes=[(self.filter_name, patterns)],
            )
        finally:
            root.destroy()

        # askopenfilename returns "" (or an empty tuple on some platforms) on cancel
        if not selected or not isinstance(selected, str):
            return None
        return os.path.abspath(selected)


class PromptFilePicker(FilePicker):
    """Terminal prompt; an empty answer cancels."""

    def __init__(self, *args, prompt: str = "Video file (leave empty to cancel)", **kwargs):
        super().__init__(*args, **kwargs)
        self.prompt = prompt

    def pick(self) -> Optional[str]:
        """Prompt for a path.

        Raises:
            UnsupportedFileError: If the path has no allowed video extension
        """
        answer = click.prompt(self.prompt, default="", show_default=False).strip()
        if not answer:
            return None

        path = os.path.abspath(os.path.expanduser(answer.strip("\"'")))
        if not self.accepts(path):
            raise UnsupportedFileError(path)
        return path
