"""Host-side collaborators a plugin talks to.

:class:`PublicApi` is what a launcher exposes to its plugins: theme
information, a clipboard and a way to show an error dialog.
:class:`ConsoleApi` is the implementation used by the ``shlinkrun`` CLI.
"""

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TextIO
from logging import getLogger

import pyperclip

from .lifecycle import EventHook
from .types import Theme

logger = getLogger(__name__)


class PublicApi(ABC):
    """Services the host offers to plugins."""

    def __init__(self):
        # Observers receive ``(old_theme, new_theme)``.
        self.theme_changed = EventHook("theme_changed")

    @abstractmethod
    def get_current_theme(self) -> Theme:
        ...

    @abstractmethod
    def copy_to_clipboard(self, text: str) -> None:
        ...

    @abstractmethod
    def show_error(self, message: str, title: str) -> None:
        ...


@dataclass
class PluginInitContext:
    """Passed to :meth:`~shlinkrun.plugins.base.Plugin.init`."""

    api: PublicApi
    plugin_directory: Optional[str] = None


class ConsoleApi(PublicApi):
    """Terminal host: clipboard via ``pyperclip``, errors on stderr."""

    def __init__(
        self,
        theme: Theme = Theme.DARK,
        use_clipboard: bool = True,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ):
        super().__init__()
        self._theme = theme
        self.use_clipboard = use_clipboard
        self._out = out
        self._err = err

    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err or sys.stderr

    def get_current_theme(self) -> Theme:
        return self._theme

    def set_theme(self, theme: Theme) -> None:
        old, self._theme = self._theme, theme
        if old != theme:
            self.theme_changed.emit(old, theme)

    def copy_to_clipboard(self, text: str) -> None:
        if self.use_clipboard:
            try:
                pyperclip.copy(text)
            except pyperclip.PyperclipException as e:
                logger.warning(f"Clipboard unavailable, printing instead: {e}")
            else:
                print(f"{text} copied to clipboard", file=self.out)
                return
        print(text, file=self.out)

    def show_error(self, message: str, title: str) -> None:
        print(f"{title}: {message}", file=self.err)


__all__ = ["PublicApi", "PluginInitContext", "ConsoleApi"]
