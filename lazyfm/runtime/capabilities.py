"""Injected capabilities: opener, trash, clock, text clipboard, and preview provider.

The core only talks to these protocols. Default implementations wrap the
platform opener, ``send2trash``, the platform clipboard commands, and
``time.monotonic``.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
import time
from pathlib import Path
from typing import Protocol

from send2trash import send2trash
from send2trash.exceptions import TrashPermissionError

from ..errors import ClipboardError, OpenError, TrashError

LOGGER = logging.getLogger(__name__)


class Opener(Protocol):
    def open(self, path: Path) -> None:
        """Open ``path`` with an external program; raise :class:`OpenError` on failure."""


class Trash(Protocol):
    def move_to_trash(self, path: Path) -> None:
        """Move ``path`` to the trash; raise :class:`TrashError` on failure."""


class Clock(Protocol):
    def monotonic(self) -> float: ...


class TextClipboard(Protocol):
    def copy(self, text: str) -> None:
        """Place ``text`` on the system clipboard; raise :class:`ClipboardError` on failure."""


class PreviewProvider(Protocol):
    def preview(self, path: Path) -> object:
        """Build preview content for a file; runs on a background worker."""


class SystemClock:
    def monotonic(self) -> float:
        return time.monotonic()


def _opener_command() -> list[str] | None:
    if sys.platform == "darwin":
        return ["open"]
    if os.name == "nt":
        return None
    for candidate in ("xdg-open", "gio"):
        if shutil.which(candidate):
            return [candidate, "open"] if candidate == "gio" else [candidate]
    return None


class SystemOpener:
    """Open files with the desktop's default application."""

    def open(self, path: Path) -> None:
        if os.name == "nt":
            try:
                os.startfile(str(path))  # type: ignore[attr-defined]
            except OSError as exc:
                raise OpenError(f"Cannot open {path.name}: {exc}", path) from exc
            return

        command = _opener_command()
        if command is None:
            raise OpenError("No system opener available.", path)
        try:
            subprocess.Popen(
                [*command, str(path)],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            raise OpenError(f"Cannot open {path.name}: {exc}", path) from exc
        LOGGER.debug("opened %s with %s", path, command[0])


class SendToTrash:
    """Trash capability backed by ``send2trash``."""

    def move_to_trash(self, path: Path) -> None:
        try:
            send2trash(str(path))
        except TrashPermissionError as exc:
            raise TrashError(f"Trash refused {path.name}: {exc}", path) from exc
        except OSError as exc:
            raise TrashError(f"Cannot trash {path.name}: {exc}", path) from exc


def _clipboard_commands() -> list[list[str]]:
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if os.name == "nt":
        return [["clip"]]
    return [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]


class SystemTextClipboard:
    """Clipboard capability that pipes text into the first working platform tool."""

    def copy(self, text: str) -> None:
        for command in _clipboard_commands():
            if shutil.which(command[0]) is None:
                continue
            try:
                proc = subprocess.run(command, input=text, text=True, check=False)
            except OSError as exc:
                LOGGER.debug("clipboard command %s failed: %s", command[0], exc)
                continue
            if proc.returncode == 0:
                return
        raise ClipboardError("No clipboard tool accepted the text.")


__all__ = [
    "Opener",
    "Trash",
    "Clock",
    "PreviewProvider",
    "TextClipboard",
    "SystemClock",
    "SystemOpener",
    "SendToTrash",
    "SystemTextClipboard",
]
