"""Domain exception taxonomy.

Filesystem helpers raise these; the file-operation engine and the session
turn them into per-item failure reasons or status-bar messages.
"""

from __future__ import annotations

from pathlib import Path


class FileManagerError(Exception):
    """Base class for every error the core reports to the user."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return self.message


class DirectoryLoadError(FileManagerError):
    """A directory could not be listed."""


class PermissionDeniedError(DirectoryLoadError):
    """Listing was refused by the operating system."""


class NameCollisionError(FileManagerError):
    """Rename/create destination already exists."""


class NotFoundError(FileManagerError):
    """Bookmark target or clipboard source no longer exists."""


class OpenError(FileManagerError):
    """The opener capability could not open a file."""


class TrashError(FileManagerError):
    """The trash capability rejected a path."""


class InvalidNameError(FileManagerError):
    """Name is empty or contains a path separator."""


class InvalidModeError(FileManagerError):
    """Permission text is not a valid octal mode."""


class FileOperationError(FileManagerError):
    """Rename, create or chmod was refused by the operating system."""


class ClipboardError(FileManagerError):
    """The text clipboard capability could not take the text."""


__all__ = [
    "FileManagerError",
    "DirectoryLoadError",
    "PermissionDeniedError",
    "NameCollisionError",
    "NotFoundError",
    "OpenError",
    "TrashError",
    "InvalidNameError",
    "InvalidModeError",
    "FileOperationError",
    "ClipboardError",
]
