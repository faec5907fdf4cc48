"""Filesystem-change notification by polled directory signatures.

Computes cheap hashes over a directory's stat state and its children's
metadata. The polling watcher compares them to report changed directories.
"""

from __future__ import annotations

import hashlib
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

LOGGER = logging.getLogger(__name__)

DEFAULT_POLL_SECONDS = 0.5


class DirectoryWatcher(Protocol):
    """Signal source for directory changes."""

    def watch(self, directory: Path) -> None: ...

    def unwatch(self, directory: Path) -> None: ...

    def poll(self) -> list[Path]: ...


def _update_digest(digest, token: str) -> None:
    """Append a token plus separator byte to a hash digest."""
    digest.update(token.encode("utf-8", errors="surrogateescape"))
    digest.update(b"\0")


def build_directory_watch_signature(directory: Path) -> str:
    """Build a digest over ``directory`` and the metadata of its children.

    Hidden children are always included so toggling hidden files never
    requires a different signature.
    """
    digest = hashlib.blake2b(digest_size=20)
    _update_digest(digest, f"dir:{directory}")
    try:
        st = directory.stat()
    except FileNotFoundError:
        _update_digest(digest, "dir_stat:missing")
        return digest.hexdigest()
    except OSError:
        _update_digest(digest, "dir_stat:error")
        return digest.hexdigest()
    _update_digest(digest, f"dir_stat:ok:{st.st_mode}:{st.st_mtime_ns}")

    children: list[tuple[str, int, int, int, str]] = []
    try:
        with os.scandir(directory) as entries:
            for child in entries:
                try:
                    child_st = child.stat(follow_symlinks=False)
                    children.append((child.name, child_st.st_mtime_ns, child_st.st_size, child_st.st_mode, "ok"))
                except OSError:
                    children.append((child.name, 0, 0, 0, "error"))
    except OSError:
        _update_digest(digest, "children:error")
        return digest.hexdigest()

    children.sort(key=lambda item: item[0])
    for name, mtime_ns, size, mode, state in children:
        _update_digest(digest, f"child:{name}:{state}:{mtime_ns}:{size}:{mode}")
    return digest.hexdigest()


class PollingDirectoryWatcher:
    """Watcher that re-hashes watched directories at most every ``poll_seconds``."""

    def __init__(
        self,
        *,
        monotonic: Callable[[], float],
        poll_seconds: float = DEFAULT_POLL_SECONDS,
        signature: Callable[[Path], str] = build_directory_watch_signature,
    ) -> None:
        self._monotonic = monotonic
        self._poll_seconds = max(0.0, poll_seconds)
        self._signature = signature
        self._signatures: dict[Path, str] = {}
        self._last_poll = float("-inf")

    @property
    def watched(self) -> frozenset[Path]:
        return frozenset(self._signatures)

    def watch(self, directory: Path) -> None:
        if directory in self._signatures:
            return
        self._signatures[directory] = self._signature(directory)

    def unwatch(self, directory: Path) -> None:
        self._signatures.pop(directory, None)

    def poll(self) -> list[Path]:
        """Return watched directories whose signature changed since last poll."""
        now = self._monotonic()
        if (now - self._last_poll) < self._poll_seconds:
            return []
        self._last_poll = now

        changed: list[Path] = []
        for directory, previous in list(self._signatures.items()):
            current = self._signature(directory)
            if current != previous:
                self._signatures[directory] = current
                changed.append(directory)
        if changed:
            LOGGER.debug("directory change detected: %s", ", ".join(str(path) for path in changed))
        return changed


__all__ = [
    "DEFAULT_POLL_SECONDS",
    "DirectoryWatcher",
    "PollingDirectoryWatcher",
    "build_directory_watch_signature",
]
