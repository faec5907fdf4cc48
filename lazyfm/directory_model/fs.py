"""Filesystem scanning for directory listings.

Per-entry stat failures never fail a listing: the entry is kept and marked
inaccessible. Only a directory that cannot be scanned at all raises.
"""

from __future__ import annotations

import errno
import logging
import os
import stat as stat_module
from pathlib import Path

from ..errors import DirectoryLoadError, PermissionDeniedError
from .snapshot import DirectorySnapshot
from .sorting import sort_entries
from .types import Entry, EntryKind, SortMode

LOGGER = logging.getLogger(__name__)


def _symlink_details(child: os.DirEntry) -> tuple[str | None, bool, bool]:
    """Return ``(target_text, target_is_dir, broken)`` for one symlink child."""
    try:
        target_text = os.readlink(child.path)
    except OSError:
        target_text = None
    try:
        target_stat = os.stat(child.path)
    except OSError:
        return target_text, False, True
    return target_text, stat_module.S_ISDIR(target_stat.st_mode), False


def entry_from_dir_entry(child: os.DirEntry) -> Entry:
    """Build an :class:`Entry` from one ``os.scandir`` result."""
    child_path = Path(child.path)
    try:
        is_symlink = child.is_symlink()
    except OSError:
        is_symlink = False

    try:
        st = child.stat(follow_symlinks=False)
    except OSError as exc:
        LOGGER.debug("stat failed for %s: %s", child_path, exc)
        try:
            is_dir = child.is_dir(follow_symlinks=False)
        except OSError:
            is_dir = False
        return Entry(
            path=child_path,
            name=child.name,
            kind=EntryKind.DIRECTORY if is_dir else EntryKind.FILE,
            is_dir=is_dir,
            accessible=False,
            error=exc.strerror or str(exc),
        )

    if is_symlink:
        target_text, target_is_dir, broken = _symlink_details(child)
        return Entry(
            path=child_path,
            name=child.name,
            kind=EntryKind.SYMLINK,
            is_dir=target_is_dir,
            size=int(st.st_size),
            mtime_ns=int(st.st_mtime_ns),
            mode=int(st.st_mode),
            symlink_target=target_text,
            broken_link=broken,
        )

    is_dir = stat_module.S_ISDIR(st.st_mode)
    return Entry(
        path=child_path,
        name=child.name,
        kind=EntryKind.DIRECTORY if is_dir else EntryKind.FILE,
        is_dir=is_dir,
        size=0 if is_dir else int(st.st_size),
        mtime_ns=int(st.st_mtime_ns),
        mode=int(st.st_mode),
    )


def list_directory_entries(directory: Path, show_hidden: bool) -> list[Entry]:
    """List children of ``directory`` in scan order.

    Hidden names (leading ``.``) are dropped unless ``show_hidden``.
    Raises :class:`PermissionDeniedError` or :class:`DirectoryLoadError`
    when the directory itself cannot be scanned.
    """
    entries: list[Entry] = []
    try:
        with os.scandir(directory) as children:
            for child in children:
                if not show_hidden and child.name.startswith("."):
                    continue
                entries.append(entry_from_dir_entry(child))
    except PermissionError as exc:
        raise PermissionDeniedError(f"Permission denied: {directory}", directory) from exc
    except OSError as exc:
        if exc.errno == errno.EACCES:
            raise PermissionDeniedError(f"Permission denied: {directory}", directory) from exc
        reason = exc.strerror or str(exc)
        raise DirectoryLoadError(f"Cannot list {directory}: {reason}", directory) from exc
    return entries


def load_directory(
    path: Path,
    sort_mode: SortMode,
    show_hidden: bool,
    generation: int,
    filter_query: str = "",
) -> DirectorySnapshot:
    """Load, hidden-filter, and sort ``path`` into a fresh snapshot."""
    path = path.absolute()
    entries = sort_entries(list_directory_entries(path, show_hidden), sort_mode)
    LOGGER.debug("loaded %s (%d entries, generation %d)", path, len(entries), generation)
    return DirectorySnapshot.build(
        path=path,
        entries=entries,
        sort_mode=sort_mode,
        show_hidden=show_hidden,
        generation=generation,
        filter_query=filter_query,
    )


__all__ = [
    "entry_from_dir_entry",
    "list_directory_entries",
    "load_directory",
]
