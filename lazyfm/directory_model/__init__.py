"""Domain model for one listed directory plus change hooks.

This package contains non-UI listing primitives:
- entry, sort-mode, and git-status datatypes
- filesystem scanning with per-entry error tolerance
- sort comparators and immutable generation-stamped snapshots
- watch signatures for polled filesystem-change notification
"""

from __future__ import annotations

from .types import Entry, EntryKind, GitStatus, SortMode
from .sorting import sort_entries, sort_key
from .snapshot import DirectorySnapshot
from .fs import entry_from_dir_entry, list_directory_entries, load_directory
from .watch import DirectoryWatcher, PollingDirectoryWatcher, build_directory_watch_signature

__all__ = [
    "Entry",
    "EntryKind",
    "GitStatus",
    "SortMode",
    "sort_entries",
    "sort_key",
    "DirectorySnapshot",
    "entry_from_dir_entry",
    "list_directory_entries",
    "load_directory",
    "DirectoryWatcher",
    "PollingDirectoryWatcher",
    "build_directory_watch_signature",
]
