"""Sort comparators for directory listings.

Every mode groups directories before files and ends with a case-insensitive
then case-sensitive name tiebreak, so sorting is a total, idempotent order.
"""

from __future__ import annotations

from collections.abc import Iterable

from .types import Entry, SortMode


def _name_tiebreak(entry: Entry) -> tuple[str, str, str]:
    return (entry.name.casefold(), entry.name, str(entry.path))


def sort_key(entry: Entry, mode: SortMode) -> tuple:
    """Return the ordering key of ``entry`` under ``mode``."""
    group = 0 if entry.is_dir else 1
    if mode is SortMode.SIZE:
        return (group, -entry.size, *_name_tiebreak(entry))
    if mode is SortMode.DATE:
        return (group, -entry.mtime_ns, *_name_tiebreak(entry))
    if mode is SortMode.EXTENSION:
        return (group, entry.extension.casefold(), *_name_tiebreak(entry))
    return (group, *_name_tiebreak(entry))


def sort_entries(entries: Iterable[Entry], mode: SortMode) -> tuple[Entry, ...]:
    return tuple(sorted(entries, key=lambda entry: sort_key(entry, mode)))


__all__ = ["sort_key", "sort_entries"]
