"""Immutable directory snapshots.

A snapshot is replaced wholesale on every reload. Filter and git-status
updates produce derived copies that keep the same generation, because they
describe the same listing.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from ..search.fuzzy import filter_entries
from .sorting import sort_entries
from .types import Entry, GitStatus, SortMode


@dataclass(frozen=True)
class DirectorySnapshot:
    """Sorted listing of one directory plus its filtered view."""

    path: Path
    entries: tuple[Entry, ...]
    visible: tuple[Entry, ...]
    sort_mode: SortMode
    show_hidden: bool
    generation: int
    filter_query: str = ""
    loading: bool = False
    git_statuses_applied: bool = False

    @classmethod
    def build(
        cls,
        *,
        path: Path,
        entries: tuple[Entry, ...],
        sort_mode: SortMode,
        show_hidden: bool,
        generation: int,
        filter_query: str = "",
    ) -> DirectorySnapshot:
        return cls(
            path=path,
            entries=entries,
            visible=filter_entries(entries, filter_query),
            sort_mode=sort_mode,
            show_hidden=show_hidden,
            generation=generation,
            filter_query=filter_query,
        )

    @classmethod
    def placeholder(
        cls,
        path: Path,
        sort_mode: SortMode,
        show_hidden: bool,
        generation: int,
    ) -> DirectorySnapshot:
        """Empty snapshot shown while the real listing loads."""
        return cls(
            path=path,
            entries=(),
            visible=(),
            sort_mode=sort_mode,
            show_hidden=show_hidden,
            generation=generation,
            loading=True,
        )

    def __len__(self) -> int:
        return len(self.visible)

    def with_filter(self, query: str) -> DirectorySnapshot:
        if query == self.filter_query:
            return self
        return replace(self, filter_query=query, visible=filter_entries(self.entries, query))

    def with_sort_mode(self, mode: SortMode) -> DirectorySnapshot:
        """Re-sort in place of a reload; used when no fresh listing is needed."""
        entries = sort_entries(self.entries, mode)
        return replace(
            self,
            sort_mode=mode,
            entries=entries,
            visible=filter_entries(entries, self.filter_query),
        )

    def with_git_statuses(self, statuses: Mapping[str, GitStatus], default: GitStatus) -> DirectorySnapshot:
        """Annotate entries by child name; names missing from ``statuses`` get ``default``."""
        entries = tuple(entry.with_git_status(statuses.get(entry.name, default)) for entry in self.entries)
        return replace(
            self,
            entries=entries,
            visible=filter_entries(entries, self.filter_query),
            git_statuses_applied=True,
        )

    def index_of(self, path: Path) -> int | None:
        """Return the visible index of ``path`` or ``None``."""
        for index, entry in enumerate(self.visible):
            if entry.path == path:
                return index
        return None

    def entry_at(self, index: int | None) -> Entry | None:
        if index is None or not (0 <= index < len(self.visible)):
            return None
        return self.visible[index]


__all__ = ["DirectorySnapshot"]
