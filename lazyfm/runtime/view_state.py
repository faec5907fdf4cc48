"""Immutable render output emitted after every session change."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..directory_model import DirectorySnapshot, Entry, SortMode
from ..search import ContentMatch


@dataclass(frozen=True)
class PaneView:
    """Visible entries of one listing pane plus the highlighted row."""

    path: Path | None
    entries: tuple[Entry, ...] = ()
    cursor: int | None = None
    loading: bool = False

    @classmethod
    def from_snapshot(cls, snapshot: DirectorySnapshot | None, cursor: int | None) -> PaneView:
        if snapshot is None:
            return cls(path=None)
        return cls(path=snapshot.path, entries=snapshot.visible, cursor=cursor, loading=snapshot.loading)


@dataclass(frozen=True)
class PreviewView:
    """Preview of the entry under the cursor.

    Directories preview as a listing in ``entries``; files carry whatever the
    preview provider returned in ``content``.
    """

    path: Path | None = None
    entries: tuple[Entry, ...] | None = None
    content: object = None
    loading: bool = False
    error: str | None = None


@dataclass(frozen=True)
class SearchView:
    """Content search results, browsed modally until opened or closed."""

    query: str
    root: Path
    matches: tuple[ContentMatch, ...] = ()
    cursor: int = 0
    loading: bool = False
    truncated: bool = False

    def selected(self) -> ContentMatch | None:
        if not 0 <= self.cursor < len(self.matches):
            return None
        return self.matches[self.cursor]


@dataclass(frozen=True)
class ViewState:
    parent: PaneView
    current: PaneView
    preview: PreviewView
    selection: frozenset[Path]
    clipboard_summary: str | None
    filter_query: str
    pending_input: str | None
    sort_mode: SortMode
    show_hidden: bool
    status_message: str | None = None
    operation_summary: str | None = None
    colors: tuple[tuple[str, str], ...] = ()
    search: SearchView | None = None
    tab_paths: tuple[Path | None, ...] = ()
    active_tab: int = 0

    @property
    def cursor(self) -> int | None:
        return self.current.cursor

    def cursor_entry(self) -> Entry | None:
        cursor = self.current.cursor
        if cursor is None or not (0 <= cursor < len(self.current.entries)):
            return None
        return self.current.entries[cursor]


__all__ = ["PaneView", "PreviewView", "SearchView", "ViewState"]
