"""Tab contexts: one navigation controller, selection and preview per tab.

The clipboard, bookmarks, input mode and operation engine stay shared by
every tab; a tab only owns what the original single-pane view owned.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from ..selection import SelectionSet
from .navigation import NavigationController
from .view_state import PreviewView


@dataclass
class Tab:
    tab_id: int
    navigation: NavigationController
    selection: SelectionSet = field(default_factory=SelectionSet)
    preview: PreviewView = field(default_factory=PreviewView)
    preview_key: tuple[Path, int] | None = None
    preview_generation: int = 0
    # (path, generation) of the snapshots whose git status was already requested
    git_requested: set[tuple[Path, int]] = field(default_factory=set)

    def live_snapshot_keys(self) -> set[tuple[Path, int]]:
        return {
            (snapshot.path, snapshot.generation)
            for snapshot in (self.navigation.current, self.navigation.parent)
            if snapshot is not None
        }


class TabSet:
    """Ordered tabs with one active; never empty."""

    def __init__(self, first: Tab) -> None:
        self._tabs = [first]
        self.active_index = 0

    def __len__(self) -> int:
        return len(self._tabs)

    def __iter__(self) -> Iterator[Tab]:
        return iter(list(self._tabs))

    @property
    def active(self) -> Tab:
        return self._tabs[self.active_index]

    def find(self, tab_id: int) -> Tab | None:
        for tab in self._tabs:
            if tab.tab_id == tab_id:
                return tab
        return None

    def open(self, tab: Tab) -> int:
        """Insert ``tab`` right after the active one and activate it."""
        self.active_index += 1
        self._tabs.insert(self.active_index, tab)
        return self.active_index

    def close_active(self) -> Tab | None:
        """Remove the active tab; ``None`` when it is the last one."""
        if len(self._tabs) <= 1:
            return None
        closed = self._tabs.pop(self.active_index)
        self.active_index = min(self.active_index, len(self._tabs) - 1)
        return closed

    def next(self) -> None:
        self.active_index = (self.active_index + 1) % len(self._tabs)

    def previous(self) -> None:
        self.active_index = (self.active_index - 1) % len(self._tabs)

    def activate(self, index: int) -> bool:
        if not 0 <= index < len(self._tabs):
            return False
        self.active_index = index
        return True


__all__ = ["Tab", "TabSet"]
