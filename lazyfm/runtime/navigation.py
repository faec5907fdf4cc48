"""Navigation controller: current directory, cursor, and per-path cursor memory.

The controller never touches the filesystem itself. Navigation installs a
loading placeholder stamped with a fresh generation and returns the
:class:`LoadRequest` objects the caller must run; results are accepted only
while their generation is still the one the controller expects.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass, replace
from pathlib import Path

from ..directory_model import DirectorySnapshot, Entry, SortMode
from ..git_status import GitStatusResult
from .capabilities import Opener

LOGGER = logging.getLogger(__name__)

MAX_CURSOR_HISTORY = 256

PANE_CURRENT = "current"
PANE_PARENT = "parent"


class CursorHistory:
    """Bounded path → last cursor index table; evicts least recently touched paths."""

    def __init__(self, max_entries: int = MAX_CURSOR_HISTORY) -> None:
        self.max_entries = max(1, max_entries)
        self._positions: OrderedDict[Path, int] = OrderedDict()

    def __len__(self) -> int:
        return len(self._positions)

    def __contains__(self, path: object) -> bool:
        return path in self._positions

    def remember(self, path: Path, index: int) -> None:
        self._positions[path] = max(0, index)
        self._positions.move_to_end(path)
        while len(self._positions) > self.max_entries:
            self._positions.popitem(last=False)

    def recall(self, path: Path) -> int | None:
        index = self._positions.get(path)
        if index is not None:
            self._positions.move_to_end(path)
        return index

    def forget(self, path: Path) -> None:
        self._positions.pop(path, None)


@dataclass(frozen=True)
class LoadRequest:
    """Listing the caller must perform and hand back via ``apply_load_*``."""

    pane: str
    path: Path
    generation: int
    sort_mode: SortMode
    show_hidden: bool


@dataclass(frozen=True)
class _Position:
    snapshot: DirectorySnapshot
    cursor: int | None
    parent: DirectorySnapshot | None


def _clamp(index: int, length: int) -> int | None:
    if length <= 0:
        return None
    return max(0, min(index, length - 1))


class NavigationController:
    """Owns the current/parent snapshots and the cursor into the filtered view."""

    def __init__(
        self,
        opener: Opener,
        *,
        sort_mode: SortMode = SortMode.NAME,
        show_hidden: bool = False,
        history_size: int = MAX_CURSOR_HISTORY,
    ) -> None:
        self._opener = opener
        self.sort_mode = sort_mode
        self.show_hidden = show_hidden
        self.history = CursorHistory(history_size)
        self._next_generation = 1
        self.current: DirectorySnapshot | None = None
        self.parent: DirectorySnapshot | None = None
        self.cursor: int | None = None
        self._expected: dict[str, tuple[Path, int]] = {}
        self._fallback: _Position | None = None
        self._focus_path: Path | None = None
        self._focus_index: int | None = None

    # generation / request helpers

    def _new_generation(self) -> int:
        generation = self._next_generation
        self._next_generation += 1
        return generation

    def _request(self, pane: str, path: Path) -> LoadRequest:
        generation = self._new_generation()
        self._expected[pane] = (path, generation)
        return LoadRequest(
            pane=pane,
            path=path,
            generation=generation,
            sort_mode=self.sort_mode,
            show_hidden=self.show_hidden,
        )

    def is_expected(self, pane: str, path: Path, generation: int) -> bool:
        return self._expected.get(pane) == (path, generation)

    @property
    def path(self) -> Path | None:
        return None if self.current is None else self.current.path

    @property
    def filter_query(self) -> str:
        return "" if self.current is None else self.current.filter_query

    def selected_entry(self) -> Entry | None:
        if self.current is None:
            return None
        return self.current.entry_at(self.cursor)

    # navigation

    def _remember_cursor(self) -> None:
        current = self.current
        if current is None or current.loading:
            return
        entry = current.entry_at(self.cursor)
        if entry is None:
            return
        # Stored against the unfiltered listing, which is what a revisit shows first.
        for index, candidate in enumerate(current.entries):
            if candidate.path == entry.path:
                self.history.remember(current.path, index)
                return

    def _begin_navigation(self, target: Path, *, parent: DirectorySnapshot | None) -> list[LoadRequest]:
        if self.current is not None and not self.current.loading:
            self._fallback = _Position(self.current, self.cursor, self.parent)
        request = self._request(PANE_CURRENT, target)
        self.current = DirectorySnapshot.placeholder(target, self.sort_mode, self.show_hidden, request.generation)
        self.cursor = None
        requests = [request]

        parent_path = target.parent
        if parent_path == target:
            self.parent = None
            self._expected.pop(PANE_PARENT, None)
        elif parent is not None and parent.path == parent_path:
            self.parent = parent
            self._expected.pop(PANE_PARENT, None)
        else:
            self.parent = None
            requests.append(self._request(PANE_PARENT, parent_path))
        LOGGER.debug("navigating to %s (generation %d)", target, request.generation)
        return requests

    def start(self, path: Path) -> list[LoadRequest]:
        """Begin at ``path`` with no previous position to fall back to."""
        target = path.absolute()
        self._fallback = None
        self._focus_path = None
        self._focus_index = self.history.recall(target)
        return self._begin_navigation(target, parent=None)

    def enter_directory(self, entry: Entry | Path) -> list[LoadRequest]:
        """Descend into ``entry``; the filter query resets on entry."""
        target = (entry.path if isinstance(entry, Entry) else entry).absolute()
        self._remember_cursor()
        previous = self.current
        reusable_parent = None
        if previous is not None and not previous.loading:
            reusable_parent = previous.with_filter("")
        self._focus_path = None
        self._focus_index = self.history.recall(target)
        return self._begin_navigation(target, parent=reusable_parent)

    def enter_file(self, entry: Entry) -> None:
        """Hand ``entry`` to the opener; raises :class:`OpenError` and leaves state untouched."""
        self._opener.open(entry.path)

    def reveal(self, target: Path) -> list[LoadRequest]:
        """Show the directory holding ``target`` with the cursor on it; clears the filter."""
        target = target.absolute()
        directory = target.parent
        current = self.current
        if current is not None and not current.loading and current.path == directory:
            self.set_filter_query("")
            return self.refresh(focus=target)
        self._remember_cursor()
        self._focus_path = target
        self._focus_index = None
        return self._begin_navigation(directory, parent=None)

    def go_parent(self) -> list[LoadRequest]:
        """Ascend one level, restoring the remembered cursor or focusing the child we left."""
        current = self.current
        if current is None:
            return []
        target = current.path.parent
        if target == current.path:
            return []
        self._remember_cursor()
        remembered = self.history.recall(target)
        self._focus_path = current.path if remembered is None else None
        self._focus_index = remembered
        return self._begin_navigation(target, parent=None)

    def refresh(self, focus: Path | None = None) -> list[LoadRequest]:
        """Reload the current (and parent) listing.

        The cursor lands on ``focus`` when given, otherwise stays on the same entry.
        """
        current = self.current
        if current is None:
            return []
        if focus is None:
            entry = self.selected_entry()
            focus = None if entry is None else entry.path
        self._focus_path = focus
        self._focus_index = self.cursor
        requests = [self._request(PANE_CURRENT, current.path)]
        if current.path.parent != current.path:
            requests.append(self._request(PANE_PARENT, current.path.parent))
        return requests

    def reload_if_showing(self, changed: Path) -> list[LoadRequest]:
        """Refresh when a watched directory shown in either pane changed."""
        current = self.current
        if current is None:
            return []
        if changed == current.path:
            return self.refresh()
        if self.parent is not None and changed == self.parent.path:
            return [self._request(PANE_PARENT, changed)]
        return []

    def set_show_hidden(self, show_hidden: bool) -> list[LoadRequest]:
        if show_hidden == self.show_hidden:
            return []
        self.show_hidden = show_hidden
        return self.refresh()

    def set_sort_mode(self, mode: SortMode) -> None:
        """Re-sort both panes immediately under fresh generations."""
        if mode is self.sort_mode:
            return
        self.sort_mode = mode
        current = self.current
        if current is None:
            return
        entry = self.selected_entry()
        if not current.loading:
            resorted = replace(current.with_sort_mode(mode), generation=self._new_generation())
            self._expected[PANE_CURRENT] = (resorted.path, resorted.generation)
            self.current = resorted
            self._place_cursor(entry.path if entry is not None else None, 0)
        if self.parent is not None and not self.parent.loading:
            parent = replace(self.parent.with_sort_mode(mode), generation=self._new_generation())
            self._expected[PANE_PARENT] = (parent.path, parent.generation)
            self.parent = parent

    # cursor

    def _place_cursor(self, focus_path: Path | None, fallback_index: int | None) -> None:
        current = self.current
        if current is None or not current.visible:
            self.cursor = None
            return
        if focus_path is not None:
            index = current.index_of(focus_path)
            if index is not None:
                self.cursor = index
                return
        self.cursor = _clamp(fallback_index or 0, len(current.visible))

    def move_cursor(self, delta: int) -> None:
        current = self.current
        if current is None or not current.visible:
            self.cursor = None
            return
        self.cursor = _clamp((self.cursor or 0) + delta, len(current.visible))

    def jump_top(self) -> None:
        self.cursor = _clamp(0, 0 if self.current is None else len(self.current.visible))

    def jump_bottom(self) -> None:
        length = 0 if self.current is None else len(self.current.visible)
        self.cursor = _clamp(length - 1, length)

    def set_filter_query(self, query: str) -> None:
        """Re-derive the filtered view, keeping the cursor on the same entry when it survives."""
        current = self.current
        if current is None or query == current.filter_query:
            return
        entry = self.selected_entry()
        self.current = current.with_filter(query)
        self._place_cursor(None if entry is None else entry.path, 0)

    # async results

    def apply_load_result(self, pane: str, snapshot: DirectorySnapshot) -> bool:
        """Install a finished listing; returns ``False`` when the result is stale."""
        if not self.is_expected(pane, snapshot.path, snapshot.generation):
            LOGGER.debug("dropping stale %s listing for %s (generation %d)", pane, snapshot.path, snapshot.generation)
            return False

        if pane == PANE_PARENT:
            self.parent = snapshot
            return True

        previous = self.current
        query = previous.filter_query if previous is not None and previous.path == snapshot.path else ""
        self.current = snapshot.with_filter(query)
        self._place_cursor(self._focus_path, self._focus_index)
        self._focus_path = None
        self._focus_index = None
        self._fallback = None
        return True

    def apply_load_failure(self, pane: str, path: Path, generation: int) -> list[LoadRequest] | None:
        """Recover from a failed listing.

        Returns ``None`` for stale failures. A failed navigation restores the
        previous position; a failed refresh of a vanished directory retreats
        to its parent.
        """
        if not self.is_expected(pane, path, generation):
            return None
        if pane == PANE_PARENT:
            self._expected.pop(PANE_PARENT, None)
            self.parent = None
            return []

        fallback = self._fallback
        self._fallback = None
        self._focus_path = None
        self._focus_index = None
        if fallback is not None and fallback.snapshot.path != path:
            self.current = fallback.snapshot
            self.cursor = fallback.cursor
            self.parent = fallback.parent
            self._expected[PANE_CURRENT] = (fallback.snapshot.path, fallback.snapshot.generation)
            if fallback.parent is not None:
                self._expected[PANE_PARENT] = (fallback.parent.path, fallback.parent.generation)
            LOGGER.info("navigation to %s failed; staying in %s", path, fallback.snapshot.path)
            return []

        if path.parent == path:
            self._expected.pop(PANE_CURRENT, None)
            return []
        self.history.forget(path)
        self._focus_path = path
        return self._begin_navigation(path.parent, parent=None)

    def apply_git_status(self, path: Path, generation: int, result: GitStatusResult | None) -> bool:
        """Annotate whichever pane shows ``(path, generation)``; stale results are dropped."""
        if result is None:
            return False
        applied = False
        current = self.current
        if current is not None and not current.loading and current.path == path and current.generation == generation:
            entry = self.selected_entry()
            self.current = current.with_git_statuses(result.statuses, result.default_status)
            self._place_cursor(None if entry is None else entry.path, self.cursor)
            applied = True
        parent = self.parent
        if parent is not None and parent.path == path and parent.generation == generation:
            self.parent = parent.with_git_statuses(result.statuses, result.default_status)
            applied = True
        if not applied:
            LOGGER.debug("dropping stale git status for %s (generation %d)", path, generation)
        return applied


__all__ = [
    "MAX_CURSOR_HISTORY",
    "PANE_CURRENT",
    "PANE_PARENT",
    "CursorHistory",
    "LoadRequest",
    "NavigationController",
]
