"""Actions emitted by the input state machine and consumed by the session."""

from __future__ import annotations

from dataclasses import dataclass

from ..file_ops.fs import CreateKind
from ..selection import ClipboardMode


class Action:
    """Marker base for every dispatchable action."""


@dataclass(frozen=True)
class MoveCursor(Action):
    delta: int


@dataclass(frozen=True)
class JumpTop(Action):
    pass


@dataclass(frozen=True)
class JumpBottom(Action):
    pass


@dataclass(frozen=True)
class EnterSelected(Action):
    """Descend into a directory or open a file, depending on the entry under the cursor."""


@dataclass(frozen=True)
class GoParent(Action):
    pass


@dataclass(frozen=True)
class ToggleSelection(Action):
    advance: bool = True


@dataclass(frozen=True)
class ClearSelection(Action):
    pass


@dataclass(frozen=True)
class Yank(Action):
    mode: ClipboardMode


@dataclass(frozen=True)
class Paste(Action):
    pass


@dataclass(frozen=True)
class DeleteSelected(Action):
    pass


@dataclass(frozen=True)
class SetBookmark(Action):
    key: str


@dataclass(frozen=True)
class JumpBookmark(Action):
    key: str


@dataclass(frozen=True)
class SetFilterQuery(Action):
    query: str


@dataclass(frozen=True)
class ClearFilter(Action):
    pass


@dataclass(frozen=True)
class CommitFilter(Action):
    query: str


@dataclass(frozen=True)
class BeginRename(Action):
    pass


@dataclass(frozen=True)
class CommitRename(Action):
    new_name: str


@dataclass(frozen=True)
class BeginCreate(Action):
    kind: CreateKind


@dataclass(frozen=True)
class CommitCreate(Action):
    kind: CreateKind
    name: str


@dataclass(frozen=True)
class BeginChmod(Action):
    pass


@dataclass(frozen=True)
class CommitChmod(Action):
    mode_text: str


@dataclass(frozen=True)
class CancelInput(Action):
    pass


@dataclass(frozen=True)
class CycleSort(Action):
    pass


@dataclass(frozen=True)
class ToggleHidden(Action):
    pass


@dataclass(frozen=True)
class Refresh(Action):
    pass


@dataclass(frozen=True)
class CancelOperation(Action):
    pass


@dataclass(frozen=True)
class CopyPath(Action):
    pass


@dataclass(frozen=True)
class CommitSearch(Action):
    query: str


@dataclass(frozen=True)
class MoveSearchCursor(Action):
    delta: int


@dataclass(frozen=True)
class JumpSearchCursor(Action):
    to_end: bool


@dataclass(frozen=True)
class OpenSearchResult(Action):
    pass


@dataclass(frozen=True)
class CloseSearchResults(Action):
    pass


@dataclass(frozen=True)
class OpenTab(Action):
    pass


@dataclass(frozen=True)
class CloseTab(Action):
    pass


@dataclass(frozen=True)
class NextTab(Action):
    pass


@dataclass(frozen=True)
class PreviousTab(Action):
    pass


@dataclass(frozen=True)
class SwitchTab(Action):
    index: int


@dataclass(frozen=True)
class Quit(Action):
    pass


__all__ = [
    "Action",
    "MoveCursor",
    "JumpTop",
    "JumpBottom",
    "EnterSelected",
    "GoParent",
    "ToggleSelection",
    "ClearSelection",
    "Yank",
    "Paste",
    "DeleteSelected",
    "SetBookmark",
    "JumpBookmark",
    "SetFilterQuery",
    "ClearFilter",
    "CommitFilter",
    "BeginRename",
    "CommitRename",
    "BeginCreate",
    "CommitCreate",
    "BeginChmod",
    "CommitChmod",
    "CancelInput",
    "CycleSort",
    "ToggleHidden",
    "Refresh",
    "CancelOperation",
    "CopyPath",
    "CommitSearch",
    "MoveSearchCursor",
    "JumpSearchCursor",
    "OpenSearchResult",
    "CloseSearchResults",
    "OpenTab",
    "CloseTab",
    "NextTab",
    "PreviousTab",
    "SwitchTab",
    "Quit",
]
