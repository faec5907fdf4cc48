"""Multi-key input state machine.

States are tagged frozen dataclasses. Dual-key prefixes (``g``, ``d``, ``y``,
``p``) wait for a second key until an expiry deadline read from the injected
clock; bookmark prefixes wait for their argument with no deadline; the
text-entry modes collect characters until Enter or Escape. Content search
collects a query, then browses its results until Enter or Escape.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from ..file_ops.fs import CreateKind
from ..runtime.capabilities import Clock
from . import actions
from .keys import (
    BACKSPACE,
    BOOKMARK_JUMP_KEY,
    BOOKMARK_SET_KEY,
    DOWN,
    DUAL_KEY_ACTIONS,
    DUAL_KEY_PREFIXES,
    ENTER,
    ESC,
    FILTER_KEY,
    SEARCH_KEY,
    UP,
    KeyBindingRegistry,
    default_bindings,
    is_text_key,
    normalize_key,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_EXPIRY_SECONDS = 0.6
MAX_CHMOD_DIGITS = 4


class BookmarkArgKind(enum.Enum):
    SET = "set"
    JUMP = "jump"


@dataclass(frozen=True)
class Normal:
    pass


@dataclass(frozen=True)
class AwaitingSecondKey:
    first_key: str
    expiry: float


@dataclass(frozen=True)
class AwaitingBookmarkArg:
    kind: BookmarkArgKind


@dataclass(frozen=True)
class FilterMode:
    query: str = ""


@dataclass(frozen=True)
class RenameMode:
    text: str = ""


@dataclass(frozen=True)
class CreateMode:
    kind: CreateKind
    text: str = ""


@dataclass(frozen=True)
class ChmodMode:
    text: str = ""


@dataclass(frozen=True)
class SearchMode:
    query: str = ""


@dataclass(frozen=True)
class SearchResultsMode:
    pass


InputState = (
    Normal
    | AwaitingSecondKey
    | AwaitingBookmarkArg
    | FilterMode
    | RenameMode
    | CreateMode
    | ChmodMode
    | SearchMode
    | SearchResultsMode
)
_TextState = RenameMode | CreateMode | ChmodMode

NORMAL = Normal()


def _edit_text(text: str, key: str, *, octal_only: bool = False) -> str | None:
    """Apply an editing key to ``text``; ``None`` when the key does not edit."""
    if key == BACKSPACE:
        return text[:-1]
    if not is_text_key(key):
        return None
    if octal_only and (key not in "01234567" or len(text) >= MAX_CHMOD_DIGITS):
        return text
    return text + key


class InputStateMachine:
    """Turns key tokens into :class:`~lazyfm.input.actions.Action` lists."""

    def __init__(
        self,
        clock: Clock,
        *,
        expiry_seconds: float = DEFAULT_EXPIRY_SECONDS,
        bindings: KeyBindingRegistry | None = None,
    ) -> None:
        self._clock = clock
        self.expiry_seconds = expiry_seconds
        self._bindings = bindings if bindings is not None else default_bindings()
        self.state: InputState = NORMAL

    def reset(self) -> None:
        self.state = NORMAL

    def set_text(self, text: str) -> None:
        """Replace the buffer of the active text-entry mode (used to prefill rename)."""
        state = self.state
        if isinstance(state, RenameMode):
            self.state = RenameMode(text)
        elif isinstance(state, CreateMode):
            self.state = CreateMode(state.kind, text)
        elif isinstance(state, ChmodMode):
            self.state = ChmodMode(text)
        elif isinstance(state, FilterMode):
            self.state = FilterMode(text)
        elif isinstance(state, SearchMode):
            self.state = SearchMode(text)

    def tick(self) -> bool:
        """Expire a pending dual-key prefix; return whether the state changed."""
        state = self.state
        if isinstance(state, AwaitingSecondKey) and self._clock.monotonic() >= state.expiry:
            LOGGER.debug("dual-key prefix %r expired", state.first_key)
            self.state = NORMAL
            return True
        return False

    def pending_indicator(self) -> str | None:
        state = self.state
        if isinstance(state, AwaitingSecondKey):
            return state.first_key
        if isinstance(state, AwaitingBookmarkArg):
            return BOOKMARK_SET_KEY if state.kind is BookmarkArgKind.SET else BOOKMARK_JUMP_KEY
        if isinstance(state, FilterMode):
            return f"{FILTER_KEY}{state.query}"
        if isinstance(state, RenameMode):
            return f"rename: {state.text}"
        if isinstance(state, CreateMode):
            label = "new directory" if state.kind is CreateKind.DIRECTORY else "new file"
            return f"{label}: {state.text}"
        if isinstance(state, ChmodMode):
            return f"chmod: {state.text}"
        if isinstance(state, SearchMode):
            return f"search: {state.query}"
        return None

    def feed(self, key: str) -> list[actions.Action]:
        """Process one key and return the actions it completes (possibly none)."""
        key = normalize_key(key)
        if not key:
            return []
        state = self.state
        if isinstance(state, AwaitingSecondKey):
            return self._feed_second_key(state, key)
        if isinstance(state, AwaitingBookmarkArg):
            return self._feed_bookmark_arg(state, key)
        if isinstance(state, FilterMode):
            return self._feed_filter(state, key)
        if isinstance(state, (RenameMode, CreateMode, ChmodMode)):
            return self._feed_text(state, key)
        if isinstance(state, SearchMode):
            return self._feed_search(state, key)
        if isinstance(state, SearchResultsMode):
            return self._feed_search_results(key)
        return self._feed_normal(key)

    def _feed_normal(self, key: str) -> list[actions.Action]:
        if key in DUAL_KEY_PREFIXES:
            self.state = AwaitingSecondKey(key, self._clock.monotonic() + self.expiry_seconds)
            return []
        if key == BOOKMARK_SET_KEY:
            self.state = AwaitingBookmarkArg(BookmarkArgKind.SET)
            return []
        if key == BOOKMARK_JUMP_KEY:
            self.state = AwaitingBookmarkArg(BookmarkArgKind.JUMP)
            return []
        if key == FILTER_KEY:
            self.state = FilterMode("")
            return [actions.SetFilterQuery("")]
        if key == SEARCH_KEY:
            self.state = SearchMode("")
            return []

        action = self._bindings.lookup(key)
        if action is None:
            return []
        if isinstance(action, actions.BeginRename):
            self.state = RenameMode("")
        elif isinstance(action, actions.BeginCreate):
            self.state = CreateMode(action.kind, "")
        elif isinstance(action, actions.BeginChmod):
            self.state = ChmodMode("")
        return [action]

    def _feed_second_key(self, state: AwaitingSecondKey, key: str) -> list[actions.Action]:
        if self._clock.monotonic() >= state.expiry:
            self.state = NORMAL
            return self._feed_normal(key)
        self.state = NORMAL
        build = DUAL_KEY_ACTIONS.get(state.first_key + key)
        if build is None:
            LOGGER.debug("dual-key prefix %r cancelled by %r", state.first_key, key)
            return []
        return [build()]

    def _feed_bookmark_arg(self, state: AwaitingBookmarkArg, key: str) -> list[actions.Action]:
        self.state = NORMAL
        if not is_text_key(key) or key.isspace():
            return []
        if state.kind is BookmarkArgKind.SET:
            return [actions.SetBookmark(key)]
        return [actions.JumpBookmark(key)]

    def _feed_filter(self, state: FilterMode, key: str) -> list[actions.Action]:
        if key == ESC:
            self.state = NORMAL
            return [actions.ClearFilter()]
        if key == ENTER:
            self.state = NORMAL
            return [actions.CommitFilter(state.query)]
        if key in (UP, DOWN):
            return [actions.MoveCursor(-1 if key == UP else 1)]
        query = _edit_text(state.query, key)
        if query is None or query == state.query:
            return []
        self.state = FilterMode(query)
        return [actions.SetFilterQuery(query)]

    def _feed_text(self, state: _TextState, key: str) -> list[actions.Action]:
        if key == ESC:
            self.state = NORMAL
            return [actions.CancelInput()]
        if key == ENTER:
            self.state = NORMAL
            if isinstance(state, RenameMode):
                return [actions.CommitRename(state.text)]
            if isinstance(state, CreateMode):
                return [actions.CommitCreate(state.kind, state.text)]
            return [actions.CommitChmod(state.text)]
        text = _edit_text(state.text, key, octal_only=isinstance(state, ChmodMode))
        if text is not None:
            self.set_text(text)
        return []

    def _feed_search(self, state: SearchMode, key: str) -> list[actions.Action]:
        if key == ESC:
            self.state = NORMAL
            return [actions.CancelInput()]
        if key == ENTER:
            query = state.query.strip()
            if not query:
                self.state = NORMAL
                return [actions.CancelInput()]
            self.state = SearchResultsMode()
            return [actions.CommitSearch(query)]
        query = _edit_text(state.query, key)
        if query is not None:
            self.state = SearchMode(query)
        return []

    def _feed_search_results(self, key: str) -> list[actions.Action]:
        if key in (ESC, "q"):
            self.state = NORMAL
            return [actions.CloseSearchResults()]
        if key == ENTER:
            self.state = NORMAL
            return [actions.OpenSearchResult()]
        if key in ("j", DOWN):
            return [actions.MoveSearchCursor(1)]
        if key in ("k", UP):
            return [actions.MoveSearchCursor(-1)]
        if key in ("g", "G"):
            return [actions.JumpSearchCursor(to_end=key == "G")]
        return []


__all__ = [
    "DEFAULT_EXPIRY_SECONDS",
    "BookmarkArgKind",
    "Normal",
    "AwaitingSecondKey",
    "AwaitingBookmarkArg",
    "FilterMode",
    "RenameMode",
    "CreateMode",
    "ChmodMode",
    "SearchMode",
    "SearchResultsMode",
    "InputState",
    "InputStateMachine",
]
