"""Input-layer public API: key tokens, actions, and the multi-key state machine."""

from .actions import Action
from .keys import KeyBinding, KeyBindingRegistry, default_bindings, normalize_key
from .state_machine import (
    AwaitingBookmarkArg,
    AwaitingSecondKey,
    BookmarkArgKind,
    ChmodMode,
    CreateMode,
    FilterMode,
    InputStateMachine,
    Normal,
    RenameMode,
    SearchMode,
    SearchResultsMode,
)

__all__ = [
    "Action",
    "KeyBinding",
    "KeyBindingRegistry",
    "default_bindings",
    "normalize_key",
    "AwaitingBookmarkArg",
    "AwaitingSecondKey",
    "BookmarkArgKind",
    "ChmodMode",
    "CreateMode",
    "FilterMode",
    "InputStateMachine",
    "Normal",
    "RenameMode",
    "SearchMode",
    "SearchResultsMode",
]
