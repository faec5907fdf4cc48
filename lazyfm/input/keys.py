"""Key tokens and the single-key binding table for normal mode."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial

from ..file_ops.fs import CreateKind
from ..selection import ClipboardMode
from . import actions

ESC = "ESC"
ENTER = "ENTER"
ENTER_CR = "ENTER_CR"
ENTER_LF = "ENTER_LF"
BACKSPACE = "BACKSPACE"
TAB = "TAB"
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
SPACE = " "
CTRL_T = "CTRL_T"
CTRL_W = "CTRL_W"
CTRL_LEFT = "CTRL_LEFT"
CTRL_RIGHT = "CTRL_RIGHT"
MAX_TAB_HOTKEYS = 9

DUAL_KEY_PREFIXES = frozenset({"g", "d", "y", "p"})
DUAL_KEY_ACTIONS: dict[str, Callable[[], actions.Action]] = {
    "gg": actions.JumpTop,
    "dd": actions.DeleteSelected,
    "yy": lambda: actions.Yank(ClipboardMode.COPY),
    "pp": actions.Paste,
}
BOOKMARK_SET_KEY = "m"
BOOKMARK_JUMP_KEY = "'"
FILTER_KEY = "/"
RENAME_KEY = "r"
NEW_FILE_KEY = "n"
NEW_DIRECTORY_KEY = "N"
CHMOD_KEY = "c"
SEARCH_KEY = "F"
COPY_PATH_KEY = "Y"

_ALIASES = {
    ENTER_CR: ENTER,
    ENTER_LF: ENTER,
    "\r": ENTER,
    "\n": ENTER,
    "\x1b": ESC,
    "\x7f": BACKSPACE,
    "\b": BACKSPACE,
    "SPACE": SPACE,
    "\x14": CTRL_T,
    "\x17": CTRL_W,
}


def normalize_key(key: str) -> str:
    """Fold terminal-specific spellings of the same key onto one token."""
    return _ALIASES.get(key, key)


def is_text_key(key: str) -> bool:
    """Return whether ``key`` inserts a printable character in text-entry modes."""
    return len(key) == 1 and key.isprintable()


@dataclass(frozen=True)
class KeyBinding:
    """Mapping from one or more key tokens to an action factory."""

    combos: tuple[str, ...]
    build: Callable[[], actions.Action]


class KeyBindingRegistry:
    """Key → action table; later registrations overwrite earlier ones."""

    def __init__(self, normalize: Callable[[str], str] = normalize_key) -> None:
        self._normalize = normalize
        self._factories: dict[str, Callable[[], actions.Action]] = {}

    def register_binding(self, binding: KeyBinding) -> KeyBindingRegistry:
        for combo in binding.combos:
            self._factories[self._normalize(combo)] = binding.build
        return self

    def register_bindings(self, *bindings: KeyBinding) -> KeyBindingRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def __contains__(self, key: str) -> bool:
        return self._normalize(key) in self._factories

    def lookup(self, key: str) -> actions.Action | None:
        """Build the bound action for ``key``, or ``None`` when unbound."""
        factory = self._factories.get(self._normalize(key))
        if factory is None:
            return None
        return factory()


def default_bindings() -> KeyBindingRegistry:
    return KeyBindingRegistry().register_bindings(
        KeyBinding(("j", DOWN), lambda: actions.MoveCursor(1)),
        KeyBinding(("k", UP), lambda: actions.MoveCursor(-1)),
        KeyBinding(("l", RIGHT, ENTER), actions.EnterSelected),
        KeyBinding(("h", LEFT, BACKSPACE), actions.GoParent),
        KeyBinding(("G",), actions.JumpBottom),
        KeyBinding((SPACE,), actions.ToggleSelection),
        KeyBinding((ESC,), actions.ClearSelection),
        KeyBinding(("x",), lambda: actions.Yank(ClipboardMode.MOVE)),
        KeyBinding(("s",), actions.CycleSort),
        KeyBinding((".",), actions.ToggleHidden),
        KeyBinding((RENAME_KEY,), actions.BeginRename),
        KeyBinding((NEW_FILE_KEY,), lambda: actions.BeginCreate(CreateKind.FILE)),
        KeyBinding((NEW_DIRECTORY_KEY,), lambda: actions.BeginCreate(CreateKind.DIRECTORY)),
        KeyBinding((CHMOD_KEY,), actions.BeginChmod),
        KeyBinding(("R",), actions.Refresh),
        KeyBinding(("X",), actions.CancelOperation),
        KeyBinding((COPY_PATH_KEY,), actions.CopyPath),
        KeyBinding((CTRL_T,), actions.OpenTab),
        KeyBinding((CTRL_W,), actions.CloseTab),
        KeyBinding((CTRL_RIGHT,), actions.NextTab),
        KeyBinding((CTRL_LEFT,), actions.PreviousTab),
        *(
            KeyBinding((f"ALT_{number}",), partial(actions.SwitchTab, number - 1))
            for number in range(1, MAX_TAB_HOTKEYS + 1)
        ),
        KeyBinding(("q",), actions.Quit),
    )


__all__ = [
    "ESC",
    "ENTER",
    "ENTER_CR",
    "ENTER_LF",
    "BACKSPACE",
    "TAB",
    "UP",
    "DOWN",
    "LEFT",
    "RIGHT",
    "SPACE",
    "CTRL_T",
    "CTRL_W",
    "CTRL_LEFT",
    "CTRL_RIGHT",
    "SEARCH_KEY",
    "DUAL_KEY_PREFIXES",
    "DUAL_KEY_ACTIONS",
    "KeyBinding",
    "KeyBindingRegistry",
    "default_bindings",
    "is_text_key",
    "normalize_key",
]
