"""Multi-selection set and yank clipboard.

Selection is keyed by absolute path and outlives any one snapshot; paths
that vanish stay selected until cleared. The clipboard is an immutable path
snapshot taken at yank time and validated only when pasted.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path


class ClipboardMode(enum.Enum):
    COPY = "copy"
    MOVE = "move"


@dataclass(frozen=True)
class Clipboard:
    mode: ClipboardMode
    paths: tuple[Path, ...]
    source_dir: Path

    def __len__(self) -> int:
        return len(self.paths)

    def summary(self) -> str:
        verb = "copy" if self.mode is ClipboardMode.COPY else "move"
        noun = "item" if len(self.paths) == 1 else "items"
        return f"{len(self.paths)} {noun} to {verb}"

    def retain(self, paths: Iterable[Path]) -> Clipboard | None:
        """Return a clipboard holding only ``paths`` (in original order), or ``None`` if empty."""
        keep = set(paths)
        remaining = tuple(path for path in self.paths if path in keep)
        if not remaining:
            return None
        return Clipboard(mode=self.mode, paths=remaining, source_dir=self.source_dir)


class SelectionSet:
    """Set of selected absolute paths."""

    def __init__(self, paths: Iterable[Path] = ()) -> None:
        self._paths: set[Path] = set(paths)

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[Path]:
        return iter(sorted(self._paths))

    def __len__(self) -> int:
        return len(self._paths)

    def __bool__(self) -> bool:
        return bool(self._paths)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectionSet):
            return NotImplemented
        return self._paths == other._paths

    def __repr__(self) -> str:
        return f"SelectionSet({sorted(self._paths)!r})"

    def toggle(self, path: Path) -> bool:
        """Add or remove ``path``; return ``True`` when it is now selected."""
        if path in self._paths:
            self._paths.discard(path)
            return False
        self._paths.add(path)
        return True

    def discard(self, path: Path) -> None:
        self._paths.discard(path)

    def clear(self) -> None:
        self._paths.clear()

    def frozen(self) -> frozenset[Path]:
        return frozenset(self._paths)


def yank(
    mode: ClipboardMode,
    selection: SelectionSet,
    cursor_path: Path | None,
    source_dir: Path,
) -> Clipboard | None:
    """Snapshot the selection (or the entry under the cursor) into a clipboard.

    Returns ``None`` when there is nothing to yank. Source files are never
    touched.
    """
    if selection:
        paths = tuple(selection)
    elif cursor_path is not None:
        paths = (cursor_path,)
    else:
        return None
    return Clipboard(mode=mode, paths=paths, source_dir=source_dir)


__all__ = [
    "ClipboardMode",
    "Clipboard",
    "SelectionSet",
    "yank",
]
