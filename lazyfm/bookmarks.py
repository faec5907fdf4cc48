"""Single-character bookmarks mapped to absolute paths.

Bindings are not validated when set; a stale target is reported as
:class:`NotFoundError` when jumped to.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from .errors import NotFoundError


def is_bookmark_key(key: str) -> bool:
    """Return whether key is a valid single-character bookmark identifier."""
    return len(key) == 1 and key.isprintable() and not key.isspace()


class BookmarkStore:
    """Mutable key → path table for the lifetime of a session."""

    def __init__(self, initial: Mapping[str, Path] | None = None) -> None:
        self._bookmarks: dict[str, Path] = {}
        for key, path in (initial or {}).items():
            if is_bookmark_key(key):
                self._bookmarks[key] = Path(path)

    def __len__(self) -> int:
        return len(self._bookmarks)

    def set(self, key: str, path: Path) -> None:
        """Bind ``key`` to ``path``, replacing any previous binding."""
        if not is_bookmark_key(key):
            raise ValueError(f"invalid bookmark key: {key!r}")
        self._bookmarks[key] = path.absolute()

    def get(self, key: str) -> Path | None:
        return self._bookmarks.get(key)

    def resolve(self, key: str) -> Path:
        """Return the bound directory, raising :class:`NotFoundError` if unset or gone."""
        target = self._bookmarks.get(key)
        if target is None:
            raise NotFoundError(f"Bookmark '{key}' is not set")
        if not target.is_dir():
            raise NotFoundError(f"Bookmark '{key}' no longer exists: {target}", target)
        return target

    def items(self) -> dict[str, Path]:
        return dict(self._bookmarks)


__all__ = ["BookmarkStore", "is_bookmark_key"]
