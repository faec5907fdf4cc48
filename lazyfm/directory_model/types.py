"""Domain datatypes for one listed directory."""

from __future__ import annotations

import enum
import stat as stat_module
from dataclasses import dataclass, replace
from pathlib import Path


class EntryKind(enum.Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


class GitStatus(enum.Enum):
    """Repository status shown next to an entry."""

    UNKNOWN = "unknown"
    CLEAN = "clean"
    UNTRACKED = "untracked"
    MODIFIED = "modified"
    STAGED = "staged"
    DELETED = "deleted"
    CONFLICT = "conflict"
    IGNORED = "ignored"

    @property
    def badge(self) -> str:
        return _GIT_BADGES[self]


_GIT_BADGES = {
    GitStatus.UNKNOWN: "",
    GitStatus.CLEAN: "",
    GitStatus.UNTRACKED: "?",
    GitStatus.MODIFIED: "M",
    GitStatus.STAGED: "S",
    GitStatus.DELETED: "D",
    GitStatus.CONFLICT: "!",
    GitStatus.IGNORED: "I",
}


class SortMode(enum.Enum):
    NAME = "name"
    SIZE = "size"
    DATE = "date"
    EXTENSION = "extension"

    def next(self) -> SortMode:
        """Return the following mode in the ``s`` key cycle."""
        members = list(SortMode)
        return members[(members.index(self) + 1) % len(members)]

    @classmethod
    def parse(cls, value: object) -> SortMode | None:
        if isinstance(value, SortMode):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower()
        if normalized in {"modified", "mtime", "time"}:
            normalized = "date"
        for mode in cls:
            if mode.value == normalized:
                return mode
        return None


@dataclass(frozen=True)
class Entry:
    """One directory child with metadata observed at listing time."""

    path: Path
    name: str
    kind: EntryKind
    is_dir: bool
    size: int = 0
    mtime_ns: int = 0
    mode: int = 0
    symlink_target: str | None = None
    broken_link: bool = False
    accessible: bool = True
    error: str | None = None
    git_status: GitStatus = GitStatus.UNKNOWN

    @property
    def is_symlink(self) -> bool:
        return self.kind is EntryKind.SYMLINK

    @property
    def is_hidden(self) -> bool:
        return self.name.startswith(".")

    @property
    def extension(self) -> str:
        if self.is_dir:
            return ""
        return Path(self.name).suffix.lstrip(".")

    @property
    def permissions_label(self) -> str:
        """Render permission bits as ``rwxr-xr--``."""
        bits = stat_module.S_IMODE(self.mode)
        out: list[str] = []
        for shift in (6, 3, 0):
            triple = (bits >> shift) & 0o7
            out.append("r" if triple & 4 else "-")
            out.append("w" if triple & 2 else "-")
            out.append("x" if triple & 1 else "-")
        return "".join(out)

    def with_git_status(self, status: GitStatus) -> Entry:
        if status is self.git_status:
            return self
        return replace(self, git_status=status)


__all__ = [
    "EntryKind",
    "GitStatus",
    "SortMode",
    "Entry",
]
