"""Git status overlay for one directory listing.

Runs a single ``git status`` per directory-change event and maps each direct
child name to the highest-priority status found at or beneath it. Results
are cached per ``(repo_root, directory)`` until invalidated.
"""

from __future__ import annotations

import logging
import subprocess
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path

from .directory_model.types import GitStatus

LOGGER = logging.getLogger(__name__)

GIT_STATUS_TIMEOUT_SECONDS = 5.0
GIT_STATUS_CACHE_MAX = 128

_STATUS_PRIORITY = {
    GitStatus.CONFLICT: 6,
    GitStatus.STAGED: 5,
    GitStatus.MODIFIED: 4,
    GitStatus.DELETED: 3,
    GitStatus.UNTRACKED: 2,
    GitStatus.IGNORED: 1,
    GitStatus.CLEAN: 0,
    GitStatus.UNKNOWN: -1,
}
_CONFLICT_CODES = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}


@dataclass(frozen=True)
class GitStatusResult:
    """Statuses for the direct children of ``directory``."""

    repo_root: Path
    directory: Path
    statuses: dict[str, GitStatus] = field(default_factory=dict)
    default_status: GitStatus = GitStatus.CLEAN


def status_from_porcelain_code(code: str) -> GitStatus | None:
    """Translate a two-letter porcelain ``XY`` code."""
    if code == "??":
        return GitStatus.UNTRACKED
    if code == "!!":
        return GitStatus.IGNORED
    if code in _CONFLICT_CODES:
        return GitStatus.CONFLICT
    index_code, worktree_code = code[0], code[1]
    if index_code in "MADRCT":
        return GitStatus.STAGED
    if worktree_code in "MRCT":
        return GitStatus.MODIFIED
    if worktree_code == "D":
        return GitStatus.DELETED
    return None


def higher_priority(first: GitStatus, second: GitStatus) -> GitStatus:
    return first if _STATUS_PRIORITY[first] >= _STATUS_PRIORITY[second] else second


def resolve_repo_root(path: Path, timeout_seconds: float = GIT_STATUS_TIMEOUT_SECONDS) -> Path | None:
    """Return the repository top-level for ``path`` or ``None`` outside git."""
    proc = _run_git(path, ["rev-parse", "--show-toplevel"], timeout_seconds)
    if proc is None or proc.returncode != 0:
        return None
    top = proc.stdout.strip()
    if not top:
        return None
    return Path(top).resolve()


def _run_git(cwd: Path, args: list[str], timeout_seconds: float) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            ["git", "-C", str(cwd), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except FileNotFoundError:
        LOGGER.debug("git executable not found")
        return None
    except (subprocess.TimeoutExpired, OSError) as exc:
        LOGGER.warning("git %s failed in %s: %s", args[0], cwd, exc)
        return None


def _iter_porcelain_records(output: str) -> list[tuple[str, str]]:
    records: list[tuple[str, str]] = []
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not token:
            continue
        if len(token) < 4 or token[2] != " ":
            continue

        status = token[:2]
        path_text = token[3:]
        records.append((status, path_text))

        # For renamed/copied entries, porcelain -z appends an extra token
        # containing the source path; the first path token is the destination.
        if "R" in status or "C" in status:
            index += 1

    return records


def collect_directory_git_status(
    directory: Path,
    timeout_seconds: float = GIT_STATUS_TIMEOUT_SECONDS,
) -> GitStatusResult | None:
    """Query git once for ``directory``; ``None`` when it is not inside a repository."""
    try:
        directory = directory.resolve()
    except OSError:
        return None
    repo_root = resolve_repo_root(directory, timeout_seconds)
    if repo_root is None:
        return None

    try:
        pathspec = directory.relative_to(repo_root).as_posix() or "."
    except ValueError:
        return None

    proc = _run_git(
        repo_root,
        ["status", "--porcelain=v1", "-z", "--untracked-files=all", "--ignored=matching", "--", pathspec],
        timeout_seconds,
    )
    if proc is None or proc.returncode != 0:
        return None

    statuses: dict[str, GitStatus] = {}
    default_status = GitStatus.CLEAN
    for code, rel_path in _iter_porcelain_records(proc.stdout):
        status = status_from_porcelain_code(code)
        if status is None or not rel_path:
            continue
        target = repo_root / rel_path.rstrip("/")
        try:
            relative_parts = target.relative_to(directory).parts
        except ValueError:
            # Record names the directory itself or an ancestor (ignored/untracked tree).
            if directory.is_relative_to(target):
                default_status = higher_priority(default_status, status)
            continue
        if not relative_parts:
            default_status = higher_priority(default_status, status)
            continue
        child = relative_parts[0]
        statuses[child] = higher_priority(statuses.get(child, GitStatus.UNKNOWN), status)

    return GitStatusResult(
        repo_root=repo_root,
        directory=directory,
        statuses=statuses,
        default_status=default_status,
    )


class GitStatusCache:
    """Bounded LRU cache of overlay results keyed by ``(repo_root, directory)``."""

    def __init__(self, max_entries: int = GIT_STATUS_CACHE_MAX) -> None:
        self.max_entries = max(1, max_entries)
        self._results: OrderedDict[tuple[Path, Path], GitStatusResult] = OrderedDict()
        self._repo_roots: dict[Path, Path] = {}

    def __len__(self) -> int:
        return len(self._results)

    def lookup(self, directory: Path) -> GitStatusResult | None:
        repo_root = self._repo_roots.get(directory)
        if repo_root is None:
            return None
        key = (repo_root, directory)
        result = self._results.get(key)
        if result is not None:
            self._results.move_to_end(key)
        return result

    def store(self, directory: Path, result: GitStatusResult) -> None:
        """Cache ``result`` under the listing path ``directory``."""
        key = (result.repo_root, directory)
        self._repo_roots[directory] = result.repo_root
        self._results[key] = result
        self._results.move_to_end(key)
        while len(self._results) > self.max_entries:
            (_old_root, old_directory), _ = self._results.popitem(last=False)
            self._repo_roots.pop(old_directory, None)

    def invalidate(self, directory: Path) -> None:
        repo_root = self._repo_roots.pop(directory, None)
        if repo_root is not None:
            self._results.pop((repo_root, directory), None)

    def clear(self) -> None:
        self._results.clear()
        self._repo_roots.clear()


__all__ = [
    "GIT_STATUS_TIMEOUT_SECONDS",
    "GitStatusResult",
    "GitStatusCache",
    "collect_directory_git_status",
    "higher_priority",
    "resolve_repo_root",
    "status_from_porcelain_code",
]
