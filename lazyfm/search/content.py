"""Recursive, case-insensitive content search below a directory.

Runs as a background task. Hidden names are skipped unless requested, and
empty, oversized or undecodable files are passed over silently.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

LOGGER = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 200
MAX_SEARCH_FILE_BYTES = 1024 * 1024


@dataclass(frozen=True)
class ContentMatch:
    path: Path
    line: int  # 1-based
    column: int  # 1-based
    preview: str


@dataclass(frozen=True)
class ContentSearchResult:
    root: Path
    query: str
    matches: tuple[ContentMatch, ...] = ()
    truncated: bool = False


def _preview_line(text: str, max_chars: int = 220) -> str:
    clean = text.rstrip("\r\n").replace("\t", "    ")
    if len(clean) <= max_chars:
        return clean
    return clean[: max(1, max_chars - 3)] + "..."


def _log_walk_error(exc: OSError) -> None:
    LOGGER.debug("content search skipped %s: %s", exc.filename, exc.strerror)


def iter_searchable_files(root: Path, show_hidden: bool = False) -> Iterator[Path]:
    """Yield regular files below ``root`` in a stable, name-sorted order."""
    for directory, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        if not show_hidden:
            dirnames[:] = [name for name in dirnames if not name.startswith(".")]
        dirnames.sort()
        for name in sorted(filenames):
            if not show_hidden and name.startswith("."):
                continue
            yield Path(directory) / name


def _read_text(path: Path, max_file_bytes: int) -> str | None:
    try:
        if not path.is_file():
            return None
        size = path.stat().st_size
        if size == 0 or size > max_file_bytes:
            return None
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def search_directory_content(
    root: Path,
    query: str,
    *,
    show_hidden: bool = False,
    max_results: int = MAX_SEARCH_RESULTS,
    max_file_bytes: int = MAX_SEARCH_FILE_BYTES,
) -> ContentSearchResult:
    """Find lines under ``root`` containing ``query``, ignoring case.

    Stops after ``max_results`` matching lines and flags the result as
    truncated when more remained.
    """
    root = root.absolute()
    if not query:
        return ContentSearchResult(root, query)
    needle = query.casefold()
    matches: list[ContentMatch] = []
    for path in iter_searchable_files(root, show_hidden):
        text = _read_text(path, max_file_bytes)
        if text is None:
            continue
        for number, line in enumerate(text.splitlines(), start=1):
            column = line.casefold().find(needle)
            if column < 0:
                continue
            if len(matches) >= max_results:
                LOGGER.info("content search for %r under %s truncated at %d", query, root, max_results)
                return ContentSearchResult(root, query, tuple(matches), truncated=True)
            matches.append(ContentMatch(path=path, line=number, column=column + 1, preview=_preview_line(line)))
    return ContentSearchResult(root, query, tuple(matches))


__all__ = [
    "MAX_SEARCH_RESULTS",
    "MAX_SEARCH_FILE_BYTES",
    "ContentMatch",
    "ContentSearchResult",
    "iter_searchable_files",
    "search_directory_content",
]
