"""Fuzzy subsequence filter over directory entries.

Matching is case-insensitive on the display name. Scores favor contiguous
runs and matches near the start of the name or after a word separator.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..directory_model.types import Entry

WORD_SEPARATORS = "/_- ."


def _score_alignment(query_folded: str, candidate_folded: str, start: int) -> int | None:
    """Score the leftmost alignment whose first character sits at ``start``."""
    score = 0
    prev_idx = start - 1
    run = 0
    for position, needle in enumerate(query_folded):
        idx = start if position == 0 else candidate_folded.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        if position > 0 and idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        elif position > 0:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(40, 15 + gap * 2)
        if idx == 0 or candidate_folded[idx - 1] in WORD_SEPARATORS:
            score += 35
        prev_idx = idx

    return score - min(30, start)


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score ``candidate`` against ``query`` or return ``None`` when it does not match.

    Every occurrence of the first query character is tried as an anchor, so a
    contiguous run later in the name beats a scattered match near the start.
    """
    if not query:
        return 0
    query_folded = query.casefold()
    candidate_folded = candidate.casefold()

    best: int | None = None
    start = candidate_folded.find(query_folded[0])
    while start >= 0:
        score = _score_alignment(query_folded, candidate_folded, start)
        if score is None:
            break
        if best is None or score > best:
            best = score
        start = candidate_folded.find(query_folded[0], start + 1)
    return best


def rank_names(query: str, names: Sequence[str]) -> list[tuple[int, str, int]]:
    """Return ``(index, name, score)`` for matching names, best first."""
    scored: list[tuple[int, int, str, str, int]] = []
    for idx, name in enumerate(names):
        score = fuzzy_score(query, name)
        if score is None:
            continue
        scored.append((-score, len(name), name.casefold(), name, idx))
    scored.sort()
    return [(idx, name, -neg_score) for neg_score, _, _, name, idx in scored]


def filter_entries(entries: Iterable[Entry], query: str) -> tuple[Entry, ...]:
    """Return the filtered view of ``entries`` for ``query``.

    An empty query keeps the input order and membership unchanged.
    """
    entries = tuple(entries)
    if not query:
        return entries
    ranked = rank_names(query, [entry.name for entry in entries])
    return tuple(entries[idx] for idx, _name, _score in ranked)


__all__ = [
    "WORD_SEPARATORS",
    "fuzzy_score",
    "rank_names",
    "filter_entries",
]
