"""Search helpers: fuzzy filtering of listings and recursive content search."""

from __future__ import annotations

from .content import ContentMatch, ContentSearchResult, search_directory_content
from .fuzzy import filter_entries, fuzzy_score, rank_names

__all__ = [
    "ContentMatch",
    "ContentSearchResult",
    "search_directory_content",
    "filter_entries",
    "fuzzy_score",
    "rank_names",
]
