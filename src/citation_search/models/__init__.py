"""
Data models shared by providers, scoring and the HTTP layer.
"""

from .citation import (
    MAX_ABSTRACT_LENGTH,
    UNKNOWN_AUTHOR,
    Citation,
    SearchResult,
    current_year,
    normalize_year,
    split_authors,
    truncate_abstract,
)

__all__ = [
    "Citation",
    "SearchResult",
    "UNKNOWN_AUTHOR",
    "MAX_ABSTRACT_LENGTH",
    "current_year",
    "normalize_year",
    "split_authors",
    "truncate_abstract",
]
