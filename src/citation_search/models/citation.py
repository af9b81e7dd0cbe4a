"""
Citation - Standardized Citation Model for Multi-Source Search

Defines the records exchanged between providers, the scorer and the HTTP
layer. Dataclasses rather than Pydantic keep the core free of the transport
stack; ``to_dict()`` renders the camelCase wire shape.

Example:
    >>> citation = Citation(
    ...     title="Machine Learning in Healthcare",
    ...     authors=["Zhang Wei", "Li Ming"],
    ...     year=2023,
    ...     data_source="cnki",
    ... )
    >>> citation.to_dict()["abstractText"]
    ''
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any

UNKNOWN_AUTHOR = "Unknown"
MIN_YEAR = 1900
MAX_ABSTRACT_LENGTH = 300

_YEAR_PATTERN = re.compile(r"(?<!\d)(1[89]\d{2}|20\d{2})(?!\d)")
_AUTHOR_SEPARATORS = re.compile(r"[,;，；、]")


def current_year() -> int:
    return date.today().year


def normalize_year(value: Any, *, default: int | None = None) -> int:
    """
    Parse a publication year from free text.

    The first four-digit number within [1900, current year + 1] wins.
    Anything else falls back to ``default`` (the current year if omitted).

    >>> normalize_year("Journal of AI, 2019 - example.org")
    2019
    """
    fallback = default if default is not None else current_year()
    if isinstance(value, int) and not isinstance(value, bool):
        candidates = [str(value)]
    elif isinstance(value, str):
        candidates = _YEAR_PATTERN.findall(value)
    else:
        return fallback

    upper = current_year() + 1
    for candidate in candidates:
        year = int(candidate)
        if MIN_YEAR <= year <= upper:
            return year
    return fallback


def split_authors(text: str | None, default: str = UNKNOWN_AUTHOR) -> list[str]:
    """Split an author line into names; ``[default]`` when nothing usable remains."""
    if not text:
        return [default]
    names = [name.strip(" ….") for name in _AUTHOR_SEPARATORS.split(text)]
    names = [name for name in names if name]
    return names or [default]


def truncate_abstract(text: str, limit: int = MAX_ABSTRACT_LENGTH) -> str:
    """Bound an abstract to ``limit`` characters, ending with an ellipsis when cut."""
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


@dataclass
class Citation:
    """
    A single bibliographic record produced by one provider for one search.

    ``relevance_score`` stays ``None`` until RelevanceScorer sets it.
    """
    title: str
    authors: list[str] = field(default_factory=lambda: [UNKNOWN_AUTHOR])
    year: int = field(default_factory=current_year)
    source: str = ""
    abstract: str = ""
    citation_count: int = 0
    data_source: str = ""
    relevance_score: float | None = None
    url: str = ""

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("Citation title must not be empty")
        self.title = self.title.strip()
        if not self.authors:
            self.authors = [UNKNOWN_AUTHOR]
        self.citation_count = max(0, int(self.citation_count or 0))

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "authors": list(self.authors),
            "year": self.year,
            "source": self.source,
            "abstractText": self.abstract,
            "citationCount": self.citation_count,
            "dataSource": self.data_source,
            "relevanceScore": self.relevance_score,
            "url": self.url,
        }


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one search request. Immutable once built."""
    success: bool
    message: str
    keywords: tuple[str, ...] = ()
    citations: tuple[Citation, ...] = ()
    duration_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "keywords": list(self.keywords),
            "citations": [citation.to_dict() for citation in self.citations],
            "duration": self.duration_ms,
        }
