"""
RelevanceScorer - Composite 0-100 Relevance Score

Score components for a citation against the extracted keywords:

    title match     40 / len(keywords) per keyword found in the title
    abstract match  30 / len(keywords) per keyword found in the abstract
    impact          min(20, citation_count / 10)
    recency         10 if published within 5 years, 5 within 10, else 0

Matching is a case-insensitive substring test. The sum is clamped to
[0, 100]. With no keywords only impact and recency contribute.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from citation_search.models.citation import Citation, current_year

TITLE_WEIGHT = 40.0
ABSTRACT_WEIGHT = 30.0
MAX_IMPACT_SCORE = 20.0
CITATIONS_PER_POINT = 10.0
RECENT_YEARS, RECENT_SCORE = 5, 10.0
DECADE_YEARS, DECADE_SCORE = 10, 5.0
MAX_SCORE = 100.0
MAX_RESULTS = 10


class RelevanceScorer:
    """Scores citations and keeps the best ones."""

    def __init__(
        self,
        limit: int = MAX_RESULTS,
        year_provider: Callable[[], int] = current_year,
    ) -> None:
        self.limit = limit
        self._year_provider = year_provider

    def score(self, citation: Citation, keywords: Sequence[str]) -> float:
        score = 0.0

        if keywords:
            title = (citation.title or "").lower()
            abstract = (citation.abstract or "").lower()
            title_share = TITLE_WEIGHT / len(keywords)
            abstract_share = ABSTRACT_WEIGHT / len(keywords)
            for keyword in keywords:
                needle = keyword.lower()
                if needle in title:
                    score += title_share
                if needle in abstract:
                    score += abstract_share

        if citation.citation_count > 0:
            score += min(MAX_IMPACT_SCORE, citation.citation_count / CITATIONS_PER_POINT)

        this_year = self._year_provider()
        if citation.year >= this_year - RECENT_YEARS:
            score += RECENT_SCORE
        elif citation.year >= this_year - DECADE_YEARS:
            score += DECADE_SCORE

        return max(0.0, min(MAX_SCORE, score))

    def rank(
        self,
        citations: Sequence[Citation],
        keywords: Sequence[str],
        limit: int | None = None,
    ) -> list[Citation]:
        """Set ``relevance_score`` on every citation, then return the top ones, best first."""
        for citation in citations:
            citation.relevance_score = self.score(citation, keywords)

        ranked = sorted(citations, key=lambda c: c.relevance_score or 0.0, reverse=True)
        return ranked[: self.limit if limit is None else limit]
