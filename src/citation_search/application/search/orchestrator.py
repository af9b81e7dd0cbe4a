"""
SearchOrchestrator - one search request from query to ranked citations.

Flow:
    query
      → KeywordExtractor.extract()
      → one task per ResilientProviderCall (TaskGroup, under the global deadline)
      → merge batches in provider order
      → RelevanceScorer.rank()
      → SearchResult

Per-provider timeouts degrade inside ResilientProviderCall; only the global
deadline turns into ``success=False``. When it fires, still-running provider
tasks are cancelled and their partial results are discarded.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

from citation_search.application.search.keywords import KeywordExtractor
from citation_search.application.search.relevance import RelevanceScorer
from citation_search.application.search.resilient import ResilientProviderCall
from citation_search.core.async_utils import gather_in_order
from citation_search.core.exceptions import OverallDeadlineExceeded
from citation_search.models.citation import Citation, SearchResult

logger = logging.getLogger(__name__)

DEFAULT_DEADLINE = 45.0

FOUND_MESSAGE = "Found {count} relevant citations"
EMPTY_MESSAGE = "Search completed, but no relevant literature found. Try different keywords."
TIMEOUT_MESSAGE = "Search timed out, please retry later or use more specific keywords"
FAILURE_MESSAGE = "Search failed due to an internal error, please retry later"


class SearchOrchestrator:
    """
    Fans a query out to every configured provider and ranks the merged result.

    Usage:
        orchestrator = SearchOrchestrator(
            extractor=KeywordExtractor(),
            calls=[scholar_call, cnki_call],
            scorer=RelevanceScorer(),
        )
        result = await orchestrator.search("deep learning image recognition")
    """

    def __init__(
        self,
        extractor: KeywordExtractor,
        calls: Sequence[ResilientProviderCall],
        scorer: RelevanceScorer,
        deadline: float = DEFAULT_DEADLINE,
    ) -> None:
        if deadline <= 0:
            raise ValueError(f"deadline must be positive, got {deadline}")
        self.extractor = extractor
        self.calls = list(calls)
        self.scorer = scorer
        self.deadline = deadline

    async def search(self, query: str) -> SearchResult:
        started = time.monotonic()
        keywords = self.extractor.extract(query)
        logger.info(f"Searching {len(self.calls)} providers for {query!r}, keywords={keywords}")

        try:
            batches = await self._fan_out(keywords)
            ranked = self.scorer.rank(self._merge(batches), keywords)
        except OverallDeadlineExceeded as e:
            logger.error(f"{e} (query={query!r})")
            return SearchResult(
                success=False,
                message=TIMEOUT_MESSAGE,
                keywords=tuple(keywords),
                duration_ms=_elapsed_ms(started),
            )
        except Exception:
            logger.exception(f"Search failed unexpectedly (query={query!r})")
            return SearchResult(
                success=False,
                message=FAILURE_MESSAGE,
                keywords=tuple(keywords),
                duration_ms=_elapsed_ms(started),
            )

        duration_ms = _elapsed_ms(started)
        logger.info(f"Search finished in {duration_ms}ms with {len(ranked)} citations")
        return SearchResult(
            success=True,
            message=FOUND_MESSAGE.format(count=len(ranked)) if ranked else EMPTY_MESSAGE,
            keywords=tuple(keywords),
            citations=tuple(ranked),
            duration_ms=duration_ms,
        )

    async def _fan_out(self, keywords: list[str]) -> list[list[Citation]]:
        """Run every provider call concurrently, bounded by the global deadline."""
        try:
            async with asyncio.timeout(self.deadline):
                return await gather_in_order(*(call.call(keywords) for call in self.calls))
        except TimeoutError as e:
            raise OverallDeadlineExceeded(self.deadline) from e

    @staticmethod
    def _merge(batches: Sequence[Sequence[Citation]]) -> list[Citation]:
        merged: list[Citation] = []
        for batch in batches:
            merged.extend(batch)
        return merged

    async def aclose(self) -> None:
        """Close every provider behind the orchestrator."""
        for call in self.calls:
            await call.aclose()


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
