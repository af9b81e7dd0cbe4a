"""
ResilientProviderCall - rate limit, timeout and fallback around one provider.

Every call walks the same chain of strategies:

    1. Acquire the provider's rate-limiter permit
    2. fetch() on the primary endpoint, bounded by the provider timeout
    3. fetch() on each fallback endpoint, same budget, in order
    4. The mock fallback provider, when one is configured
    5. Nothing left: an empty list

The chain is evaluated by ``first_success``; failures come back as values in
the Outcome and are logged, never raised to the orchestrator.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from citation_search.core.async_utils import Outcome, RateLimiter, Strategy, first_success
from citation_search.infrastructure.sources.base import CitationProvider
from citation_search.models.citation import Citation

logger = logging.getLogger(__name__)


class ResilientProviderCall:
    """
    One provider wrapped with its limiter, timeout and degradation policy.

    Usage:
        call = ResilientProviderCall(
            provider=GoogleScholarProvider(),
            rate_limiter=get_rate_limiter("google-scholar"),
            timeout=30.0,
            fallback=MockProvider(SourceKind.GOOGLE_SCHOLAR),
        )
        citations = await call.call(["machine", "learning"])
    """

    def __init__(
        self,
        provider: CitationProvider,
        rate_limiter: RateLimiter,
        timeout: float,
        fallback: CitationProvider | None = None,
    ) -> None:
        self.provider = provider
        self.rate_limiter = rate_limiter
        self.timeout = timeout
        self.fallback = fallback

    @property
    def name(self) -> str:
        return self.provider.name

    def _strategies(self, keywords: Sequence[str]) -> list[Strategy[list[Citation]]]:
        provider = self.provider
        strategies: list[Strategy[list[Citation]]] = []

        endpoints: Sequence[str | None] = provider.endpoints or (None,)
        for endpoint in endpoints:
            strategies.append(
                Strategy(
                    name=f"{provider.name}@{endpoint}" if endpoint else provider.name,
                    run=lambda endpoint=endpoint: provider.fetch(keywords, endpoint=endpoint),
                    timeout=self.timeout,
                    provider=provider.name,
                )
            )

        if self.fallback is not None:
            fallback = self.fallback
            strategies.append(
                Strategy(
                    name=fallback.name,
                    run=lambda: fallback.fetch(keywords),
                    timeout=self.timeout,
                    provider=fallback.name,
                )
            )
        return strategies

    async def call_with_outcome(self, keywords: Sequence[str]) -> Outcome[list[Citation]]:
        """Run the fallback chain and return the full Outcome."""
        await self.rate_limiter.acquire()

        outcome = await first_success(self._strategies(keywords))
        if not outcome.ok:
            logger.warning(
                f"{self.name}: all {len(outcome.errors)} attempts failed, returning no citations"
            )
        elif self.fallback is not None and outcome.strategy == self.fallback.name and outcome.errors:
            logger.warning(f"{self.name}: degraded to {outcome.strategy} after {len(outcome.errors)} failures")
        return outcome

    async def call(self, keywords: Sequence[str]) -> list[Citation]:
        """Return citations for the keywords; an empty list when everything failed."""
        outcome = await self.call_with_outcome(keywords)
        return list(outcome.value) if outcome.ok and outcome.value else []

    async def aclose(self) -> None:
        await self.provider.aclose()
        if self.fallback is not None:
            await self.fallback.aclose()

    def __repr__(self) -> str:
        return (
            f"ResilientProviderCall(provider={self.provider!r}, timeout={self.timeout}, "
            f"fallback={self.fallback!r})"
        )
