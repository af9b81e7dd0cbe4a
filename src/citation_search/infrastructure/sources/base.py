"""
Provider Capability - one interface for every source of citations.

A provider turns a keyword list into citations. Variants are tagged with the
source they serve (``SourceKind``) and whether they hit the network
(``ProviderKind.LIVE``) or synthesize data (``ProviderKind.MOCK``). Which
variant serves a source is decided once at startup by the container.

Fallback chain:
    ``endpoints`` lists the access points of a provider, primary first,
    then mirrors. ResilientProviderCall tries them in order, passing each
    one to ``fetch(..., endpoint=...)``. Providers without alternative
    endpoints return an empty tuple.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum

from citation_search.models.citation import Citation


class SourceKind(Enum):
    """External literature sources."""
    GOOGLE_SCHOLAR = "google-scholar"
    CNKI = "cnki"


class ProviderKind(Enum):
    """How a provider obtains its citations."""
    LIVE = "live"
    MOCK = "mock"


class CitationProvider(ABC):
    """Base class of all citation providers."""

    kind: ProviderKind = ProviderKind.LIVE

    def __init__(self, source: SourceKind) -> None:
        self.source = source

    @property
    def name(self) -> str:
        if self.kind is ProviderKind.MOCK:
            return f"{self.source.value}:mock"
        return self.source.value

    @property
    def endpoints(self) -> tuple[str, ...]:
        return ()

    @abstractmethod
    async def fetch(
        self,
        keywords: Sequence[str],
        *,
        endpoint: str | None = None,
    ) -> list[Citation]:
        """
        Fetch citations for the keywords.

        Raises:
            ProviderError: network failure, unparsable page, or an empty
                result the provider does not expect
        """

    async def aclose(self) -> None:
        """Release network resources."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(source={self.source.value!r})"
