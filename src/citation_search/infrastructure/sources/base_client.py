"""
Base HTML Client - common fetch-and-parse pattern for live providers.

Provides a reusable base class with:
- One httpx.AsyncClient per provider (User-Agent, redirects, timeout)
- Mapping of httpx failures onto the provider error taxonomy
- Parsing off the event loop, capped result lists
- Consistent logging

Rate limiting, mirror fallback and mock degradation are not handled here:
they belong to ResilientProviderCall, which wraps every provider uniformly.
"""

from __future__ import annotations

import asyncio
import logging
from abc import abstractmethod
from collections.abc import Sequence
from typing import Any

import httpx
from bs4 import BeautifulSoup
from typing_extensions import Self

from citation_search.core.exceptions import (
    ProviderError,
    ProviderErrorKind,
    ProviderNetworkError,
    ProviderParseError,
    ProviderTimeoutError,
)
from citation_search.infrastructure.sources.base import CitationProvider, ProviderKind, SourceKind
from citation_search.models.citation import Citation

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (Educational Purpose; Citation Research System)"
MAX_RESULTS_PER_CALL = 10


class BaseHTMLClient(CitationProvider):
    """
    Base class for live providers that scrape an HTML search page.

    Subclasses implement:
    - `_build_request()`: search URL and query parameters for an endpoint
    - `_parse_page()`: turn a parsed page into citations

    and may set `_empty_is_error` when an empty page means the endpoint is
    unusable (blocked mirror, captcha page) rather than "no hits".

    Example:
        class MySource(BaseHTMLClient):
            def _build_request(self, keywords, endpoint):
                return f"{endpoint}/search", {"q": " ".join(keywords)}

            def _parse_page(self, soup, endpoint):
                return [...]
    """

    kind = ProviderKind.LIVE
    _empty_is_error: bool = False

    def __init__(
        self,
        source: SourceKind,
        *,
        base_url: str,
        fallback_urls: Sequence[str] = (),
        timeout: float = 15.0,
        user_agent: str = DEFAULT_USER_AGENT,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize base client.

        Args:
            source: Source served by this provider
            base_url: Primary endpoint
            fallback_urls: Alternative endpoints tried after the primary one
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent with every request
            api_key: Optional credential, sent as a header when present
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        super().__init__(source)
        self._base_url = base_url.rstrip("/")
        self._fallback_urls = tuple(url.rstrip("/") for url in fallback_urls)
        self._timeout = timeout
        headers = {"User-Agent": user_agent, "Accept": "text/html,application/xhtml+xml"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def endpoints(self) -> tuple[str, ...]:
        ordered = [self._base_url]
        for url in self._fallback_urls:
            if url and url not in ordered:
                ordered.append(url)
        return tuple(ordered)

    async def fetch(
        self,
        keywords: Sequence[str],
        *,
        endpoint: str | None = None,
    ) -> list[Citation]:
        if not keywords:
            logger.info(f"{self.name}: no keywords, skipping request")
            return []

        endpoint = (endpoint or self._base_url).rstrip("/")
        url, params = self._build_request(keywords, endpoint)
        logger.debug(f"{self.name}: GET {url} params={params}")

        html = await self._fetch_html(url, params)
        try:
            citations = await asyncio.to_thread(self._parse_html, html, endpoint)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderParseError(str(e), provider=self.name) from e

        if not citations and self._empty_is_error:
            raise ProviderError(
                f"no results parsed from {endpoint}",
                provider=self.name,
                kind=ProviderErrorKind.EMPTY,
            )

        logger.info(f"{self.name}: {len(citations)} citations from {endpoint}")
        return citations[:MAX_RESULTS_PER_CALL]

    async def _fetch_html(self, url: str, params: dict[str, Any]) -> str:
        """GET a page, mapping transport failures to provider errors."""
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(self._timeout, provider=self.name) from e
        except httpx.HTTPStatusError as e:
            raise ProviderNetworkError(
                f"HTTP {e.response.status_code} from {url}",
                provider=self.name,
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise ProviderNetworkError(f"request to {url} failed: {e}", provider=self.name) from e
        return response.text

    def _parse_html(self, html: str, endpoint: str) -> list[Citation]:
        soup = BeautifulSoup(html, "html.parser")
        return self._parse_page(soup, endpoint)

    @abstractmethod
    def _build_request(self, keywords: Sequence[str], endpoint: str) -> tuple[str, dict[str, Any]]:
        """Return the search URL and query parameters for an endpoint."""

    @abstractmethod
    def _parse_page(self, soup: BeautifulSoup, endpoint: str) -> list[Citation]:
        """Extract citations from a search result page."""

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
