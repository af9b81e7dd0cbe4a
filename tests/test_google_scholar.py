"""Tests for the Google Scholar mirror provider (httpx.MockTransport)."""

from __future__ import annotations

import httpx
import pytest

from citation_search.core.exceptions import (
    ProviderError,
    ProviderErrorKind,
    ProviderNetworkError,
    ProviderTimeoutError,
)
from citation_search.infrastructure.sources.base import ProviderKind, SourceKind
from citation_search.infrastructure.sources.google_scholar import (
    CANONICAL_URL,
    DEFAULT_FALLBACK_MIRRORS,
    DEFAULT_MIRROR_URL,
    DEFAULT_VENUE,
    NO_ABSTRACT,
    GoogleScholarProvider,
    parse_byline,
)
from citation_search.models.citation import UNKNOWN_AUTHOR, current_year

MIRROR = "https://mirror.test"

RESULT_PAGE = """
<html><body>
<div class="gs_r">
  <div class="gs_ri">
    <h3 class="gs_rt"><span class="gs_ctg2">[PDF]</span> <a href="/paper/1"><b>Deep</b> learning for image recognition</a></h3>
    <div class="gs_a">J Smith, A Doe - Nature Medicine, 2021 - nature.com</div>
    <div class="gs_rs">We present a deep learning model for image recognition.</div>
    <div class="gs_fl"><a href="/scholar?cites=1">Cited by 42</a> <a href="/related">Related articles</a></div>
  </div>
</div>
<div class="gs_r">
  <div class="gs_ri">
    <h3 class="gs_rt"><span>[CITATION]</span> [BOOK] Pattern recognition and machine learning</h3>
    <div class="gs_a">CM Bishop - 2006 - Springer</div>
  </div>
</div>
<div class="gs_r">
  <div class="gs_ri">
    <div class="gs_a">No title here - Somewhere, 2020</div>
  </div>
</div>
</body></html>
"""

EMPTY_PAGE = "<html><body><div id='gs_captcha_ccl'>Please show you're not a robot</div></body></html>"


def _row(index: int) -> str:
    return (
        f'<div class="gs_ri"><h3 class="gs_rt"><a href="https://example.org/{index}">Paper {index}</a></h3>'
        f'<div class="gs_a">Author {index} - Venue, 2020 - example.org</div></div>'
    )


def _provider(handler, **kwargs) -> GoogleScholarProvider:
    kwargs.setdefault("fallback_mirrors", ())
    return GoogleScholarProvider(MIRROR, transport=httpx.MockTransport(handler), **kwargs)


# ============================================================
# Byline Parsing
# ============================================================


class TestParseByline:
    def test_full_byline(self):
        assert parse_byline("J Smith, A Doe - Nature Medicine, 2021 - nature.com") == (
            ["J Smith", "A Doe"],
            "Nature Medicine",
            2021,
        )

    def test_year_only_venue(self):
        authors, venue, year = parse_byline("CM Bishop - 2006 - Springer")
        assert authors == ["CM Bishop"]
        assert venue == DEFAULT_VENUE
        assert year == 2006

    def test_authors_only(self):
        assert parse_byline("J Smith") == (["J Smith"], DEFAULT_VENUE, current_year())

    def test_missing(self):
        assert parse_byline(None) == ([UNKNOWN_AUTHOR], DEFAULT_VENUE, current_year())

    def test_non_breaking_spaces(self):
        authors, venue, year = parse_byline("A Lee\xa0- Science, 2019\xa0- science.org")
        assert authors == ["A Lee"]
        assert venue == "Science"
        assert year == 2019


# ============================================================
# Provider
# ============================================================


class TestGoogleScholarProvider:
    def test_identity(self):
        provider = GoogleScholarProvider()
        assert provider.source is SourceKind.GOOGLE_SCHOLAR
        assert provider.kind is ProviderKind.LIVE
        assert provider.name == "google-scholar"

    def test_endpoints_primary_first_without_duplicates(self):
        provider = GoogleScholarProvider(DEFAULT_MIRROR_URL, DEFAULT_FALLBACK_MIRRORS)
        assert provider.endpoints[0] == DEFAULT_MIRROR_URL
        assert len(provider.endpoints) == len(set(provider.endpoints)) == len(DEFAULT_FALLBACK_MIRRORS)

    def test_endpoints_strip_trailing_slash(self):
        provider = GoogleScholarProvider("https://a.test/", ["https://b.test/", "https://a.test"])
        assert provider.endpoints == ("https://a.test", "https://b.test")

    async def test_parses_result_page(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, text=RESULT_PAGE)

        provider = _provider(handler)
        citations = await provider.fetch(["deep", "learning"])

        assert len(requests) == 1
        assert requests[0].url.path == "/scholar"
        assert requests[0].url.params["q"] == "deep learning"
        assert requests[0].url.params["hl"] == "en"

        assert len(citations) == 2
        first, second = citations
        assert first.title == "Deep learning for image recognition"
        assert first.authors == ["J Smith", "A Doe"]
        assert first.source == "Nature Medicine"
        assert first.year == 2021
        assert first.abstract == "We present a deep learning model for image recognition."
        assert first.citation_count == 42
        assert first.data_source == "google-scholar"
        assert first.url == f"{MIRROR}/paper/1"

        assert second.title == "Pattern recognition and machine learning"
        assert second.authors == ["CM Bishop"]
        assert second.year == 2006
        assert second.abstract == NO_ABSTRACT
        assert second.citation_count == 0
        assert second.url == CANONICAL_URL

    async def test_long_abstract_truncated(self):
        page = (
            '<div class="gs_ri"><h3 class="gs_rt"><a href="/p">Title</a></h3>'
            f'<div class="gs_rs">{"word " * 200}</div></div>'
        )
        provider = _provider(lambda request: httpx.Response(200, text=page))
        [citation] = await provider.fetch(["title"])
        assert len(citation.abstract) == 300
        assert citation.abstract.endswith("...")

    async def test_at_most_ten_results(self):
        page = "<html><body>" + "".join(_row(i) for i in range(15)) + "</body></html>"
        provider = _provider(lambda request: httpx.Response(200, text=page))
        citations = await provider.fetch(["paper"])
        assert [c.title for c in citations] == [f"Paper {i}" for i in range(10)]

    async def test_empty_page_is_an_error(self):
        provider = _provider(lambda request: httpx.Response(200, text=EMPTY_PAGE))
        with pytest.raises(ProviderError) as exc_info:
            await provider.fetch(["deep"])
        assert exc_info.value.kind is ProviderErrorKind.EMPTY

    async def test_http_error_status(self):
        provider = _provider(lambda request: httpx.Response(503, text="unavailable"))
        with pytest.raises(ProviderNetworkError) as exc_info:
            await provider.fetch(["deep"])
        assert exc_info.value.status_code == 503

    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        provider = _provider(handler, timeout=30.0)
        with pytest.raises(ProviderTimeoutError) as exc_info:
            await provider.fetch(["deep"])
        assert exc_info.value.timeout == 30.0

    async def test_connection_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = _provider(handler)
        with pytest.raises(ProviderNetworkError):
            await provider.fetch(["deep"])

    async def test_empty_keywords_skip_request(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        provider = _provider(handler)
        assert await provider.fetch([]) == []

    async def test_explicit_endpoint(self):
        hosts: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            hosts.append(request.url.host)
            return httpx.Response(200, text=RESULT_PAGE)

        provider = _provider(handler, fallback_mirrors=["https://backup.test"])
        citations = await provider.fetch(["deep"], endpoint="https://backup.test")

        assert hosts == ["backup.test"]
        assert citations[0].url == "https://backup.test/paper/1"

    async def test_translation_is_opt_in(self):
        queries: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            queries.append(request.url.params["q"])
            return httpx.Response(200, text=RESULT_PAGE)

        await _provider(handler).fetch(["机器学习"])
        await _provider(handler, translate=True).fetch(["机器学习", "医疗"])

        assert queries == ["机器学习", "machine learning 医疗"]

    async def test_headers(self):
        seen: list[httpx.Headers] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers)
            return httpx.Response(200, text=RESULT_PAGE)

        provider = _provider(handler, user_agent="TestAgent/1.0", api_key="secret")
        await provider.fetch(["deep"])

        assert seen[0]["User-Agent"] == "TestAgent/1.0"
        assert seen[0]["Authorization"] == "Bearer secret"

    async def test_context_manager_closes_client(self):
        async with _provider(lambda request: httpx.Response(200, text=RESULT_PAGE)) as provider:
            await provider.fetch(["deep"])
        assert provider._client.is_closed
