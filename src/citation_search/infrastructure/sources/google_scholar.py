"""
Google Scholar (mirror) Provider

Scrapes the result page of a Google Scholar mirror. Mirrors come and go and
are frequently blocked, so the provider exposes the primary mirror followed
by the fallback mirrors as its endpoints, and reports an empty page as an
error: ResilientProviderCall then moves on to the next mirror.

Result markup (one ``div.gs_ri`` per hit):
    h3.gs_rt > a         title + link (may be prefixed with [PDF], [HTML]...)
    div.gs_a             "A Author, B Author - Venue, 2021 - host.org"
    div.gs_rs            snippet
    div.gs_fl > a        "Cited by 42"
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup, Tag

from citation_search.application.search.keywords import translate_keywords
from citation_search.infrastructure.sources.base import SourceKind
from citation_search.infrastructure.sources.base_client import (
    DEFAULT_USER_AGENT,
    MAX_RESULTS_PER_CALL,
    BaseHTMLClient,
)
from citation_search.infrastructure.sources.selectors import Selector, first_text, select_rows
from citation_search.models.citation import (
    Citation,
    current_year,
    normalize_year,
    split_authors,
    truncate_abstract,
)

logger = logging.getLogger(__name__)

DEFAULT_MIRROR_URL = "https://www.defineabc.com"
DEFAULT_FALLBACK_MIRRORS = (
    "https://www.defineabc.com",
    "https://scholar.lanfanshu.cn",
    "https://xs.dailyheadlines.cc",
    "https://sc.panda321.com",
)
CANONICAL_URL = "https://scholar.google.com/"
DEFAULT_VENUE = "Google Scholar"
NO_ABSTRACT = "No abstract available."

ROW_SELECTORS = (".gs_ri", ".gs_r")
TITLE_SELECTORS = (Selector(".gs_rt a"), Selector(".gs_rt"), Selector("h3"))
URL_SELECTORS = (Selector(".gs_rt a", "href"), Selector("h3 a", "href"))
BYLINE_SELECTORS = (Selector(".gs_a"),)
ABSTRACT_SELECTORS = (Selector(".gs_rs"), Selector(".gs_snippet"))

_TAG_PREFIX = re.compile(r"^(\[[^\]]*\]\s*)+")
_CITED_BY = re.compile(r"(cited by|引用|被引)", re.IGNORECASE)
_NUMBER = re.compile(r"\d+")


def parse_byline(byline: str | None) -> tuple[list[str], str, int]:
    """
    Split a ``gs_a`` byline into authors, venue and year.

    >>> parse_byline("J Smith, A Doe - Nature Medicine, 2021 - nature.com")
    (['J Smith', 'A Doe'], 'Nature Medicine', 2021)
    """
    if not byline:
        return split_authors(None), DEFAULT_VENUE, current_year()

    parts = [part.strip() for part in byline.replace("\xa0", " ").split(" - ")]
    authors = split_authors(parts[0])
    if len(parts) < 2:
        return authors, DEFAULT_VENUE, current_year()

    venue_and_year = parts[1]
    year = normalize_year(venue_and_year)
    venue = re.sub(r"\b\d{4}\b", "", venue_and_year)
    venue = re.sub(r"[,\s]+$", "", venue).strip()
    return authors, venue or DEFAULT_VENUE, year


def parse_cited_by(row: Tag) -> int:
    for link in row.select(".gs_fl a"):
        text = link.get_text(" ", strip=True)
        if _CITED_BY.search(text):
            match = _NUMBER.search(text)
            return int(match.group()) if match else 0
    return 0


class GoogleScholarProvider(BaseHTMLClient):
    """
    Live provider for Google Scholar mirrors.

    Usage:
        provider = GoogleScholarProvider(mirror_url="https://scholar.example")
        citations = await provider.fetch(["machine", "learning"])
    """

    _empty_is_error = True

    def __init__(
        self,
        mirror_url: str = DEFAULT_MIRROR_URL,
        fallback_mirrors: Sequence[str] = DEFAULT_FALLBACK_MIRRORS,
        *,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        api_key: str | None = None,
        translate: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            SourceKind.GOOGLE_SCHOLAR,
            base_url=mirror_url,
            fallback_urls=fallback_mirrors,
            timeout=timeout,
            user_agent=user_agent,
            api_key=api_key,
            transport=transport,
        )
        self._translate = translate

    def _build_request(self, keywords: Sequence[str], endpoint: str) -> tuple[str, dict[str, Any]]:
        terms = translate_keywords(list(keywords)) if self._translate else list(keywords)
        return f"{endpoint}/scholar", {"hl": "en", "q": " ".join(terms)}

    def _parse_page(self, soup: BeautifulSoup, endpoint: str) -> list[Citation]:
        citations: list[Citation] = []
        for index, row in enumerate(select_rows(soup, ROW_SELECTORS)):
            if len(citations) >= MAX_RESULTS_PER_CALL:
                break
            citation = self._parse_row(row, endpoint)
            if citation is None:
                logger.debug(f"{self.name}: row {index + 1} has no title, skipped")
                continue
            citations.append(citation)
        return citations

    def _parse_row(self, row: Tag, endpoint: str) -> Citation | None:
        title = first_text(row, TITLE_SELECTORS)
        if title:
            title = _TAG_PREFIX.sub("", title).strip()
        if not title:
            return None

        href = first_text(row, URL_SELECTORS)
        authors, venue, year = parse_byline(first_text(row, BYLINE_SELECTORS))
        abstract = first_text(row, ABSTRACT_SELECTORS)

        return Citation(
            title=title,
            authors=authors,
            year=year,
            source=venue,
            abstract=truncate_abstract(abstract) if abstract else NO_ABSTRACT,
            citation_count=parse_cited_by(row),
            data_source=self.source.value,
            url=urljoin(f"{endpoint}/", href) if href else CANONICAL_URL,
        )
