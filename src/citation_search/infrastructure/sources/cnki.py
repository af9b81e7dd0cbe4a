"""
CNKI (China National Knowledge Infrastructure) Provider

Scrapes the CNKI result grid. The grid markup has changed several times;
each field is read through an ordered list of selectors and rows without a
title are skipped. An empty grid is a normal "no hits" answer.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup, Tag

from citation_search.infrastructure.sources.base import SourceKind
from citation_search.infrastructure.sources.base_client import (
    DEFAULT_USER_AGENT,
    MAX_RESULTS_PER_CALL,
    BaseHTMLClient,
)
from citation_search.infrastructure.sources.selectors import Selector, first_text, select_rows
from citation_search.models.citation import (
    Citation,
    normalize_year,
    split_authors,
    truncate_abstract,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://kns.cnki.net"
SEARCH_PATH = "/kns8/defaultresult/index"
CANONICAL_URL = "https://kns.cnki.net/"
DEFAULT_VENUE = "中国知网"
DEFAULT_AUTHOR = "未知作者"
NO_ABSTRACT = "本文对相关主题进行了研究和分析。"

ROW_SELECTORS = (
    "table.result tbody tr",
    ".result-table-list tbody tr",
    ".GridTableContent tbody tr",
    ".search-list .item",
    "tr.odd, tr.even",
)
# Class selectors first, then the column position in the classic grid
TITLE_SELECTORS = (
    Selector("a.fz14"),
    Selector(".name a"),
    Selector("td:nth-child(2) a"),
    Selector("a[href*=detail]"),
)
AUTHOR_SELECTORS = (
    Selector(".author"),
    Selector("td:nth-child(3)"),
    Selector(".writer"),
    Selector("a[href*=author]"),
)
VENUE_SELECTORS = (
    Selector(".source"),
    Selector("td:nth-child(4)"),
    Selector(".from"),
    Selector("a[href*=journal]"),
)
YEAR_SELECTORS = (Selector(".year"), Selector("td:nth-child(5)"), Selector(".date"))
ABSTRACT_SELECTORS = (Selector(".abstract"), Selector(".summary"))
QUOTE_SELECTORS = (Selector(".quote"), Selector(".cite-count"), Selector("td:nth-child(6)"))
LINK_SELECTORS = (
    Selector("a.fz14", "href"),
    Selector(".name a", "href"),
    Selector("td:nth-child(2) a", "href"),
    Selector("a[href]", "href"),
)

_DIGITS = re.compile(r"\d+")


def _find_year(row: Tag) -> int:
    """The first selector holding a plausible year wins, then any year in the row text."""
    for selector in YEAR_SELECTORS:
        year = normalize_year(selector.read(row), default=0)
        if year:
            return year
    return normalize_year(row.get_text(" ", strip=True))


class CNKIProvider(BaseHTMLClient):
    """
    Live provider for CNKI.

    Usage:
        provider = CNKIProvider(timeout=15.0)
        citations = await provider.fetch(["机器学习"])
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = 15.0,
        user_agent: str = DEFAULT_USER_AGENT,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            SourceKind.CNKI,
            base_url=base_url,
            timeout=timeout,
            user_agent=user_agent,
            api_key=api_key,
            transport=transport,
        )

    def _build_request(self, keywords: Sequence[str], endpoint: str) -> tuple[str, dict[str, Any]]:
        return f"{endpoint}{SEARCH_PATH}", {"kw": " ".join(keywords), "korder": "SU"}

    def _parse_page(self, soup: BeautifulSoup, endpoint: str) -> list[Citation]:
        rows = select_rows(soup, ROW_SELECTORS)
        if not rows:
            logger.warning(f"{self.name}: no result rows, page layout may have changed or login is required")
            return []

        citations: list[Citation] = []
        for row in rows:
            citation = self._parse_row(row, endpoint)
            if citation is not None:
                citations.append(citation)
            if len(citations) >= MAX_RESULTS_PER_CALL:
                break
        return citations

    def _parse_row(self, row: Tag, endpoint: str) -> Citation | None:
        title = first_text(row, TITLE_SELECTORS)
        if not title:
            return None

        abstract = first_text(row, ABSTRACT_SELECTORS)
        quote = first_text(row, QUOTE_SELECTORS)
        count_match = _DIGITS.search(quote) if quote else None
        href = first_text(row, LINK_SELECTORS)

        return Citation(
            title=title,
            authors=split_authors(first_text(row, AUTHOR_SELECTORS), default=DEFAULT_AUTHOR),
            year=_find_year(row),
            source=first_text(row, VENUE_SELECTORS) or DEFAULT_VENUE,
            abstract=truncate_abstract(abstract) if abstract else NO_ABSTRACT,
            citation_count=int(count_match.group()) if count_match else 0,
            data_source=self.source.value,
            url=self._absolute_url(href, endpoint),
        )

    @staticmethod
    def _absolute_url(href: str | None, endpoint: str) -> str:
        if not href or href.startswith(("javascript:", "#")):
            return CANONICAL_URL
        return urljoin(f"{endpoint}/", href)
