"""
Ordered extraction strategies for HTML result pages.

Search sites change their markup often, so every field is described by a
list of alternative selectors. The first selector that yields non-empty
text wins.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag


@dataclass(frozen=True, slots=True)
class Selector:
    """A CSS selector, reading either the element text or one attribute."""
    css: str
    attribute: str | None = None

    def read(self, node: Tag) -> str | None:
        element = node.select_one(self.css)
        if element is None:
            return None
        if self.attribute is None:
            value = element.get_text(" ", strip=True)
        else:
            raw = element.get(self.attribute)
            value = " ".join(raw) if isinstance(raw, list) else raw
        if value and value.strip():
            return value.strip()
        return None


def first_text(node: Tag, selectors: Sequence[Selector]) -> str | None:
    """Return the value of the first selector that matches with non-empty text."""
    for selector in selectors:
        value = selector.read(node)
        if value:
            return value
    return None


def select_rows(soup: BeautifulSoup | Tag, row_selectors: Sequence[str]) -> list[Tag]:
    """Return the rows matched by the first row selector that matches anything."""
    for css in row_selectors:
        rows = soup.select(css)
        if rows:
            return rows
    return []
