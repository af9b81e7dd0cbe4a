"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence

import pytest

from citation_search.core.async_utils import reset_rate_limiters
from citation_search.core.exceptions import ProviderError
from citation_search.infrastructure.sources.base import CitationProvider, SourceKind
from citation_search.models.citation import Citation

# ============================================================
# Environment Fixtures
# ============================================================


@pytest.fixture(autouse=True)
def _fresh_rate_limiters():
    """Every test starts with an empty limiter registry."""
    reset_rate_limiters()
    yield
    reset_rate_limiters()


# ============================================================
# Citations
# ============================================================


@pytest.fixture
def make_citation() -> Callable[..., Citation]:
    """Factory for citations with sensible defaults."""

    def _make(title: str = "Deep Learning for Image Recognition", **overrides) -> Citation:
        fields = {
            "authors": ["J Smith", "A Doe"],
            "year": 2020,
            "source": "Nature",
            "abstract": "We study deep learning models for image recognition tasks.",
            "citation_count": 42,
            "data_source": "google-scholar",
            "url": "https://example.org/paper",
        }
        fields.update(overrides)
        return Citation(title=title, **fields)

    return _make


@pytest.fixture
def sample_citation(make_citation) -> Citation:
    return make_citation()


# ============================================================
# Stub Providers
# ============================================================


class StubProvider(CitationProvider):
    """
    Scriptable provider.

    ``behaviours`` maps an endpoint (None for providers without endpoints) to
    a list of citations, an exception to raise, or a delay in seconds.
    """

    def __init__(
        self,
        source: SourceKind = SourceKind.CNKI,
        *,
        endpoints: Sequence[str] = (),
        behaviours: dict | None = None,
    ) -> None:
        super().__init__(source)
        self._endpoints = tuple(endpoints)
        self.behaviours = behaviours or {}
        self.calls: list[tuple[list[str], str | None]] = []
        self.closed = False

    @property
    def endpoints(self) -> tuple[str, ...]:
        return self._endpoints

    async def fetch(self, keywords, *, endpoint=None):
        self.calls.append((list(keywords), endpoint))
        behaviour = self.behaviours.get(endpoint, [])
        if isinstance(behaviour, BaseException):
            raise behaviour
        if isinstance(behaviour, (int, float)):
            await asyncio.sleep(behaviour)
            return []
        return list(behaviour)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def stub_provider_cls() -> type[StubProvider]:
    return StubProvider


@pytest.fixture
def provider_error() -> ProviderError:
    return ProviderError("boom", provider="stub")
