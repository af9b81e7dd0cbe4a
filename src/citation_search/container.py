"""
Application DI Container (dependency-injector).

Decides once, at startup, which provider variant serves each source:

    crawler_enabled = true   live provider (+ mock fallback when configured)
    crawler_enabled = false  mock provider only

Usage::

    from citation_search.config import Settings
    from citation_search.container import create_container

    container = create_container(Settings.from_env())
    orchestrator = container.orchestrator()

    # In tests, override any provider:
    container.orchestrator.override(providers.Object(fake_orchestrator))
"""

from __future__ import annotations

import logging
from typing import Any

from dependency_injector import containers, providers

from citation_search.application.search.keywords import KeywordExtractor
from citation_search.application.search.orchestrator import SearchOrchestrator
from citation_search.application.search.relevance import RelevanceScorer
from citation_search.application.search.resilient import ResilientProviderCall
from citation_search.config import Settings
from citation_search.core.async_utils import get_rate_limiter
from citation_search.infrastructure.sources.base import CitationProvider, SourceKind
from citation_search.infrastructure.sources.cnki import CNKIProvider
from citation_search.infrastructure.sources.google_scholar import GoogleScholarProvider
from citation_search.infrastructure.sources.mock import MockProvider

logger = logging.getLogger(__name__)


def _create_live_provider(source: SourceKind, settings: dict[str, Any], user_agent: str) -> CitationProvider:
    if source is SourceKind.GOOGLE_SCHOLAR:
        return GoogleScholarProvider(
            mirror_url=settings["base_url"],
            fallback_mirrors=tuple(settings.get("fallback_urls") or ()),
            timeout=settings["timeout"],
            user_agent=user_agent,
            api_key=settings.get("api_key"),
            translate=bool(settings.get("translate_keywords")),
        )
    return CNKIProvider(
        base_url=settings["base_url"],
        timeout=settings["timeout"],
        user_agent=user_agent,
        api_key=settings.get("api_key"),
    )


def _create_call(
    source: SourceKind,
    settings: dict[str, Any],
    crawler_enabled: bool,
    user_agent: str,
    mock_seed: int | None,
) -> ResilientProviderCall:
    """Build the resilient call for one source from its settings section."""
    mock = MockProvider(source, seed=mock_seed)

    if crawler_enabled:
        provider = _create_live_provider(source, settings, user_agent)
        fallback = mock if settings.get("mock_fallback") else None
    else:
        provider, fallback = mock, None

    logger.info(
        f"{source.value}: using {provider.name}"
        + (f" with fallback {fallback.name}" if fallback else "")
    )
    return ResilientProviderCall(
        provider=provider,
        rate_limiter=get_rate_limiter(source.value, rate=settings["rate_limit"]),
        timeout=settings["timeout"],
        fallback=fallback,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for the citation search service.

    Manages creation of:
    - ``extractor`` / ``scorer``: stateless search components
    - ``google_scholar_call`` / ``cnki_call``: one resilient call per source
    - ``orchestrator``: the search use case
    """

    config = providers.Configuration()

    extractor = providers.Singleton(KeywordExtractor)
    scorer = providers.Singleton(RelevanceScorer)

    google_scholar_call = providers.Singleton(
        _create_call,
        source=SourceKind.GOOGLE_SCHOLAR,
        settings=config.google_scholar,
        crawler_enabled=config.crawler_enabled,
        user_agent=config.user_agent,
        mock_seed=config.mock_seed,
    )

    cnki_call = providers.Singleton(
        _create_call,
        source=SourceKind.CNKI,
        settings=config.cnki,
        crawler_enabled=config.crawler_enabled,
        user_agent=config.user_agent,
        mock_seed=config.mock_seed,
    )

    orchestrator = providers.Singleton(
        SearchOrchestrator,
        extractor=extractor,
        calls=providers.List(google_scholar_call, cnki_call),
        scorer=scorer,
        deadline=config.search_deadline,
    )


def create_container(settings: Settings | None = None) -> ApplicationContainer:
    """Create a container configured from settings (environment when omitted)."""
    settings = settings or Settings.from_env()
    container = ApplicationContainer()
    container.config.from_dict(settings.as_dict())
    return container


__all__ = ["ApplicationContainer", "create_container"]
