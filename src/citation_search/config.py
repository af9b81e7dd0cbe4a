"""
Runtime configuration, read from environment variables.

Environment variables:
    CITATION_SERVICE_NAME              service name reported by /api/health
    CITATION_CRAWLER_ENABLED           true = live providers, false = mock only
    CITATION_SEARCH_DEADLINE           global deadline per search (seconds)
    CITATION_MOCK_SEED                 seed for mock citations (unset = random)
    CITATION_USER_AGENT                User-Agent sent by live providers

    GOOGLE_SCHOLAR_MIRROR_URL          primary mirror
    GOOGLE_SCHOLAR_FALLBACK_MIRRORS    comma-separated mirrors tried after it
    GOOGLE_SCHOLAR_TIMEOUT / _RATE_LIMIT / _MOCK_FALLBACK / _TRANSLATE_KEYWORDS
    GOOGLE_SCHOLAR_API_KEY

    CNKI_BASE_URL
    CNKI_TIMEOUT / _RATE_LIMIT / _MOCK_FALLBACK
    CNKI_API_KEY
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

from citation_search.core.exceptions import ConfigurationError, ErrorContext
from citation_search.infrastructure.sources.base_client import DEFAULT_USER_AGENT
from citation_search.infrastructure.sources.cnki import DEFAULT_BASE_URL as CNKI_DEFAULT_URL
from citation_search.infrastructure.sources.google_scholar import (
    DEFAULT_FALLBACK_MIRRORS,
    DEFAULT_MIRROR_URL,
)

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "citation-backend"
DEFAULT_DEADLINE = 45.0
DEFAULT_RATE_LIMIT = 0.4

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


# =============================================================================
# Parsing helpers
# =============================================================================

def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(
        f"{name} must be a boolean, got {raw!r}",
        context=ErrorContext(input_value=raw, suggestion="Use true or false"),
    )


def _parse_positive_float(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be a number, got {raw!r}",
            context=ErrorContext(input_value=raw),
        ) from None
    if value <= 0:
        raise ConfigurationError(
            f"{name} must be positive, got {raw!r}",
            context=ErrorContext(input_value=raw),
        )
    return value


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}",
            context=ErrorContext(input_value=raw),
        ) from None


def _parse_list(raw: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


class _EnvReader:
    """Typed access to an environment mapping."""

    def __init__(self, environ: Mapping[str, str]) -> None:
        self._environ = environ

    def text(self, name: str, default: str) -> str:
        value = self._environ.get(name, "").strip()
        return value or default

    def optional(self, name: str) -> str | None:
        value = self._environ.get(name, "").strip()
        return value or None

    def flag(self, name: str, default: bool) -> bool:
        raw = self._environ.get(name)
        return default if raw is None else _parse_bool(name, raw)

    def seconds(self, name: str, default: float) -> float:
        raw = self._environ.get(name)
        return default if raw is None or not raw.strip() else _parse_positive_float(name, raw)

    def integer(self, name: str) -> int | None:
        raw = self.optional(name)
        return None if raw is None else _parse_int(name, raw)

    def urls(self, name: str, default: tuple[str, ...]) -> tuple[str, ...]:
        raw = self._environ.get(name)
        return default if raw is None else _parse_list(raw)


# =============================================================================
# Settings
# =============================================================================

@dataclass(frozen=True)
class ProviderSettings:
    """Settings of one literature source."""
    base_url: str
    timeout: float
    rate_limit: float = DEFAULT_RATE_LIMIT
    mock_fallback: bool = False
    api_key: str | None = None
    fallback_urls: tuple[str, ...] = ()
    translate_keywords: bool = False


@dataclass(frozen=True)
class Settings:
    """
    Application settings.

    Usage:
        settings = Settings.from_env()
        container = create_container(settings)
    """
    service_name: str = DEFAULT_SERVICE_NAME
    crawler_enabled: bool = False
    search_deadline: float = DEFAULT_DEADLINE
    mock_seed: int | None = None
    user_agent: str = DEFAULT_USER_AGENT
    google_scholar: ProviderSettings = field(
        default_factory=lambda: ProviderSettings(
            base_url=DEFAULT_MIRROR_URL,
            timeout=30.0,
            fallback_urls=DEFAULT_FALLBACK_MIRRORS,
        )
    )
    cnki: ProviderSettings = field(
        default_factory=lambda: ProviderSettings(
            base_url=CNKI_DEFAULT_URL,
            timeout=15.0,
            mock_fallback=True,
        )
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """
        Build settings from environment variables.

        Raises:
            ConfigurationError: a variable is set to an unusable value
        """
        env = _EnvReader(os.environ if environ is None else environ)
        defaults = cls()

        settings = cls(
            service_name=env.text("CITATION_SERVICE_NAME", defaults.service_name),
            crawler_enabled=env.flag("CITATION_CRAWLER_ENABLED", defaults.crawler_enabled),
            search_deadline=env.seconds("CITATION_SEARCH_DEADLINE", defaults.search_deadline),
            mock_seed=env.integer("CITATION_MOCK_SEED"),
            user_agent=env.text("CITATION_USER_AGENT", defaults.user_agent),
            google_scholar=ProviderSettings(
                base_url=env.text("GOOGLE_SCHOLAR_MIRROR_URL", defaults.google_scholar.base_url),
                timeout=env.seconds("GOOGLE_SCHOLAR_TIMEOUT", defaults.google_scholar.timeout),
                rate_limit=env.seconds("GOOGLE_SCHOLAR_RATE_LIMIT", defaults.google_scholar.rate_limit),
                mock_fallback=env.flag("GOOGLE_SCHOLAR_MOCK_FALLBACK", defaults.google_scholar.mock_fallback),
                api_key=env.optional("GOOGLE_SCHOLAR_API_KEY"),
                fallback_urls=env.urls("GOOGLE_SCHOLAR_FALLBACK_MIRRORS", defaults.google_scholar.fallback_urls),
                translate_keywords=env.flag(
                    "GOOGLE_SCHOLAR_TRANSLATE_KEYWORDS", defaults.google_scholar.translate_keywords
                ),
            ),
            cnki=ProviderSettings(
                base_url=env.text("CNKI_BASE_URL", defaults.cnki.base_url),
                timeout=env.seconds("CNKI_TIMEOUT", defaults.cnki.timeout),
                rate_limit=env.seconds("CNKI_RATE_LIMIT", defaults.cnki.rate_limit),
                mock_fallback=env.flag("CNKI_MOCK_FALLBACK", defaults.cnki.mock_fallback),
                api_key=env.optional("CNKI_API_KEY"),
            ),
        )
        logger.debug(
            f"Loaded settings: crawler_enabled={settings.crawler_enabled}, "
            f"deadline={settings.search_deadline}s"
        )
        return settings

    def as_dict(self) -> dict[str, Any]:
        """Nested plain dict, the shape ``Configuration.from_dict()`` expects."""
        return asdict(self)
