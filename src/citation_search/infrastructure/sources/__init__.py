"""
Citation Sources

Providers behind one capability (``CitationProvider.fetch``):

    ┌──────────────────────────────────────────────────────┐
    │                 CitationProvider                     │
    │  ┌────────────────────┬──────────────┬────────────┐  │
    │  │ GoogleScholar      │ CNKI         │ Mock       │  │
    │  │ (live, mirrors)    │ (live)       │ (seeded)   │  │
    │  └────────────────────┴──────────────┴────────────┘  │
    └──────────────────────────────────────────────────────┘
"""

from .base import CitationProvider, ProviderKind, SourceKind
from .base_client import MAX_RESULTS_PER_CALL, BaseHTMLClient
from .cnki import CNKIProvider
from .google_scholar import GoogleScholarProvider
from .mock import MockProvider

__all__ = [
    "CitationProvider",
    "ProviderKind",
    "SourceKind",
    "BaseHTMLClient",
    "MAX_RESULTS_PER_CALL",
    "CNKIProvider",
    "GoogleScholarProvider",
    "MockProvider",
]
