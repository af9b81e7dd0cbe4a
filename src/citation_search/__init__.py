"""
Citation Search - multi-source literature search for research questions.

Extracts keywords from a free-text question, queries Google Scholar mirrors
and CNKI concurrently, and returns a ranked, bounded citation list.

Usage:
    from citation_search import create_container, Settings

    container = create_container(Settings.from_env())
    result = await container.orchestrator().search("deep learning image recognition")

    for citation in result.citations:
        print(f"{citation.relevance_score:.1f} {citation.title}")

Features:
    - Keyword extraction for Chinese and English queries
    - Per-source rate limiting, timeouts and mirror fallback
    - Mock degradation when a source is unavailable
    - Relevance ranking (keyword match, impact, recency)
"""

__version__ = "0.1.0"

from .application.search import KeywordExtractor, RelevanceScorer, ResilientProviderCall, SearchOrchestrator
from .config import ProviderSettings, Settings
from .container import ApplicationContainer, create_container
from .models import Citation, SearchResult

__all__ = [
    "__version__",
    # Search
    "KeywordExtractor",
    "RelevanceScorer",
    "ResilientProviderCall",
    "SearchOrchestrator",
    # Models
    "Citation",
    "SearchResult",
    # Wiring
    "Settings",
    "ProviderSettings",
    "ApplicationContainer",
    "create_container",
]
