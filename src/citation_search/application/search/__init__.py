"""
Search Use Case

    query
      │
      ▼
    ┌──────────────────┐
    │ KeywordExtractor │  ← punctuation split, stop words, ≤5 keywords
    └────────┬─────────┘
             │
    ┌────────┴────────┐
    ▼                 ▼
  Google Scholar     CNKI        ← ResilientProviderCall each (parallel)
    │                 │
    └────────┬────────┘
             ▼
    ┌──────────────────┐
    │ RelevanceScorer  │  ← title/abstract match, impact, recency
    └────────┬─────────┘
             ▼
       SearchResult
"""

from __future__ import annotations

from .keywords import KEYWORD_TRANSLATIONS, MAX_KEYWORDS, STOP_WORDS, KeywordExtractor, translate_keywords
from .orchestrator import SearchOrchestrator
from .query_validator import (
    MAX_QUERY_LENGTH,
    QueryValidationResult,
    QueryValidator,
    ensure_valid_query,
    validate_query,
)
from .relevance import MAX_RESULTS, RelevanceScorer
from .resilient import ResilientProviderCall

__all__ = [
    # Keywords
    "KeywordExtractor",
    "translate_keywords",
    "KEYWORD_TRANSLATIONS",
    "MAX_KEYWORDS",
    "STOP_WORDS",
    # Validation
    "QueryValidator",
    "QueryValidationResult",
    "validate_query",
    "ensure_valid_query",
    "MAX_QUERY_LENGTH",
    # Scoring
    "RelevanceScorer",
    "MAX_RESULTS",
    # Orchestration
    "ResilientProviderCall",
    "SearchOrchestrator",
]
