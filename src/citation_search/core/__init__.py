"""
Core module for Citation Search.

Provides:
- Unified exception hierarchy
- Async utilities: token-bucket rate limiting, first-success strategy
  chains, ordered parallel execution
"""

from .async_utils import (
    # Strategy chains
    Outcome,
    # Rate limiting
    RateLimiter,
    Strategy,
    first_success,
    # Parallel execution
    gather_in_order,
    get_rate_limiter,
    reset_rate_limiters,
)
from .exceptions import (
    # Base
    CitationSearchError,
    # Configuration errors
    ConfigurationError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    InvalidQueryError,
    # Deadline
    OverallDeadlineExceeded,
    # Provider errors
    ProviderError,
    ProviderErrorKind,
    ProviderNetworkError,
    ProviderParseError,
    ProviderTimeoutError,
    # Validation errors
    ValidationError,
)

__all__ = [
    # Exceptions
    "CitationSearchError",
    "ErrorContext",
    "ErrorSeverity",
    "ErrorCategory",
    "ProviderError",
    "ProviderErrorKind",
    "ProviderTimeoutError",
    "ProviderNetworkError",
    "ProviderParseError",
    "ValidationError",
    "InvalidQueryError",
    "OverallDeadlineExceeded",
    "ConfigurationError",
    # Async utilities
    "RateLimiter",
    "get_rate_limiter",
    "reset_rate_limiters",
    "Strategy",
    "Outcome",
    "first_success",
    "gather_in_order",
]
