"""
Unified Exception Hierarchy for Citation Search.

Exception Hierarchy:
    CitationSearchError (base)
    ├── ProviderError
    │   ├── ProviderTimeoutError
    │   ├── ProviderNetworkError
    │   └── ProviderParseError
    ├── ValidationError
    │   └── InvalidQueryError
    ├── OverallDeadlineExceeded
    └── ConfigurationError

Provider errors never leave the resilience layer: ResilientProviderCall
recovers them through the mirror chain and the mock fallback.
OverallDeadlineExceeded is the only failure a caller of the orchestrator
observes, and it is reported as an unsuccessful SearchResult.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = auto()      # Recoverable, can continue
    ERROR = auto()        # Failed but can retry
    CRITICAL = auto()     # Cannot continue
    TRANSIENT = auto()    # Temporary, should retry automatically


class ErrorCategory(Enum):
    """Categories for error classification."""
    PROVIDER = "provider"
    VALIDATION = "validation"
    DEADLINE = "deadline"
    CONFIGURATION = "config"


class ProviderErrorKind(Enum):
    """Why a provider fetch failed."""
    TIMEOUT = "timeout"
    NETWORK = "network"
    PARSE = "parse"
    EMPTY = "empty"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Rich context attached to an error."""
    operation: str | None = None
    input_value: Any = None
    suggestion: str | None = None
    retry_after: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class CitationSearchError(Exception):
    """
    Base exception for all citation search errors.

    Provides:
    - Structured error context
    - Severity classification
    - Retry guidance
    """

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        category: ErrorCategory = ErrorCategory.PROVIDER,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.context = context or ErrorContext()
        self.severity = severity
        self.category = category
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": str(self),
            "category": self.category.value,
            "severity": self.severity.name.lower(),
            "retryable": self.retryable,
        }
        if self.context.operation:
            result["operation"] = self.context.operation
        if self.context.suggestion:
            result["suggestion"] = self.context.suggestion
        if self.context.retry_after:
            result["retry_after_seconds"] = self.context.retry_after
        return result


# =============================================================================
# Provider Errors
# =============================================================================

class ProviderError(CitationSearchError):
    """A provider could not deliver citations."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "unknown",
        kind: ProviderErrorKind = ProviderErrorKind.UNEXPECTED,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            f"{provider}: {message}",
            context=context,
            severity=ErrorSeverity.TRANSIENT,
            category=ErrorCategory.PROVIDER,
            retryable=kind is not ProviderErrorKind.PARSE,
        )
        self.provider = provider
        self.kind = kind

    @classmethod
    def wrap(cls, error: Exception, *, provider: str) -> ProviderError:
        """Turn any exception into a ProviderError, keeping provider errors as-is."""
        if isinstance(error, ProviderError):
            return error
        wrapped = cls(
            f"{type(error).__name__}: {error}",
            provider=provider,
            kind=ProviderErrorKind.UNEXPECTED,
        )
        wrapped.__cause__ = error
        return wrapped

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["provider"] = self.provider
        result["kind"] = self.kind.value
        return result


class ProviderTimeoutError(ProviderError):
    """Raised when a provider does not answer within its timeout."""

    def __init__(
        self,
        timeout: float,
        *,
        provider: str = "unknown",
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            f"no response within {timeout:g}s",
            provider=provider,
            kind=ProviderErrorKind.TIMEOUT,
            context=context,
        )
        self.timeout = timeout


class ProviderNetworkError(ProviderError):
    """Raised for connection failures and HTTP error statuses."""

    def __init__(
        self,
        message: str = "Network connection failed",
        *,
        provider: str = "unknown",
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            provider=provider,
            kind=ProviderErrorKind.NETWORK,
            context=context,
        )
        self.status_code = status_code


class ProviderParseError(ProviderError):
    """Raised when a fetched page cannot be turned into citations."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "unknown",
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            f"parse error: {message}",
            provider=provider,
            kind=ProviderErrorKind.PARSE,
            context=context,
        )


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(CitationSearchError):
    """Base class for validation errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.VALIDATION,
            retryable=False,
        )


class InvalidQueryError(ValidationError):
    """Raised when a search query is blank or too long."""

    def __init__(
        self,
        query: str | None,
        reason: str = "Query cannot be empty",
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext()
        ctx = ErrorContext(
            operation=ctx.operation,
            input_value=query,
            suggestion=ctx.suggestion or "Describe the research topic in a short sentence",
            retry_after=ctx.retry_after,
            metadata=ctx.metadata,
        )
        super().__init__(f"Invalid query: {reason}", context=ctx)
        self.reason = reason


# =============================================================================
# Deadline / Configuration Errors
# =============================================================================

class OverallDeadlineExceeded(CitationSearchError):
    """Raised when a whole search request outlives its global deadline."""

    def __init__(
        self,
        deadline: float,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            f"Search did not complete within {deadline:g}s",
            context=context,
            severity=ErrorSeverity.TRANSIENT,
            category=ErrorCategory.DEADLINE,
            retryable=True,
        )
        self.deadline = deadline


class ConfigurationError(CitationSearchError):
    """Raised for configuration-related errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
            retryable=False,
        )
