"""Tests for the citation search exception hierarchy."""

from __future__ import annotations

from citation_search.core.exceptions import (
    CitationSearchError,
    ConfigurationError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    InvalidQueryError,
    OverallDeadlineExceeded,
    ProviderError,
    ProviderErrorKind,
    ProviderNetworkError,
    ProviderParseError,
    ProviderTimeoutError,
    ValidationError,
)

# ============================================================
# Base Error
# ============================================================


class TestCitationSearchError:
    def test_defaults(self):
        error = CitationSearchError("something broke")
        assert str(error) == "something broke"
        assert error.severity is ErrorSeverity.ERROR
        assert error.retryable is False
        assert error.context == ErrorContext()

    def test_to_dict_includes_context(self):
        error = CitationSearchError(
            "rate limited",
            context=ErrorContext(operation="search", suggestion="wait", retry_after=2.5),
            retryable=True,
        )
        data = error.to_dict()
        assert data["error"] == "rate limited"
        assert data["category"] == ErrorCategory.PROVIDER.value
        assert data["retryable"] is True
        assert data["operation"] == "search"
        assert data["suggestion"] == "wait"
        assert data["retry_after_seconds"] == 2.5

    def test_to_dict_omits_empty_context(self):
        data = CitationSearchError("x").to_dict()
        assert "operation" not in data
        assert "suggestion" not in data


# ============================================================
# Provider Errors
# ============================================================


class TestProviderErrors:
    def test_hierarchy(self):
        for error in (
            ProviderTimeoutError(30, provider="cnki"),
            ProviderNetworkError("down", provider="cnki"),
            ProviderParseError("no table", provider="cnki"),
        ):
            assert isinstance(error, ProviderError)
            assert isinstance(error, CitationSearchError)

    def test_message_prefixed_with_provider(self):
        error = ProviderError("boom", provider="google-scholar")
        assert str(error) == "google-scholar: boom"
        assert error.kind is ProviderErrorKind.UNEXPECTED

    def test_timeout(self):
        error = ProviderTimeoutError(15.0, provider="cnki")
        assert error.kind is ProviderErrorKind.TIMEOUT
        assert error.timeout == 15.0
        assert "15s" in str(error)
        assert error.retryable is True

    def test_network_keeps_status_code(self):
        error = ProviderNetworkError("HTTP 503", provider="cnki", status_code=503)
        assert error.kind is ProviderErrorKind.NETWORK
        assert error.status_code == 503

    def test_parse_is_not_retryable(self):
        error = ProviderParseError("unexpected markup", provider="cnki")
        assert error.kind is ProviderErrorKind.PARSE
        assert error.retryable is False

    def test_wrap_keeps_provider_errors(self):
        original = ProviderNetworkError("down", provider="cnki")
        assert ProviderError.wrap(original, provider="other") is original

    def test_wrap_plain_exception(self):
        cause = KeyError("title")
        wrapped = ProviderError.wrap(cause, provider="cnki")
        assert wrapped.kind is ProviderErrorKind.UNEXPECTED
        assert wrapped.provider == "cnki"
        assert wrapped.__cause__ is cause
        assert "KeyError" in str(wrapped)

    def test_to_dict_adds_provider_fields(self):
        data = ProviderTimeoutError(30, provider="google-scholar").to_dict()
        assert data["provider"] == "google-scholar"
        assert data["kind"] == "timeout"


# ============================================================
# Validation / Deadline / Configuration
# ============================================================


class TestOtherErrors:
    def test_invalid_query(self):
        error = InvalidQueryError("   ", reason="Query cannot be empty")
        assert isinstance(error, ValidationError)
        assert error.reason == "Query cannot be empty"
        assert error.category is ErrorCategory.VALIDATION
        assert error.context.input_value == "   "
        assert error.context.suggestion

    def test_deadline(self):
        error = OverallDeadlineExceeded(45)
        assert error.deadline == 45
        assert error.category is ErrorCategory.DEADLINE
        assert error.retryable is True
        assert "45s" in str(error)

    def test_configuration(self):
        error = ConfigurationError("CNKI_TIMEOUT must be positive")
        assert error.severity is ErrorSeverity.CRITICAL
        assert error.category is ErrorCategory.CONFIGURATION
        assert error.retryable is False
