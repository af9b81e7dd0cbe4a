"""
QueryValidator - Search Query Validation

Pre-flight validation for free-text research queries, run by the HTTP layer
before the orchestrator sees the query.

Validation checks:
- Empty/whitespace-only query
- Query length limit

Example:
    >>> result = validate_query("   ")
    >>> result.is_valid
    False
    >>> result.errors
    ['Query cannot be empty']
"""

from __future__ import annotations

from dataclasses import dataclass, field

from citation_search.core.exceptions import InvalidQueryError

# Maximum accepted query length in characters
MAX_QUERY_LENGTH = 500


@dataclass
class QueryValidationResult:
    """Result of query validation."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)

    def summary(self) -> str:
        """Human-readable summary."""
        if self.is_valid:
            return "Query is valid"
        return "; ".join(self.errors)


class QueryValidator:
    """Validates search queries before a search is started."""

    def __init__(self, max_length: int = MAX_QUERY_LENGTH) -> None:
        self.max_length = max_length

    def validate(self, query: str | None) -> QueryValidationResult:
        errors: list[str] = []

        if query is None or not query.strip():
            errors.append("Query cannot be empty")
        elif len(query) > self.max_length:
            errors.append(f"Query cannot exceed {self.max_length} characters (got {len(query)})")

        return QueryValidationResult(is_valid=not errors, errors=errors)

    def ensure_valid(self, query: str | None) -> str:
        """Return the query unchanged, or raise InvalidQueryError."""
        result = self.validate(query)
        if query is None or not result.is_valid:
            raise InvalidQueryError(query, reason=result.summary())
        return query


def validate_query(query: str | None) -> QueryValidationResult:
    """Convenience function to validate a query."""
    return QueryValidator().validate(query)


def ensure_valid_query(query: str | None) -> str:
    """Convenience function that raises InvalidQueryError for bad queries."""
    return QueryValidator().ensure_valid(query)
