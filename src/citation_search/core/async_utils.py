"""
Async Utilities for Resilient Provider Calls.

Python 3.12+ features used:
- asyncio.TaskGroup for structured concurrency (3.11+)
- asyncio.timeout context manager (3.11+)
- Type parameter syntax for generic classes

Provides:
- Rate limiting with token bucket
- "First success wins" evaluation of ordered fallback strategies
- Parallel execution with TaskGroup, results kept in submission order
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from .exceptions import ProviderError, ProviderTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Rate Limiter (Token Bucket Algorithm)
# =============================================================================

@dataclass
class RateLimiter:
    """
    Token bucket rate limiter shared by every request hitting one provider.

    The bucket holds at most ``capacity`` tokens and refills at
    ``rate / per`` tokens per second. With the default capacity of one,
    successive grants are spaced by at least ``per / rate`` seconds.

    Example:
        limiter = RateLimiter(rate=0.4)   # one request every 2.5s
        async with limiter:
            await fetch_page()
    """
    rate: float = 0.4  # permits per period
    per: float = 1.0   # period in seconds
    capacity: float = 1.0
    _tokens: float = field(init=False)
    _last_update: float = field(init=False)
    _lock: asyncio.Lock = field(init=False, default_factory=asyncio.Lock)

    def __post_init__(self) -> None:
        if self.rate <= 0 or self.per <= 0:
            raise ValueError(f"rate and per must be positive, got rate={self.rate}, per={self.per}")
        self.capacity = max(1.0, self.capacity)
        self._tokens = self.capacity
        self._last_update = time.monotonic()

    @property
    def interval(self) -> float:
        """Seconds between two permits at the steady-state rate."""
        return self.per / self.rate

    async def acquire(self) -> None:
        """Acquire a permit, suspending the caller until one is available."""
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_update
            self._tokens = min(self.capacity, self._tokens + elapsed * (self.rate / self.per))
            self._last_update = now

            if self._tokens < 1:
                wait_time = (1 - self._tokens) * self.interval
                logger.debug(f"Rate limit: waiting {wait_time:.2f}s")
                await asyncio.sleep(wait_time)
                # The slept interval produced exactly the token handed out here
                self._tokens = 0
                self._last_update = time.monotonic()
            else:
                self._tokens -= 1

    async def __aenter__(self) -> RateLimiter:
        await self.acquire()
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


# One limiter per provider, shared across concurrent searches
_rate_limiters: dict[str, RateLimiter] = {}


def get_rate_limiter(name: str, rate: float = 0.4) -> RateLimiter:
    """Get or create the rate limiter for a provider."""
    if name not in _rate_limiters:
        _rate_limiters[name] = RateLimiter(rate=rate)
    return _rate_limiters[name]


def reset_rate_limiters() -> None:
    """Forget every registered limiter (used on shutdown and in tests)."""
    _rate_limiters.clear()


# =============================================================================
# First Success Wins
# =============================================================================

@dataclass(frozen=True, slots=True)
class Strategy(Generic[T]):
    """
    One way of obtaining a result.

    Attributes:
        name: Label used in logs and in the Outcome
        run: Zero-argument coroutine factory
        timeout: Budget in seconds for this attempt (None = unbounded)
        provider: Provider name attached to errors raised by this attempt
    """
    name: str
    run: Callable[[], Awaitable[T]]
    timeout: float | None = None
    provider: str = "unknown"


@dataclass(frozen=True, slots=True)
class Outcome(Generic[T]):
    """Result of evaluating a chain of strategies."""
    value: T | None = None
    strategy: str | None = None
    errors: tuple[ProviderError, ...] = ()

    @property
    def ok(self) -> bool:
        return self.strategy is not None


async def first_success(strategies: Sequence[Strategy[T]]) -> Outcome[T]:
    """
    Evaluate strategies in order and return the first that succeeds.

    Each attempt is bounded by its own timeout. Timeouts and exceptions are
    collected as ProviderError values instead of being raised; cancellation
    of the calling task is not intercepted.

    Example:
        outcome = await first_success([
            Strategy("primary", lambda: fetch(primary_url), timeout=15),
            Strategy("mirror", lambda: fetch(mirror_url), timeout=15),
        ])
        if outcome.ok:
            use(outcome.value)
    """
    errors: list[ProviderError] = []

    for strategy in strategies:
        try:
            async with asyncio.timeout(strategy.timeout):
                value = await strategy.run()
        except TimeoutError:
            error: ProviderError = ProviderTimeoutError(
                strategy.timeout or 0.0, provider=strategy.provider
            )
        except Exception as e:
            error = ProviderError.wrap(e, provider=strategy.provider)
        else:
            return Outcome(value=value, strategy=strategy.name, errors=tuple(errors))

        logger.warning(f"Strategy '{strategy.name}' failed ({error.kind.value}): {error}")
        errors.append(error)

    return Outcome(errors=tuple(errors))


# =============================================================================
# Parallel Execution with TaskGroup (Python 3.11+)
# =============================================================================

async def gather_in_order(*coros: Awaitable[T]) -> list[T]:
    """
    Execute coroutines in parallel using TaskGroup.

    Results are returned in the order the coroutines were given, not in
    completion order. If the calling task is cancelled (for example by an
    enclosing ``asyncio.timeout``), every still-running task is cancelled
    and no partial results are returned.

    Example:
        async with asyncio.timeout(45):
            batches = await gather_in_order(call_a(), call_b())
    """
    async with asyncio.TaskGroup() as tg:
        tasks = [tg.create_task(coro) for coro in coros]
    return [task.result() for task in tasks]
