"""
Retry patterns for external lookups.

This module provides a bounded, time-budgeted retry mechanism with exponential
backoff for async lookups that may legitimately come back empty, such as
identifiers that a third-party SDK only produces some time after start-up.
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar
from functools import wraps
from dataclasses import dataclass
import structlog

from src.shared.exceptions import ValidationError

logger = structlog.get_logger(__name__)

T = TypeVar('T')

Lookup = Callable[[], Awaitable[Optional[T]]]


def _is_none(value: Any) -> bool:
    return value is None


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior."""
    max_attempts: int = 5
    max_total_time_ms: int = 10000  # wall-clock budget for all attempts
    initial_delay_ms: int = 500  # base backoff unit

    def __post_init__(self):
        for name in ("max_attempts", "max_total_time_ms", "initial_delay_ms"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValidationError(
                    f"{name} must be a positive integer, got: {value}",
                    field=name,
                    value=value
                )

    def calculate_delay(self, attempt: int, remaining_ms: float) -> float:
        """
        Calculate the backoff delay before the given attempt.

        The first attempt never waits. Later attempts wait
        ``initial_delay_ms * 2 ** (attempt - 2)``, capped at the remaining budget.

        Args:
            attempt: 1-based attempt number
            remaining_ms: Budget left for this fetch

        Returns:
            Delay in milliseconds
        """
        if attempt <= 1:
            return 0
        return max(0, min(self.initial_delay_ms * (2 ** (attempt - 2)), remaining_ms))


class RetryableFetcher(Generic[T]):
    """Runs a single-value lookup until it yields a result or the budget runs out."""

    def __init__(
        self,
        name: str,
        config: Optional[RetryConfig] = None,
        is_empty: Callable[[Any], bool] = _is_none,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        """
        Initialize fetcher.

        Args:
            name: Identifier used in log events
            config: Retry configuration
            is_empty: Predicate deciding whether a lookup result counts as "no result"
            clock: Monotonic clock returning seconds
            sleep: Coroutine function suspending for a number of seconds
        """
        self.name = name
        self.config = config or RetryConfig()
        self.is_empty = is_empty
        self._clock = clock
        self._sleep = sleep

    async def fetch(self, lookup: Lookup) -> Optional[T]:
        """
        Invoke ``lookup`` with exponential backoff until it returns a value.

        Args:
            lookup: No-argument coroutine function returning a value or None

        Returns:
            The first non-empty result, or None when attempts or time ran out
        """
        config = self.config
        start = self._clock()
        cumulative_delay = 0.0

        logger.info(
            "Starting retryable fetch",
            fetcher=self.name,
            max_attempts=config.max_attempts,
            max_total_time_ms=config.max_total_time_ms
        )

        for attempt in range(1, config.max_attempts + 1):
            remaining = config.max_total_time_ms - self._elapsed_ms(start) - cumulative_delay
            if remaining <= 0:
                logger.info("Retry budget exhausted before attempt", fetcher=self.name, attempt=attempt)
                break

            if attempt > 1:
                delay = config.calculate_delay(attempt, remaining)
                logger.info(
                    "Waiting before retry",
                    fetcher=self.name,
                    attempt=attempt,
                    max_attempts=config.max_attempts,
                    delay_ms=delay
                )
                await self._sleep(delay / 1000)
                cumulative_delay += delay

                if self._elapsed_ms(start) >= config.max_total_time_ms:
                    logger.info("Retry budget exhausted after waiting", fetcher=self.name, attempt=attempt)
                    break

            try:
                result = await lookup()
            except Exception as e:
                logger.warning(
                    "Fetch attempt failed",
                    fetcher=self.name,
                    attempt=attempt,
                    exception=type(e).__name__,
                    error=str(e)
                )
                continue

            if not self.is_empty(result):
                logger.info(
                    "Fetch succeeded",
                    fetcher=self.name,
                    attempt=attempt,
                    duration_ms=round(self._elapsed_ms(start), 2)
                )
                return result

            logger.info("Fetch attempt returned no result", fetcher=self.name, attempt=attempt)

        logger.info(
            "Fetch gave up without a result",
            fetcher=self.name,
            max_attempts=config.max_attempts,
            duration_ms=round(self._elapsed_ms(start), 2)
        )
        return None

    def _elapsed_ms(self, start: float) -> float:
        return (self._clock() - start) * 1000

    def get_status(self) -> Dict[str, Any]:
        """Get fetcher configuration for diagnostics."""
        return {
            "name": self.name,
            "retry_config": {
                "max_attempts": self.config.max_attempts,
                "max_total_time_ms": self.config.max_total_time_ms,
                "initial_delay_ms": self.config.initial_delay_ms
            }
        }


async def fetch_with_retry(
    lookup: Lookup,
    config: Optional[RetryConfig] = None,
    name: Optional[str] = None
) -> Optional[T]:
    """Run ``lookup`` through a one-off RetryableFetcher."""
    fetcher = RetryableFetcher(name or getattr(lookup, "__name__", "lookup"), config)
    return await fetcher.fetch(lookup)


# Decorator for adding retry capabilities to lookups
def retry_fetch(
    max_attempts: int = 5,
    max_total_time_ms: int = 10000,
    initial_delay_ms: int = 500,
    is_empty: Callable[[Any], bool] = _is_none
):
    """
    Decorator that retries an async lookup until it returns a value.

    Args:
        max_attempts: Maximum number of attempts
        max_total_time_ms: Wall-clock budget for all attempts
        initial_delay_ms: Base delay for the exponential backoff
        is_empty: Predicate deciding whether a result counts as "no result"

    Returns:
        Decorated coroutine function returning the value or None
    """
    def decorator(func):
        config = RetryConfig(
            max_attempts=max_attempts,
            max_total_time_ms=max_total_time_ms,
            initial_delay_ms=initial_delay_ms
        )

        @wraps(func)
        async def wrapper(*args, **kwargs):
            fetcher = RetryableFetcher(
                name=f"{func.__module__}.{func.__name__}",
                config=config,
                is_empty=is_empty
            )
            return await fetcher.fetch(lambda: func(*args, **kwargs))

        return wrapper
    return decorator
