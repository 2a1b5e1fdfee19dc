"""
Resilience patterns for fault-tolerant start-up.

This module provides the bounded exponential-backoff retry used for lookups
that may come back empty while a third-party SDK is still warming up.
"""

from .retry import (
    RetryConfig,
    RetryableFetcher,
    fetch_with_retry,
    retry_fetch
)

__all__ = [
    "RetryConfig",
    "RetryableFetcher",
    "fetch_with_retry",
    "retry_fetch"
]
