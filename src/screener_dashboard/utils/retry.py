"""Shared retry policy for document retrieval attempts.

Provides the tenacity retrying factory used by each retrieval strategy.
Only transport-level failures are retried within a strategy; a wrong
status or a body without the required marker moves on to the next
strategy instead.
"""

from __future__ import annotations

import logging

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

# tenacity's before_sleep_log requires a stdlib logger, NOT structlog.
# See: https://tenacity.readthedocs.io/en/latest/#before-and-after-retry
_tenacity_logger = logging.getLogger("screener_dashboard.retry")

RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (
    httpx.TransportError,
    TimeoutError,
)


def transport_retrying(
    attempts: int,
    multiplier: float,
    max_wait: float,
) -> AsyncRetrying:
    """Build a retrying controller for one strategy.

    Args:
        attempts: Maximum attempts for the strategy (at least 1).
        multiplier: Exponential backoff multiplier in seconds.
        max_wait: Upper bound on a single backoff sleep.

    Returns:
        An AsyncRetrying that re-raises the last error once exhausted.
    """
    return AsyncRetrying(
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        stop=stop_after_attempt(max(attempts, 1)),
        wait=wait_exponential(multiplier=multiplier, max=max_wait),
        before_sleep=before_sleep_log(_tenacity_logger, logging.WARNING),
        reraise=True,
    )
