"""Retry policy for Bitrix24 requests.

The retryable-status predicate and the backoff formula are plain functions so
they can be tested without running the retry loop.
"""

from __future__ import annotations

from dataclasses import dataclass

RETRYABLE_STATUS_TOO_MANY_REQUESTS = 429


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry with linear backoff."""

    max_attempts: int = 3
    base_delay: float = 0.5

    def __post_init__(self) -> None:
        # a request is always attempted at least once
        object.__setattr__(self, "max_attempts", max(int(self.max_attempts), 1))

    def delay_for(self, attempt: int) -> float:
        return backoff_delay(self.base_delay, attempt)


def is_retryable_status(status: int | None) -> bool:
    """Whether a failed attempt with ``status`` may be retried.

    ``None`` means no response was received (timeout or network failure).
    """
    if status is None:
        return True
    return status == RETRYABLE_STATUS_TOO_MANY_REQUESTS or status >= 500


def backoff_delay(base_delay: float, attempt: int) -> float:
    """Linear backoff: ``base_delay * attempt`` for the 1-based ``attempt``."""
    return base_delay * attempt
