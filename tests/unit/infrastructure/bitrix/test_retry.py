"""Tests for the retry policy."""

import pytest

from bitrix_proxy.infrastructure.bitrix.retry import (
    RetryPolicy,
    backoff_delay,
    is_retryable_status,
)


@pytest.mark.parametrize("status", [None, 429, 500, 502, 503, 504])
def test_retryable_statuses(status) -> None:
    assert is_retryable_status(status) is True


@pytest.mark.parametrize("status", [400, 401, 403, 404, 422])
def test_non_retryable_statuses(status) -> None:
    assert is_retryable_status(status) is False


def test_backoff_is_linear() -> None:
    assert [backoff_delay(0.5, attempt) for attempt in (1, 2, 3)] == [0.5, 1.0, 1.5]


class TestRetryPolicy:
    def test_defaults(self) -> None:
        policy = RetryPolicy()
        assert policy.max_attempts == 3
        assert policy.delay_for(2) == 1.0

    @pytest.mark.parametrize("attempts", [0, -2])
    def test_always_attempts_once(self, attempts) -> None:
        assert RetryPolicy(max_attempts=attempts).max_attempts == 1
