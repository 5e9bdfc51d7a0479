"""Tests for request pacing."""

import asyncio

import pytest

from bitrix_proxy.core.domain.errors import ConfigError
from bitrix_proxy.infrastructure.bitrix.rate_limiter import RateLimiter


def _limiter(clock, rps: float = 2.0) -> RateLimiter:
    return RateLimiter(requests_per_second=rps, clock=clock, sleep=clock.sleep)


class TestRateLimiter:
    def test_min_interval(self, fake_clock) -> None:
        assert _limiter(fake_clock).min_interval == 0.5
        assert _limiter(fake_clock, rps=4).min_interval == 0.25

    @pytest.mark.parametrize("rps", [0, -1])
    def test_rejects_non_positive_rate(self, rps) -> None:
        with pytest.raises(ConfigError):
            RateLimiter(requests_per_second=rps)

    async def test_first_request_is_not_delayed(self, fake_clock) -> None:
        limiter = _limiter(fake_clock)
        assert await limiter.acquire() == 0.0
        assert fake_clock.sleeps == []
        assert limiter.last_request_time == 1000.0

    async def test_back_to_back_requests_are_spaced(self, fake_clock) -> None:
        limiter = _limiter(fake_clock)
        stamps = []
        for _ in range(3):
            await limiter.acquire()
            stamps.append(fake_clock.now)
        assert fake_clock.sleeps == [0.5, 0.5]
        assert [b - a for a, b in zip(stamps, stamps[1:])] == [0.5, 0.5]

    async def test_partial_wait(self, fake_clock) -> None:
        limiter = _limiter(fake_clock)
        await limiter.acquire()
        fake_clock.now += 0.2
        waited = await limiter.acquire()
        assert waited == pytest.approx(0.3)

    async def test_no_wait_after_idle_period(self, fake_clock) -> None:
        limiter = _limiter(fake_clock)
        await limiter.acquire()
        fake_clock.now += 5
        assert await limiter.acquire() == 0.0

    async def test_concurrent_callers_are_serialized(self, fake_clock) -> None:
        limiter = _limiter(fake_clock)
        stamps = []

        async def call() -> None:
            await limiter.acquire()
            stamps.append(fake_clock.now)

        await asyncio.gather(*(call() for _ in range(4)))
        stamps.sort()
        gaps = [b - a for a, b in zip(stamps, stamps[1:])]
        assert all(gap >= 0.5 for gap in gaps)
