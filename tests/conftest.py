"""Shared fixtures for the Bitrix24 tool proxy test suite."""

import pytest

from bitrix_proxy.core.domain.config_schema import BitrixSettings

WEBHOOK_URL = "https://example.bitrix24.ru/rest/1/secret-token"


class FakeClock:
    """Manual clock whose ``sleep`` advances time instead of waiting."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def bitrix_settings() -> BitrixSettings:
    return BitrixSettings(
        webhook_url=WEBHOOK_URL,
        timeout_seconds=8.0,
        retry_count=3,
        retry_delay_seconds=0.5,
        requests_per_second=2.0,
    )
