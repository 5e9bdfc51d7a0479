"""Process-wide pacing of outgoing Bitrix24 requests."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import structlog

from bitrix_proxy.core.domain.errors import ConfigError

logger = structlog.get_logger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


@dataclass
class RateLimiter:
    """Enforces a minimum interval between successive request dispatches.

    One instance is shared by every call that goes through a transport.
    Callers queue on an ``asyncio.Lock`` only while the pacing decision is
    made; the request itself runs outside the lock.
    """

    requests_per_second: float = 2.0
    clock: Clock = time.monotonic
    sleep: Sleep = asyncio.sleep
    last_request_time: float | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        if self.requests_per_second <= 0:
            raise ConfigError(
                "requests_per_second must be positive",
                details={"requests_per_second": self.requests_per_second},
            )
        self._lock = asyncio.Lock()

    @property
    def min_interval(self) -> float:
        """Minimum seconds between two dispatches."""
        return 1.0 / self.requests_per_second

    async def acquire(self) -> float:
        """Wait until the next request may be sent and stamp its dispatch time.

        Returns:
            Seconds spent waiting.
        """
        async with self._lock:
            waited = 0.0
            now = self.clock()
            if self.last_request_time is not None:
                remaining = self.min_interval - (now - self.last_request_time)
                if remaining > 0:
                    logger.debug("rate_limit_wait", wait_seconds=round(remaining, 3))
                    await self.sleep(remaining)
                    waited = remaining
                    now = self.clock()
            self.last_request_time = now
            return waited
