"""Bitrix24 REST transport: rate limiting, retries and error normalization."""

from bitrix_proxy.infrastructure.bitrix.rate_limiter import RateLimiter
from bitrix_proxy.infrastructure.bitrix.retry import RetryPolicy
from bitrix_proxy.infrastructure.bitrix.transport import BitrixTransport

__all__ = ["BitrixTransport", "RateLimiter", "RetryPolicy"]
