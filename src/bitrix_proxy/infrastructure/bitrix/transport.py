"""
Bitrix24 Transport

Executes Bitrix24 REST calls over an inbound webhook:

- ``POST {webhook}/{method}.json`` with the payload as JSON body
- every attempt passes through the shared ``RateLimiter``
- timeouts, network failures, HTTP 429 and 5xx are retried with linear backoff
- other non-2xx statuses fail immediately
- upstream error bodies are normalized into ``UpstreamError``
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp
import structlog

from bitrix_proxy.core.domain.config_schema import BitrixSettings
from bitrix_proxy.core.domain.errors import UpstreamError
from bitrix_proxy.infrastructure.bitrix.rate_limiter import RateLimiter
from bitrix_proxy.infrastructure.bitrix.retry import RetryPolicy, is_retryable_status

logger = structlog.get_logger(__name__)

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def build_method_url(base_url: str, method: str) -> str:
    return f"{base_url.rstrip('/')}/{method}.json"


def unwrap_result(body: Any) -> Any:
    """Return ``body["result"]`` when present, otherwise the whole body."""
    if isinstance(body, dict) and "result" in body:
        return body["result"]
    return body


def normalize_upstream_error(
    status: int | None, body: Any, fallback_message: str
) -> UpstreamError:
    """Wrap an upstream failure, preferring Bitrix24's own error text."""
    message = fallback_message
    if isinstance(body, dict):
        description = body.get("error_description") or body.get("error")
        if isinstance(description, str) and description:
            message = description
    return UpstreamError(message, status_code=status, details=body)


def _decode_body(raw: bytes) -> Any:
    if not raw:
        return None
    # error pages are not always UTF-8
    text = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except ValueError:
        return text


class BitrixTransport:
    """
    HTTP client bound to one Bitrix24 webhook.

    The aiohttp session is created lazily on first use unless one is injected,
    and is closed by ``close()`` only when the transport created it.
    """

    def __init__(
        self,
        settings: BitrixSettings,
        rate_limiter: RateLimiter | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._settings = settings
        self._rate_limiter = rate_limiter or RateLimiter(settings.requests_per_second)
        self._retry_policy = RetryPolicy(
            max_attempts=settings.max_attempts,
            base_delay=settings.retry_delay_seconds,
        )
        self._session = session
        self._owns_session = session is None
        self._sleep = sleep
        self._logger = logger.bind(component="BitrixTransport")

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._settings.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _post(self, url: str, payload: dict[str, Any]) -> tuple[int, Any]:
        session = self._get_session()
        async with session.post(url, json=payload, headers=JSON_HEADERS) as response:
            raw = await response.read()
            return response.status, _decode_body(raw)

    async def send(self, method: str, payload: dict[str, Any]) -> Any:
        """
        Execute one Bitrix24 REST method.

        Args:
            method: REST method name, e.g. "crm.deal.get"
            payload: JSON body

        Returns:
            The unwrapped upstream result

        Raises:
            ConfigError: If the webhook URL is not configured
            UpstreamError: On a non-retryable status or once attempts run out
        """
        url = build_method_url(self._settings.require_webhook_url(), method)
        policy = self._retry_policy

        for attempt in range(1, policy.max_attempts + 1):
            await self._rate_limiter.acquire()
            try:
                status, body = await self._post(url, payload)
            except asyncio.TimeoutError:
                error = UpstreamError(
                    f"Bitrix24 request timed out after {self._settings.timeout_seconds:g}s"
                )
                retryable = True
            except aiohttp.ClientError as e:
                error = UpstreamError(f"Bitrix24 request failed: {e}")
                retryable = True
            else:
                if 200 <= status < 300:
                    self._logger.debug(
                        "bitrix_request_succeeded", method=method, status=status, attempt=attempt
                    )
                    return unwrap_result(body)
                error = normalize_upstream_error(
                    status, body, f"Bitrix24 responded with HTTP {status}"
                )
                retryable = is_retryable_status(status)

            if not retryable or attempt >= policy.max_attempts:
                self._logger.error(
                    "bitrix_request_failed",
                    method=method,
                    status=error.status_code,
                    attempt=attempt,
                    retryable=retryable,
                    error=error.message,
                )
                raise error

            delay = policy.delay_for(attempt)
            self._logger.warning(
                "bitrix_request_retry",
                method=method,
                status=error.status_code,
                attempt=attempt,
                backoff_seconds=delay,
                error=error.message,
            )
            await self._sleep(delay)

        raise AssertionError("retry loop exited without a result")  # pragma: no cover
