"""Shared error-handling utilities for the HTTP boundary.

Every error leaves the service as an ``ErrorEnvelope``:

- ``ProxyError`` subclasses use their own code and HTTP status
- boundary checks raise ``http_exception`` (415/400) marked with the
  ``X-Bitrix-Proxy-Error`` header
- anything else becomes a 500 ``INTERNAL_ERROR`` without internals
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import HTTPException, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse

from bitrix_proxy.api.schemas.envelope import ErrorEnvelope
from bitrix_proxy.core.domain.errors import ProxyError, error_envelope

logger = structlog.get_logger(__name__)

ERROR_HEADER = "X-Bitrix-Proxy-Error"


def http_exception(
    *,
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
) -> HTTPException:
    """Build an HTTPException carrying an ``ErrorEnvelope`` payload.

    Args:
        status_code: HTTP status code.
        code: Machine-readable error code (e.g. ``"INVALID_PAYLOAD"``).
        message: Human-readable error description.
        details: Optional structured error details.

    Returns:
        HTTPException ready to be raised from a route handler.
    """
    return HTTPException(
        status_code=status_code,
        detail=ErrorEnvelope(message=message, code=code, details=details).model_dump(),
        headers={ERROR_HEADER: "1"},
    )


async def envelope_http_exception_handler(
    request: Request,
    exc: HTTPException,
) -> JSONResponse:
    """Return envelope payloads as-is, defer to FastAPI for other HTTP errors."""
    if exc.headers and exc.headers.get(ERROR_HEADER) == "1" and isinstance(exc.detail, dict):
        return JSONResponse(status_code=exc.status_code, content=exc.detail)
    return await http_exception_handler(request, exc)


async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    """Render a domain error with its own status and code."""
    return JSONResponse(status_code=exc.http_status, content=error_envelope(exc))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request_failed", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(
        status_code=500,
        content=ErrorEnvelope(
            message="Internal server error", code="INTERNAL_ERROR"
        ).model_dump(),
    )
