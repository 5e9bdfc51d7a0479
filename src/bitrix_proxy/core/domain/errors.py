"""Domain-specific exception types for the Bitrix24 tool proxy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class ProxyError(Exception):
    """Base exception for proxy domain errors."""

    message: str
    code: str = "PROXY_ERROR"
    details: Any = None
    status_code: int | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    @property
    def http_status(self) -> int:
        """HTTP status the error is rendered with at the boundary."""
        return self.status_code or 500


class ValidationError(ProxyError):
    """Error raised when a tool name or its arguments are malformed."""

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(
            message=message, code="VALIDATION_ERROR", details=details, status_code=400
        )


class UnknownToolError(ValidationError):
    """Error raised when no request builder recognizes a tool name."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}", details={"tool": tool_name})


class ConfigError(ProxyError):
    """Error raised when the proxy itself is misconfigured."""

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details=details,
            status_code=500,
        )


class UpstreamError(ProxyError):
    """Error raised when Bitrix24 rejects a request or cannot be reached.

    ``status_code`` is the upstream HTTP status, or ``None`` when no response
    was received at all. ``details`` carries the raw upstream body.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            code="UPSTREAM_ERROR",
            details=details,
            status_code=status_code,
        )

    @property
    def http_status(self) -> int:
        if self.status_code is not None and self.status_code >= 400:
            return self.status_code
        return 502


def error_envelope(error: ProxyError) -> Dict[str, Any]:
    """Render an error as the uniform ``{ok: false, ...}`` envelope."""
    return {
        "ok": False,
        "message": error.message,
        "code": error.code,
        "details": error.details,
    }
