"""Request and response schemas of the HTTP boundary."""

from bitrix_proxy.api.schemas.envelope import (
    CallToolRequest,
    EnvelopeResponse,
    ErrorEnvelope,
)

__all__ = ["CallToolRequest", "EnvelopeResponse", "ErrorEnvelope"]
