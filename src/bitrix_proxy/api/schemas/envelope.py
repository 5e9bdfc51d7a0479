"""Uniform response envelopes."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel


class EnvelopeResponse(BaseModel):
    """Successful response: ``{ok: true, data?}``."""

    ok: Literal[True] = True
    data: Any = None


class ErrorEnvelope(BaseModel):
    """Error response: ``{ok: false, message, code, details}``."""

    ok: Literal[False] = False
    message: str
    code: str
    details: Any = None


class CallToolRequest(BaseModel):
    """Body of ``POST /mcp/call_tool`` (documentation only, parsed by hand)."""

    tool: str
    args: dict[str, Any] | None = None
