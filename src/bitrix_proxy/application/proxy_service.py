"""
Tool Proxy Service
==================

Single entry point used by the HTTP boundary and the CLI: validates and
translates a tool call through the dispatcher, then executes the resulting
request through the transport.
"""

from __future__ import annotations

from typing import Any

import structlog

from bitrix_proxy.application.dispatcher import ToolDispatcher
from bitrix_proxy.core.domain.errors import ProxyError
from bitrix_proxy.core.domain.models import BitrixRequest, ToolCall
from bitrix_proxy.core.interfaces.transport import TransportProtocol

logger = structlog.get_logger(__name__)


class ToolProxyService:
    """Dispatch + transport for one tool call at a time."""

    def __init__(self, dispatcher: ToolDispatcher, transport: TransportProtocol) -> None:
        self._dispatcher = dispatcher
        self._transport = transport
        self._logger = logger.bind(component="ToolProxyService")

    @property
    def dispatcher(self) -> ToolDispatcher:
        return self._dispatcher

    def list_tools(self) -> list[dict[str, Any]]:
        """Discovery catalogue in builder order."""
        return [definition.to_dict() for definition in self._dispatcher.list_tools()]

    def build_request(self, tool: Any, args: Any = None) -> BitrixRequest:
        """Validate and translate a call without sending it."""
        call = ToolCall.create(tool, args)
        return self._dispatcher.dispatch(call.tool, call.args)

    async def call_tool(self, tool: Any, args: Any = None) -> Any:
        """
        Execute a tool call against Bitrix24.

        Args:
            tool: Catalogue name of the tool
            args: Argument bag; anything but a mapping is treated as ``{}``

        Returns:
            The unwrapped upstream result

        Raises:
            ValidationError: If the tool is unknown or an argument is invalid
            ConfigError: If the webhook URL is not configured
            UpstreamError: If Bitrix24 rejected the call or was unreachable
        """
        request = self.build_request(tool, args)
        try:
            result = await self._transport.send(request.method, request.payload)
        except ProxyError as e:
            self._logger.warning(
                "tool_call_failed",
                tool=tool,
                method=request.method,
                code=e.code,
                status=e.status_code,
            )
            raise
        self._logger.info("tool_call_completed", tool=tool, method=request.method)
        return result

    async def close(self) -> None:
        await self._transport.close()
