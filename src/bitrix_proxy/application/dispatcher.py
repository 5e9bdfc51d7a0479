"""
Tool Dispatcher
===============

Routes a tool call to the request builder that owns the tool name and
aggregates the builders' definitions into the discovery catalogue.

Builders are tried in a fixed, explicit order (``default_builders``). Tool
names must be unique across all builders; a duplicate is a configuration bug
and is rejected when the dispatcher is constructed.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from bitrix_proxy.core.domain.errors import ConfigError, UnknownToolError, ValidationError
from bitrix_proxy.core.domain.models import BitrixRequest, ToolCall, ToolDefinition
from bitrix_proxy.core.interfaces.builders import RequestBuilderProtocol
from bitrix_proxy.infrastructure.builders import (
    ActivityRequestBuilder,
    CompanyRequestBuilder,
    ContactRequestBuilder,
    DealRequestBuilder,
    ItemRequestBuilder,
    LeadRequestBuilder,
    MiscRequestBuilder,
    TaskRequestBuilder,
    UserRequestBuilder,
)

logger = structlog.get_logger(__name__)


def default_builders() -> tuple[RequestBuilderProtocol, ...]:
    """Builders in dispatch (and discovery) order."""
    return (
        DealRequestBuilder(),
        LeadRequestBuilder(),
        ContactRequestBuilder(),
        CompanyRequestBuilder(),
        ItemRequestBuilder(),
        ActivityRequestBuilder(),
        TaskRequestBuilder(),
        UserRequestBuilder(),
        MiscRequestBuilder(),
    )


class ToolDispatcher:
    """
    Ordered chain of request builders.

    Example:
        >>> dispatcher = ToolDispatcher()
        >>> dispatcher.dispatch("bitrix_get_deal", {"id": 123}).to_dict()
        {'method': 'crm.deal.get', 'payload': {'id': 123}}
    """

    def __init__(self, builders: Sequence[RequestBuilderProtocol] | None = None) -> None:
        self._builders = tuple(builders) if builders is not None else default_builders()
        self._logger = logger.bind(component="ToolDispatcher")
        self._definitions = self._collect_definitions()

    def _collect_definitions(self) -> dict[str, ToolDefinition]:
        definitions: dict[str, ToolDefinition] = {}
        owners: dict[str, str] = {}
        for builder in self._builders:
            for definition in builder.tool_definitions:
                if definition.name in definitions:
                    raise ConfigError(
                        f"Duplicate tool name: {definition.name}",
                        details={
                            "tool": definition.name,
                            "builders": [owners[definition.name], builder.domain],
                        },
                    )
                definitions[definition.name] = definition
                owners[definition.name] = builder.domain
        return definitions

    @property
    def builders(self) -> tuple[RequestBuilderProtocol, ...]:
        return self._builders

    def list_tools(self) -> list[ToolDefinition]:
        """All tool definitions, concatenated in builder order."""
        return list(self._definitions.values())

    def get_tool(self, name: str) -> ToolDefinition | None:
        return self._definitions.get(name)

    def dispatch(self, tool_name: str, args: Mapping[str, Any] | None = None) -> BitrixRequest:
        """
        Translate a tool call into a Bitrix24 request.

        Args:
            tool_name: Catalogue name of the tool
            args: Argument bag; ``None`` or a non-object value is treated as ``{}``

        Returns:
            The request produced by the first builder that owns ``tool_name``

        Raises:
            ValidationError: If the tool name is empty or an argument is invalid
            UnknownToolError: If no builder owns ``tool_name``
        """
        call = ToolCall.create(tool_name, args)
        if not call.tool:
            raise ValidationError("Tool name is required")

        for builder in self._builders:
            request = builder.try_build(call.tool, call.args)
            if request is not None:
                self._logger.debug(
                    "tool_dispatched",
                    tool=call.tool,
                    builder=builder.domain,
                    method=request.method,
                )
                return request

        self._logger.warning("tool_unknown", tool=call.tool)
        raise UnknownToolError(call.tool)
