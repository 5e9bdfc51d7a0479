"""
Request Builder Protocol

A request builder owns one entity family of the Bitrix24 API (deals, leads,
contacts, ...). It contributes static tool definitions to the discovery
catalogue and translates a recognized tool call into a ``BitrixRequest``.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from bitrix_proxy.core.domain.models import BitrixRequest, ToolDefinition


class RequestBuilderProtocol(Protocol):
    """
    Protocol defining the contract for per-domain request builders.

    Builders are pure: the same tool name and arguments always produce an
    identical request, and no I/O happens while building.

    Dispatch Contract:
        try_build() returns None for any tool name the builder does not own,
        so the dispatcher can offer the call to the next builder. For an owned
        name it validates the arguments fail-fast and either returns the
        request or raises ValidationError.
    """

    @property
    def domain(self) -> str:
        """Short name of the entity family, e.g. "deals"."""
        ...

    @property
    def tool_definitions(self) -> Sequence[ToolDefinition]:
        """Tool definitions contributed to the catalogue, in display order."""
        ...

    def try_build(
        self, tool_name: str, args: Mapping[str, Any]
    ) -> BitrixRequest | None:
        """
        Translate a tool call into a Bitrix24 request.

        Args:
            tool_name: Catalogue name of the tool
            args: Caller-supplied argument bag (already normalized to a mapping)

        Returns:
            The request, or None when the tool is not owned by this builder

        Raises:
            ValidationError: If an argument is missing or malformed
        """
        ...
