"""Tests for ToolProxyService."""

from unittest.mock import AsyncMock

import pytest

from bitrix_proxy.application.dispatcher import ToolDispatcher
from bitrix_proxy.application.proxy_service import ToolProxyService
from bitrix_proxy.core.domain.errors import UnknownToolError, UpstreamError, ValidationError


@pytest.fixture
def transport() -> AsyncMock:
    transport = AsyncMock()
    transport.send = AsyncMock(return_value={"ID": "123", "TITLE": "Deal"})
    return transport


@pytest.fixture
def service(transport) -> ToolProxyService:
    return ToolProxyService(ToolDispatcher(), transport)


class TestCallTool:
    async def test_sends_built_request(self, service, transport) -> None:
        result = await service.call_tool("bitrix_get_deal", {"id": 123})
        assert result == {"ID": "123", "TITLE": "Deal"}
        transport.send.assert_awaited_once_with("crm.deal.get", {"id": 123})

    async def test_unknown_tool_never_reaches_transport(self, service, transport) -> None:
        with pytest.raises(UnknownToolError):
            await service.call_tool("bitrix_unknown", {})
        transport.send.assert_not_called()

    async def test_invalid_args_never_reach_transport(self, service, transport) -> None:
        with pytest.raises(ValidationError):
            await service.call_tool("bitrix_update_deal", {"id": 1, "fields": {}})
        transport.send.assert_not_called()

    async def test_upstream_errors_propagate(self, service, transport) -> None:
        transport.send.side_effect = UpstreamError("Not found", status_code=400)
        with pytest.raises(UpstreamError) as exc_info:
            await service.call_tool("bitrix_get_deal", {"id": 1})
        assert exc_info.value.http_status == 400


def test_list_tools_serializes_definitions(service) -> None:
    tools = service.list_tools()
    assert tools[0] == {
        "name": "bitrix_get_deal",
        "description": "Get a Bitrix24 deal by its ID.",
        "parameters": {"id": {"type": "number", "description": "Numeric Bitrix24 deal ID."}},
    }


def test_build_request_does_not_send(service, transport) -> None:
    request = service.build_request("bitrix_get_lead", {"id": 2})
    assert request.to_dict() == {"method": "crm.lead.get", "payload": {"id": 2}}
    transport.send.assert_not_called()


async def test_close_closes_transport(service, transport) -> None:
    await service.close()
    transport.close.assert_awaited_once()
