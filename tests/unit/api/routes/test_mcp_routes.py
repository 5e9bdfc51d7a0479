"""Tests for the /mcp tool routes."""

from unittest.mock import AsyncMock

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from bitrix_proxy.api.dependencies import get_proxy_service
from bitrix_proxy.api.server import create_app
from bitrix_proxy.application.dispatcher import ToolDispatcher
from bitrix_proxy.application.proxy_service import ToolProxyService
from bitrix_proxy.core.domain.errors import ConfigError, UpstreamError


@pytest.fixture
def transport():
    transport = AsyncMock()
    transport.send = AsyncMock(return_value={"ID": "123"})
    return transport


@pytest.fixture
def app(transport):
    application = create_app()
    service = ToolProxyService(ToolDispatcher(), transport)
    application.dependency_overrides[get_proxy_service] = lambda: service
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


def _assert_error(response, *, status_code: int, code: str) -> dict:
    assert response.status_code == status_code
    data = response.json()
    assert data["ok"] is False
    assert data["code"] == code
    assert isinstance(data["message"], str)
    assert "details" in data
    return data


class TestListTools:
    def test_lists_catalogue(self, client) -> None:
        response = client.get("/mcp/list_tools")
        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        tools = data["data"]["tools"]
        assert tools[0]["name"] == "bitrix_get_deal"
        assert tools[0]["parameters"]["id"]["type"] == "number"
        assert [tool["name"] for tool in tools] == [
            tool.name for tool in ToolDispatcher().list_tools()
        ]


class TestCallTool:
    def test_success(self, client, transport) -> None:
        response = client.post(
            "/mcp/call_tool", json={"tool": "bitrix_get_deal", "args": {"id": 123}}
        )
        assert response.status_code == 200
        assert response.json() == {"ok": True, "data": {"ID": "123"}}
        transport.send.assert_awaited_once_with("crm.deal.get", {"id": 123})

    def test_missing_args_are_treated_as_empty(self, client, transport) -> None:
        response = client.post("/mcp/call_tool", json={"tool": "bitrix_list_deals"})
        assert response.status_code == 200
        transport.send.assert_awaited_once_with(
            "crm.deal.list", {"filter": {}, "select": ["*"], "order": {}, "start": 0}
        )

    def test_validation_error(self, client, transport) -> None:
        response = client.post(
            "/mcp/call_tool", json={"tool": "bitrix_get_deal", "args": {"id": -1}}
        )
        data = _assert_error(response, status_code=400, code="VALIDATION_ERROR")
        assert data["message"] == 'Parameter "id" must be a positive number'
        transport.send.assert_not_called()

    def test_unknown_tool(self, client, transport) -> None:
        response = client.post("/mcp/call_tool", json={"tool": "bitrix_nope"})
        data = _assert_error(response, status_code=400, code="VALIDATION_ERROR")
        assert data["message"] == "Unknown tool: bitrix_nope"
        transport.send.assert_not_called()

    def test_wrong_content_type(self, client) -> None:
        response = client.post(
            "/mcp/call_tool",
            content="tool=bitrix_get_deal",
            headers={"Content-Type": "text/plain"},
        )
        _assert_error(response, status_code=415, code="UNSUPPORTED_MEDIA_TYPE")

    @pytest.mark.parametrize("body", ["{not json", "[1, 2]", "\"text\""])
    def test_invalid_payload(self, client, body) -> None:
        response = client.post(
            "/mcp/call_tool", content=body, headers={"Content-Type": "application/json"}
        )
        _assert_error(response, status_code=400, code="INVALID_PAYLOAD")

    def test_upstream_error_keeps_status(self, client, transport) -> None:
        transport.send.side_effect = UpstreamError(
            "Access denied", status_code=403, details={"error": "ACCESS_DENIED"}
        )
        response = client.post(
            "/mcp/call_tool", json={"tool": "bitrix_get_deal", "args": {"id": 1}}
        )
        data = _assert_error(response, status_code=403, code="UPSTREAM_ERROR")
        assert data["details"] == {"error": "ACCESS_DENIED"}

    def test_unreachable_upstream(self, client, transport) -> None:
        transport.send.side_effect = UpstreamError("Bitrix24 request failed: refused")
        response = client.post(
            "/mcp/call_tool", json={"tool": "bitrix_get_deal", "args": {"id": 1}}
        )
        _assert_error(response, status_code=502, code="UPSTREAM_ERROR")

    def test_missing_webhook(self, client, transport) -> None:
        transport.send.side_effect = ConfigError(
            "Environment variable BITRIX_WEBHOOK_URL is not set"
        )
        response = client.post(
            "/mcp/call_tool", json={"tool": "bitrix_get_deal", "args": {"id": 1}}
        )
        _assert_error(response, status_code=500, code="CONFIGURATION_ERROR")

    def test_unexpected_error_hides_internals(self, client, transport) -> None:
        transport.send.side_effect = RuntimeError("secret-token leaked")
        response = client.post(
            "/mcp/call_tool", json={"tool": "bitrix_get_deal", "args": {"id": 1}}
        )
        data = _assert_error(response, status_code=500, code="INTERNAL_ERROR")
        assert "secret-token" not in response.text
        assert data["message"] == "Internal server error"


def test_ping(client) -> None:
    response = client.get("/mcp/ping")
    assert response.status_code == 200
    assert response.json() == {"ok": True}
