"""Tests for domain error types and the error envelope helper."""

import pytest

from bitrix_proxy.core.domain.errors import (
    ConfigError,
    ProxyError,
    UnknownToolError,
    UpstreamError,
    ValidationError,
    error_envelope,
)


class TestProxyError:
    """Tests for ProxyError base exception."""

    def test_create_basic(self) -> None:
        err = ProxyError(message="Something failed")
        assert err.message == "Something failed"
        assert err.code == "PROXY_ERROR"
        assert err.details is None
        assert err.status_code is None
        assert err.http_status == 500

    def test_str_representation(self) -> None:
        err = ProxyError(message="Something broke")
        assert str(err) == "Something broke"

    def test_can_be_raised_and_caught(self) -> None:
        with pytest.raises(ProxyError) as exc_info:
            raise ProxyError(message="Raised error")
        assert str(exc_info.value) == "Raised error"


class TestValidationError:
    def test_code_and_status(self) -> None:
        err = ValidationError('Parameter "id" must be a positive number')
        assert err.code == "VALIDATION_ERROR"
        assert err.status_code == 400
        assert err.http_status == 400
        assert isinstance(err, ProxyError)

    def test_unknown_tool_is_validation_error(self) -> None:
        err = UnknownToolError("bitrix_fly_to_moon")
        assert isinstance(err, ValidationError)
        assert err.message == "Unknown tool: bitrix_fly_to_moon"
        assert err.details == {"tool": "bitrix_fly_to_moon"}
        assert err.tool_name == "bitrix_fly_to_moon"
        assert err.http_status == 400


class TestConfigError:
    def test_code_and_status(self) -> None:
        err = ConfigError("BITRIX_WEBHOOK_URL is not set")
        assert err.code == "CONFIGURATION_ERROR"
        assert err.http_status == 500


class TestUpstreamError:
    def test_keeps_upstream_status_and_body(self) -> None:
        body = {"error": "NOT_FOUND", "error_description": "Not found"}
        err = UpstreamError("Not found", status_code=404, details=body)
        assert err.code == "UPSTREAM_ERROR"
        assert err.status_code == 404
        assert err.details == body
        assert err.http_status == 404

    def test_unreachable_upstream_maps_to_bad_gateway(self) -> None:
        err = UpstreamError("connection refused")
        assert err.status_code is None
        assert err.http_status == 502

    def test_non_error_status_maps_to_bad_gateway(self) -> None:
        err = UpstreamError("unexpected redirect", status_code=302)
        assert err.http_status == 502


class TestErrorEnvelope:
    def test_envelope_shape(self) -> None:
        err = UpstreamError("Rate limited", status_code=429, details={"error": "QUERY_LIMIT_EXCEEDED"})
        assert error_envelope(err) == {
            "ok": False,
            "message": "Rate limited",
            "code": "UPSTREAM_ERROR",
            "details": {"error": "QUERY_LIMIT_EXCEEDED"},
        }

    def test_envelope_without_details(self) -> None:
        envelope = error_envelope(ValidationError("Tool name is required"))
        assert envelope["details"] is None
        assert envelope["code"] == "VALIDATION_ERROR"
