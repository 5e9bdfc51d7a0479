"""
Configuration Schema Validation

Pydantic models for the proxy configuration: the Bitrix24 webhook target with
its transport tuning, and the HTTP server settings.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bitrix_proxy.core.domain.errors import ConfigError


class BitrixSettings(BaseModel):
    """Schema for the upstream Bitrix24 webhook and transport tuning."""

    model_config = ConfigDict(extra="forbid")

    webhook_url: Optional[str] = Field(
        None,
        description="Inbound webhook base URL, e.g. https://portal.bitrix24.ru/rest/1/<token>",
    )
    timeout_seconds: float = Field(
        8.0,
        gt=0,
        description="Per-request timeout",
    )
    retry_count: int = Field(
        3,
        ge=0,
        description="Maximum attempts per request (values below 1 mean a single attempt)",
    )
    retry_delay_seconds: float = Field(
        0.5,
        ge=0,
        description="Base delay of the linear backoff",
    )
    requests_per_second: float = Field(
        2.0,
        gt=0,
        description="Upper bound on outgoing request rate",
    )

    @field_validator("webhook_url")
    @classmethod
    def normalize_webhook_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip().rstrip("/")
        if not value:
            return None
        if not value.startswith(("http://", "https://")):
            raise ValueError("webhook_url must be an http(s) URL")
        return value

    @property
    def max_attempts(self) -> int:
        return max(self.retry_count, 1)

    def require_webhook_url(self) -> str:
        """Return the webhook URL or raise ``ConfigError`` when it is unset."""
        if not self.webhook_url:
            raise ConfigError("Environment variable BITRIX_WEBHOOK_URL is not set")
        return self.webhook_url


class ServerSettings(BaseModel):
    """Schema for the HTTP boundary."""

    model_config = ConfigDict(extra="forbid")

    host: str = Field("0.0.0.0", description="Bind address")
    port: int = Field(3000, ge=1, le=65535, description="Bind port")
    log_level: str = Field(
        "INFO",
        description="Log level",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )


class ProxySettings(BaseModel):
    """Complete proxy configuration."""

    model_config = ConfigDict(extra="forbid")

    bitrix: BitrixSettings = Field(default_factory=BitrixSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
