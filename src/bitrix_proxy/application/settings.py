"""
Settings Loader
===============

Builds ``ProxySettings`` from, in increasing priority:

1. schema defaults
2. an optional YAML file (``BITRIX_PROXY_CONFIG`` or an explicit path)
3. environment variables

Durations are given in milliseconds in the environment, matching the
variable names (``BITRIX_TIMEOUT_MS``, ``BITRIX_RETRY_DELAY_MS``).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError as PydanticValidationError

from bitrix_proxy.core.domain.config_schema import ProxySettings
from bitrix_proxy.core.domain.errors import ConfigError

logger = structlog.get_logger(__name__)

CONFIG_PATH_ENV = "BITRIX_PROXY_CONFIG"

# env var -> (section, key, converter)
_ENV_MAPPING: dict[str, tuple[str, str, Any]] = {
    "BITRIX_WEBHOOK_URL": ("bitrix", "webhook_url", str),
    "BITRIX_TIMEOUT_MS": ("bitrix", "timeout_seconds", lambda v: float(v) / 1000),
    "BITRIX_RETRY_COUNT": ("bitrix", "retry_count", int),
    "BITRIX_RETRY_DELAY_MS": ("bitrix", "retry_delay_seconds", lambda v: float(v) / 1000),
    "BITRIX_REQUESTS_PER_SECOND": ("bitrix", "requests_per_second", float),
    "MCP_HOST": ("server", "host", str),
    "MCP_PORT": ("server", "port", int),
    "LOGLEVEL": ("server", "log_level", lambda v: v.upper()),
}


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}", details={"path": str(path)})
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML in config file: {path}", details={"error": str(e)}
        ) from e
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file must contain a mapping: {path}", details={"path": str(path)}
        )
    for section, values in data.items():
        if values is None:
            data[section] = {}
        elif not isinstance(values, dict):
            raise ConfigError(
                f"Config section '{section}' must be a mapping: {path}",
                details={"path": str(path), "section": section},
            )
    logger.debug("config.yaml.loaded", path=str(path))
    return data


def _apply_env(data: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    for name, (section, key, convert) in _ENV_MAPPING.items():
        raw = env.get(name)
        if raw is None or raw.strip() == "":
            continue
        try:
            value = convert(raw.strip())
        except ValueError as e:
            raise ConfigError(
                f"Invalid value for environment variable {name}",
                details={"variable": name, "value": raw},
            ) from e
        data.setdefault(section, {})[key] = value
    return data


def load_settings(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> ProxySettings:
    """
    Load and validate the proxy configuration.

    Args:
        config_path: YAML file to read; defaults to ``$BITRIX_PROXY_CONFIG``
        env: Environment mapping; defaults to ``os.environ``

    Returns:
        Validated settings. A missing webhook URL is allowed here and only
        fails when a tool call is actually sent.

    Raises:
        ConfigError: If the file or any value is invalid
    """
    env = os.environ if env is None else env
    path = config_path or env.get(CONFIG_PATH_ENV)

    data: dict[str, Any] = _load_yaml(Path(path)) if path else {}
    data = _apply_env(data, env)

    try:
        return ProxySettings.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError(
            "Invalid proxy configuration",
            details={
                "errors": [
                    {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
                    for err in e.errors()
                ]
            },
        ) from e
