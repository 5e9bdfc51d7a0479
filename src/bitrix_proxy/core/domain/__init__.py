"""
Domain Models and Business Logic

This package contains the core domain of the Bitrix24 tool proxy:
- Error taxonomy and envelope rendering
- Immutable tool, call and request models
- Argument validation primitives
- Settings schema
"""

from bitrix_proxy.core.domain.errors import (
    ConfigError,
    ProxyError,
    UnknownToolError,
    UpstreamError,
    ValidationError,
)
from bitrix_proxy.core.domain.models import (
    BitrixRequest,
    ParameterSpec,
    ToolCall,
    ToolDefinition,
)

__all__ = [
    "BitrixRequest",
    "ConfigError",
    "ParameterSpec",
    "ProxyError",
    "ToolCall",
    "ToolDefinition",
    "UnknownToolError",
    "UpstreamError",
    "ValidationError",
]
