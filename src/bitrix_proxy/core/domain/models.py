"""
Core Domain Models

Immutable value objects shared by the request builders, the dispatcher and the
transport:

- ParameterSpec / ToolDefinition: static tool metadata used for discovery
- ToolCall: a caller-supplied tool invocation with a normalized argument bag
- BitrixRequest: the REST method name and payload produced for one tool call
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

PARAMETER_TYPES = frozenset({"string", "number", "object", "array", "boolean"})


@dataclass(frozen=True)
class ParameterSpec:
    """Description of a single tool parameter."""

    type: str
    description: str
    optional: bool = False
    enum: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if self.type not in PARAMETER_TYPES:
            raise ValueError(f"Unsupported parameter type: {self.type}")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.optional:
            data["optional"] = True
        if self.enum:
            data["enum"] = list(self.enum)
        return data

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": self.type,
            "description": self.description,
        }
        if self.enum:
            schema["enum"] = list(self.enum)
        return schema


@dataclass(frozen=True)
class ToolDefinition:
    """Name, description and parameter schema of one catalogue tool."""

    name: str
    description: str
    parameters: Mapping[str, ParameterSpec] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "parameters", MappingProxyType(dict(self.parameters))
        )

    @property
    def required_parameters(self) -> list[str]:
        return [name for name, spec in self.parameters.items() if not spec.optional]

    @property
    def parameters_schema(self) -> dict[str, Any]:
        """OpenAI function calling compatible parameter schema."""
        return {
            "type": "object",
            "properties": {
                name: spec.to_json_schema() for name, spec in self.parameters.items()
            },
            "required": self.required_parameters,
        }

    def to_dict(self) -> dict[str, Any]:
        """Discovery representation returned by ``list_tools``."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": {
                name: spec.to_dict() for name, spec in self.parameters.items()
            },
        }


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation as received from a caller."""

    tool: str
    args: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, tool: Any, args: Any = None) -> "ToolCall":
        """Build a call, normalizing absent or non-object args to ``{}``."""
        name = tool if isinstance(tool, str) else ""
        normalized = dict(args) if isinstance(args, Mapping) else {}
        return cls(tool=name, args=normalized)


@dataclass(frozen=True)
class BitrixRequest:
    """A Bitrix24 REST method and the JSON payload to post to it."""

    method: str
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"method": self.method, "payload": self.payload}
