"""Base request builder that reduces boilerplate for per-domain builders.

Provides:
- Class-level ``builder_domain`` and ``builder_tools`` instead of requiring
  ``@property`` methods on every builder.
- A ``try_build`` that looks the tool name up in the handler table returned
  by ``_handlers`` and returns ``None`` for names the builder does not own.
- Shared argument helpers (``positive_id``, ``required_fields``,
  ``list_payload`` ...) producing the uniform validation messages and the
  default paging shapes every builder relies on.

This class lives in the **infrastructure** layer and satisfies
``RequestBuilderProtocol`` from ``core/interfaces`` structurally.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from bitrix_proxy.core.domain.errors import ConfigError, ValidationError
from bitrix_proxy.core.domain.models import BitrixRequest, ParameterSpec, ToolDefinition
from bitrix_proxy.core.domain.validation import (
    ensure_array,
    ensure_boolean,
    ensure_iso_date,
    ensure_non_negative_number,
    ensure_object,
    ensure_positive_number,
    ensure_string,
    optional_positive_number,
)

Handler = Callable[[Mapping[str, Any]], BitrixRequest]

DEFAULT_LIMIT = 50
DEFAULT_LATEST_LIMIT = 10

LIST_PARAMETERS: dict[str, ParameterSpec] = {
    "filter": ParameterSpec("object", "Filter conditions, e.g. {\">OPPORTUNITY\": 1000}", optional=True),
    "select": ParameterSpec("array", "Fields to return (default: all fields)", optional=True),
    "order": ParameterSpec("object", "Sort order, e.g. {\"DATE_CREATE\": \"DESC\"}", optional=True),
    "start": ParameterSpec("number", "Paging offset (default: 0)", optional=True),
}

LIMIT_PARAMETER = ParameterSpec("number", "Maximum number of records (default: 50)", optional=True)


class BaseRequestBuilder:
    """Convenience base class for builders that satisfy ``RequestBuilderProtocol``.

    Subclasses must set:
      - ``builder_domain`` (``str``)
      - ``builder_tools`` (``tuple[ToolDefinition, ...]``)

    And override ``_handlers`` to map every tool name in ``builder_tools`` to a
    method taking the argument mapping and returning a ``BitrixRequest``.
    """

    builder_domain: str = ""
    """Entity family handled by the builder (e.g. ``"deals"``)."""

    builder_tools: tuple[ToolDefinition, ...] = ()
    """Tool definitions contributed to the catalogue, in display order."""

    def __init__(self) -> None:
        self._handler_table = self._handlers()
        defined = [tool.name for tool in self.builder_tools]
        if len(set(defined)) != len(defined) or set(defined) != set(self._handler_table):
            raise ConfigError(
                f"Builder '{self.builder_domain}' tool definitions do not match its handlers",
                details={
                    "missing_handlers": sorted(set(defined) - set(self._handler_table)),
                    "undefined_tools": sorted(set(self._handler_table) - set(defined)),
                },
            )

    @property
    def domain(self) -> str:
        return self.builder_domain

    @property
    def tool_definitions(self) -> tuple[ToolDefinition, ...]:
        return self.builder_tools

    def _handlers(self) -> dict[str, Handler]:
        raise NotImplementedError

    def try_build(
        self, tool_name: str, args: Mapping[str, Any]
    ) -> BitrixRequest | None:
        """Return the request for an owned tool, or ``None`` for any other name."""
        handler = self._handler_table.get(tool_name)
        if handler is None:
            return None
        return handler(args)


# ---------------------------------------------------------------------- #
# Argument helpers
# ---------------------------------------------------------------------- #


def positive_id(args: Mapping[str, Any], key: str = "id") -> int | float:
    return ensure_positive_number(
        args.get(key), f'Parameter "{key}" must be a positive number'
    )


def optional_positive_id(args: Mapping[str, Any], key: str) -> int | float | None:
    if args.get(key) is None:
        return None
    return ensure_positive_number(
        args.get(key), f'Parameter "{key}" must be a positive number when provided'
    )


def required_string(args: Mapping[str, Any], key: str) -> str:
    message = f'Parameter "{key}" must be a non-empty string'
    value = ensure_string(args.get(key), message)
    if value is None:
        raise ValidationError(message)
    return value


def optional_string(args: Mapping[str, Any], key: str) -> str | None:
    return ensure_string(
        args.get(key), f'Parameter "{key}" must be a non-empty string when provided'
    )


def optional_object(args: Mapping[str, Any], key: str) -> dict[str, Any]:
    value = ensure_object(
        args.get(key), f'Parameter "{key}" must be an object when provided'
    )
    return dict(value) if value is not None else {}


def required_fields(args: Mapping[str, Any], key: str = "fields") -> dict[str, Any]:
    """Return a non-empty ``fields`` object or fail."""
    value = ensure_object(args.get(key), f'Parameter "{key}" must be an object')
    if not value:
        raise ValidationError(f'Parameter "{key}" must be a non-empty object')
    return dict(value)


def optional_boolean(args: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = ensure_boolean(
        args.get(key), f'Parameter "{key}" must be a boolean when provided'
    )
    return default if value is None else value


def optional_iso_date(args: Mapping[str, Any], key: str) -> str | None:
    return ensure_iso_date(args.get(key), f'Parameter "{key}" must be a valid date')


def required_iso_date(args: Mapping[str, Any], key: str) -> str:
    value = optional_iso_date(args, key)
    if value is None:
        raise ValidationError(f'Parameter "{key}" is required')
    return value


def merge_fields(extra: Mapping[str, Any] | None, **mandatory: Any) -> dict[str, Any]:
    """Merge caller-supplied fields with mandatory ones; mandatory keys win."""
    fields = dict(extra or {})
    fields.update({key: value for key, value in mandatory.items() if value is not None})
    return fields


def yes_no(flag: bool) -> str:
    return "Y" if flag else "N"


def list_payload(args: Mapping[str, Any]) -> dict[str, Any]:
    """Standard ``*.list`` payload with ``{}``/``["*"]``/``{}``/``0`` defaults."""
    select = ensure_array(
        args.get("select"), 'Parameter "select" must be an array when provided'
    )
    start = ensure_non_negative_number(
        args.get("start"), 'Parameter "start" must be a non-negative number when provided'
    )
    return {
        "filter": optional_object(args, "filter"),
        "select": list(select) if select else ["*"],
        "order": optional_object(args, "order"),
        "start": start if start is not None else 0,
    }


def search_payload(
    filter_: Mapping[str, Any],
    args: Mapping[str, Any],
    *,
    default_limit: int = DEFAULT_LIMIT,
    order: Mapping[str, str] | None = None,
    select: list[str] | None = None,
) -> dict[str, Any]:
    """Payload for search-style tools that read from offset 0 with a limit."""
    payload: dict[str, Any] = {"filter": dict(filter_)}
    if order:
        payload["order"] = dict(order)
    if select:
        payload["select"] = list(select)
    payload["start"] = 0
    payload["limit"] = optional_positive_number(args.get("limit"), default_limit)
    return payload
