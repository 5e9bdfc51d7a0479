"""User tools."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bitrix_proxy.core.domain.models import BitrixRequest, ParameterSpec, ToolDefinition
from bitrix_proxy.core.domain.validation import ensure_non_negative_number
from bitrix_proxy.infrastructure.builders.base import (
    LIMIT_PARAMETER,
    BaseRequestBuilder,
    Handler,
    optional_iso_date,
    optional_object,
    optional_string,
    positive_id,
    search_payload,
)

_FILTER = ParameterSpec("object", "User filter (ACTIVE, UF_DEPARTMENT ...).", optional=True)
_START = ParameterSpec("number", "Paging offset (default: 0).", optional=True)

USER_TOOLS = (
    ToolDefinition(
        "bitrix_list_users",
        "List portal users.",
        {"filter": _FILTER, "start": _START},
    ),
    ToolDefinition(
        "bitrix_get_user",
        "Get a user by ID.",
        {"id": ParameterSpec("number", "User ID.")},
    ),
    ToolDefinition("bitrix_get_current_user", "Get the user the webhook acts as."),
    ToolDefinition(
        "bitrix_search_users",
        "Search users by name, position or email.",
        {
            "searchString": ParameterSpec("string", "Free text search string.", optional=True),
            "filter": _FILTER,
            "start": _START,
        },
    ),
    ToolDefinition(
        "bitrix_get_user_activity",
        "List CRM activities a user is responsible for, optionally within a date range.",
        {
            "userId": ParameterSpec("number", "User ID."),
            "dateFrom": ParameterSpec("string", "Range start, ISO 8601.", optional=True),
            "dateTo": ParameterSpec("string", "Range end, ISO 8601.", optional=True),
            "limit": LIMIT_PARAMETER,
        },
    ),
)


def _start(args: Mapping[str, Any]) -> int | float:
    start = ensure_non_negative_number(
        args.get("start"), 'Parameter "start" must be a non-negative number when provided'
    )
    return start if start is not None else 0


class UserRequestBuilder(BaseRequestBuilder):
    """Builds ``user.*`` requests and per-user activity queries."""

    builder_domain = "users"
    builder_tools = USER_TOOLS

    def _handlers(self) -> dict[str, Handler]:
        return {
            "bitrix_list_users": self._list,
            "bitrix_get_user": self._get,
            "bitrix_get_current_user": self._current,
            "bitrix_search_users": self._search,
            "bitrix_get_user_activity": self._activity,
        }

    def _list(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest(
            "user.get", {"filter": optional_object(args, "filter"), "start": _start(args)}
        )

    def _get(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("user.get", {"ID": positive_id(args)})

    def _current(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("user.current", {})

    def _search(self, args: Mapping[str, Any]) -> BitrixRequest:
        search_string = optional_string(args, "searchString")
        payload: dict[str, Any] = {
            "filter": optional_object(args, "filter"),
            "start": _start(args),
        }
        if search_string is not None:
            payload["FIND"] = search_string
        return BitrixRequest("user.search", payload)

    def _activity(self, args: Mapping[str, Any]) -> BitrixRequest:
        user_id = positive_id(args, "userId")
        date_from = optional_iso_date(args, "dateFrom")
        date_to = optional_iso_date(args, "dateTo")
        filter_: dict[str, Any] = {"RESPONSIBLE_ID": user_id}
        if date_from is not None:
            filter_[">=START_TIME"] = date_from
        if date_to is not None:
            filter_["<=START_TIME"] = date_to
        return BitrixRequest("crm.activity.list", search_payload(filter_, args))
