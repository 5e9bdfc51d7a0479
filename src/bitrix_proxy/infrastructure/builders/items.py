"""Smart-process item tools (``crm.item.*`` and ``crm.type.*``).

Every item tool is scoped by ``entityTypeId``, the numeric ID of the smart
process (or of a classic CRM entity, see ``ENTITY_TYPE_IDS``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bitrix_proxy.core.domain.models import BitrixRequest, ParameterSpec, ToolDefinition
from bitrix_proxy.infrastructure.builders.base import (
    LIST_PARAMETERS,
    BaseRequestBuilder,
    Handler,
    list_payload,
    positive_id,
    required_fields,
)

_ENTITY_TYPE_ID = ParameterSpec("number", "Smart process entity type ID.")
_ITEM_ID = ParameterSpec("number", "Item ID.")

ITEM_TOOLS = (
    ToolDefinition(
        "bitrix_item_list",
        "List items of a smart process with filtering, field selection, sorting and paging.",
        {"entityTypeId": _ENTITY_TYPE_ID, **LIST_PARAMETERS},
    ),
    ToolDefinition(
        "bitrix_item_get",
        "Get a smart process item by its ID.",
        {"entityTypeId": _ENTITY_TYPE_ID, "id": _ITEM_ID},
    ),
    ToolDefinition(
        "bitrix_item_add",
        "Create a smart process item.",
        {
            "entityTypeId": _ENTITY_TYPE_ID,
            "fields": ParameterSpec("object", "Item fields (title, stageId, assignedById ...)."),
        },
    ),
    ToolDefinition(
        "bitrix_item_update",
        "Update a smart process item.",
        {
            "entityTypeId": _ENTITY_TYPE_ID,
            "id": _ITEM_ID,
            "fields": ParameterSpec("object", "Item fields to update."),
        },
    ),
    ToolDefinition(
        "bitrix_item_delete",
        "Delete a smart process item.",
        {"entityTypeId": _ENTITY_TYPE_ID, "id": _ITEM_ID},
    ),
    ToolDefinition(
        "bitrix_item_fields",
        "Describe the fields of a smart process.",
        {"entityTypeId": _ENTITY_TYPE_ID},
    ),
    ToolDefinition("bitrix_item_type_list", "List the smart processes of the portal."),
    ToolDefinition(
        "bitrix_item_type_get",
        "Get a smart process definition by its ID.",
        {"id": ParameterSpec("number", "Smart process (type) ID.")},
    ),
)


class ItemRequestBuilder(BaseRequestBuilder):
    """Builds smart-process requests."""

    builder_domain = "items"
    builder_tools = ITEM_TOOLS

    def _handlers(self) -> dict[str, Handler]:
        return {
            "bitrix_item_list": self._list,
            "bitrix_item_get": self._get,
            "bitrix_item_add": self._create,
            "bitrix_item_update": self._update,
            "bitrix_item_delete": self._delete,
            "bitrix_item_fields": self._fields,
            "bitrix_item_type_list": self._list_types,
            "bitrix_item_type_get": self._get_type,
        }

    def _list(self, args: Mapping[str, Any]) -> BitrixRequest:
        entity_type_id = positive_id(args, "entityTypeId")
        return BitrixRequest(
            "crm.item.list", {"entityTypeId": entity_type_id, **list_payload(args)}
        )

    def _get(self, args: Mapping[str, Any]) -> BitrixRequest:
        entity_type_id = positive_id(args, "entityTypeId")
        return BitrixRequest(
            "crm.item.get", {"entityTypeId": entity_type_id, "id": positive_id(args)}
        )

    def _create(self, args: Mapping[str, Any]) -> BitrixRequest:
        entity_type_id = positive_id(args, "entityTypeId")
        return BitrixRequest(
            "crm.item.add",
            {"entityTypeId": entity_type_id, "fields": required_fields(args)},
        )

    def _update(self, args: Mapping[str, Any]) -> BitrixRequest:
        entity_type_id = positive_id(args, "entityTypeId")
        item_id = positive_id(args)
        return BitrixRequest(
            "crm.item.update",
            {"entityTypeId": entity_type_id, "id": item_id, "fields": required_fields(args)},
        )

    def _delete(self, args: Mapping[str, Any]) -> BitrixRequest:
        entity_type_id = positive_id(args, "entityTypeId")
        return BitrixRequest(
            "crm.item.delete", {"entityTypeId": entity_type_id, "id": positive_id(args)}
        )

    def _fields(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest(
            "crm.item.fields", {"entityTypeId": positive_id(args, "entityTypeId")}
        )

    def _list_types(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.type.list", {})

    def _get_type(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.type.get", {"id": positive_id(args)})
