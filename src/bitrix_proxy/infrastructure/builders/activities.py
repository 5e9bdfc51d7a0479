"""Activity tools (calls, meetings, emails attached to CRM entities)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bitrix_proxy.core.domain.models import BitrixRequest, ParameterSpec, ToolDefinition
from bitrix_proxy.core.domain.validation import ENTITY_TYPE_IDS, ENTITY_TYPES, ensure_enum
from bitrix_proxy.infrastructure.builders.base import (
    LIST_PARAMETERS,
    BaseRequestBuilder,
    Handler,
    list_payload,
    merge_fields,
    optional_iso_date,
    optional_object,
    optional_positive_id,
    optional_string,
    positive_id,
    required_fields,
    required_string,
)

_ACTIVITY_ID = ParameterSpec("number", "Numeric Bitrix24 activity ID.")

ACTIVITY_TOOLS = (
    ToolDefinition(
        "bitrix_create_activity",
        "Create an activity (call, meeting, email, task) bound to a CRM entity.",
        {
            "ownerType": ParameterSpec(
                "string", "Type of the owning entity.", enum=ENTITY_TYPES
            ),
            "ownerId": ParameterSpec("number", "ID of the owning entity."),
            "typeId": ParameterSpec(
                "number", "Activity type: 1 meeting, 2 call, 3 task, 4 email."
            ),
            "subject": ParameterSpec("string", "Activity subject."),
            "description": ParameterSpec("string", "Activity description.", optional=True),
            "responsibleId": ParameterSpec("number", "Responsible user ID.", optional=True),
            "startTime": ParameterSpec("string", "Start time, ISO 8601.", optional=True),
            "endTime": ParameterSpec("string", "End time, ISO 8601.", optional=True),
            "fields": ParameterSpec("object", "Additional activity fields.", optional=True),
        },
    ),
    ToolDefinition("bitrix_get_activity", "Get an activity by its ID.", {"id": _ACTIVITY_ID}),
    ToolDefinition(
        "bitrix_list_activities",
        "List activities with filtering, field selection, sorting and paging.",
        LIST_PARAMETERS,
    ),
    ToolDefinition(
        "bitrix_update_activity",
        "Update an existing activity.",
        {"id": _ACTIVITY_ID, "fields": ParameterSpec("object", "Activity fields to update.")},
    ),
    ToolDefinition(
        "bitrix_complete_activity", "Mark an activity as completed.", {"id": _ACTIVITY_ID}
    ),
    ToolDefinition("bitrix_delete_activity", "Delete an activity by its ID.", {"id": _ACTIVITY_ID}),
    ToolDefinition("bitrix_get_activity_fields", "Describe activity fields with their types."),
)


class ActivityRequestBuilder(BaseRequestBuilder):
    """Builds ``crm.activity.*`` requests."""

    builder_domain = "activities"
    builder_tools = ACTIVITY_TOOLS

    def _handlers(self) -> dict[str, Handler]:
        return {
            "bitrix_create_activity": self._create,
            "bitrix_get_activity": self._get,
            "bitrix_list_activities": self._list,
            "bitrix_update_activity": self._update,
            "bitrix_complete_activity": self._complete,
            "bitrix_delete_activity": self._delete,
            "bitrix_get_activity_fields": self._fields,
        }

    def _create(self, args: Mapping[str, Any]) -> BitrixRequest:
        owner_type = ensure_enum(
            args.get("ownerType"),
            ENTITY_TYPES,
            f'Parameter "ownerType" must be one of: {", ".join(ENTITY_TYPES)}',
        )
        owner_id = positive_id(args, "ownerId")
        type_id = positive_id(args, "typeId")
        subject = required_string(args, "subject")
        fields = merge_fields(
            optional_object(args, "fields"),
            OWNER_TYPE_ID=ENTITY_TYPE_IDS[owner_type],
            OWNER_ID=owner_id,
            TYPE_ID=type_id,
            SUBJECT=subject,
            DESCRIPTION=optional_string(args, "description"),
            RESPONSIBLE_ID=optional_positive_id(args, "responsibleId"),
            START_TIME=optional_iso_date(args, "startTime"),
            END_TIME=optional_iso_date(args, "endTime"),
        )
        return BitrixRequest("crm.activity.add", {"fields": fields})

    def _get(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.activity.get", {"id": positive_id(args)})

    def _list(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.activity.list", list_payload(args))

    def _update(self, args: Mapping[str, Any]) -> BitrixRequest:
        activity_id = positive_id(args)
        return BitrixRequest(
            "crm.activity.update", {"id": activity_id, "fields": required_fields(args)}
        )

    def _complete(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest(
            "crm.activity.update", {"id": positive_id(args), "fields": {"COMPLETED": "Y"}}
        )

    def _delete(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.activity.delete", {"id": positive_id(args)})

    def _fields(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.activity.fields", {})
