"""Utility tools: timeline, batch, telephony, messaging, files and diagnostics.

Several operations are reachable under two names (e.g. ``bitrix_add_comment``
and ``bitrix_timeline_comment_add``); both spellings are part of the public
catalogue and build the same request.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bitrix_proxy.core.domain.errors import ValidationError
from bitrix_proxy.core.domain.models import BitrixRequest, ParameterSpec, ToolDefinition
from bitrix_proxy.core.domain.validation import (
    ENTITY_TYPES,
    ensure_enum,
    ensure_non_negative_number,
)
from bitrix_proxy.infrastructure.builders.base import (
    LIMIT_PARAMETER,
    BaseRequestBuilder,
    Handler,
    optional_boolean,
    optional_iso_date,
    optional_object,
    optional_positive_id,
    optional_string,
    positive_id,
    required_string,
    search_payload,
)

MAX_BATCH_COMMANDS = 50

CRM_SUMMARY_COMMANDS = {
    "deals": "crm.deal.list?start=0&limit=1",
    "leads": "crm.lead.list?start=0&limit=1",
    "contacts": "crm.contact.list?start=0&limit=1",
    "companies": "crm.company.list?start=0&limit=1",
}

_ENTITY_TYPE = ParameterSpec("string", "CRM entity type.", enum=ENTITY_TYPES)
_ENTITY_ID = ParameterSpec("number", "CRM entity ID.")
_COMMENT_PARAMETERS = {
    "entityType": _ENTITY_TYPE,
    "entityId": _ENTITY_ID,
    "comment": ParameterSpec("string", "Comment text."),
}
_STATUS_ENTITY_ID = ParameterSpec(
    "string", 'Reference type, e.g. "STATUS", "SOURCE", "DEAL_STAGE".', optional=True
)

MISC_TOOLS = (
    ToolDefinition(
        "bitrix_add_comment",
        "Add a comment to the timeline of a lead, deal, contact or company.",
        _COMMENT_PARAMETERS,
    ),
    ToolDefinition(
        "bitrix_timeline_comment_add",
        "Add a comment to the timeline of a CRM entity.",
        _COMMENT_PARAMETERS,
    ),
    ToolDefinition(
        "bitrix_add_timeline_comment",
        "Add a timeline comment to a CRM entity, optionally on behalf of another author.",
        {
            **_COMMENT_PARAMETERS,
            "authorId": ParameterSpec("number", "Author user ID.", optional=True),
        },
    ),
    ToolDefinition(
        "bitrix_get_timeline",
        "List timeline comments of a CRM entity.",
        {"entityType": _ENTITY_TYPE, "entityId": _ENTITY_ID, "limit": LIMIT_PARAMETER},
    ),
    ToolDefinition(
        "bitrix_batch",
        f"Execute up to {MAX_BATCH_COMMANDS} REST commands in one request.",
        {
            "cmd": ParameterSpec(
                "object",
                'Commands keyed by name, e.g. {"deal": "crm.deal.get?id=1"}.',
            ),
            "halt": ParameterSpec(
                "boolean", "Stop at the first failing command (default: false).", optional=True
            ),
        },
    ),
    ToolDefinition(
        "bitrix_telephony_call_list",
        "List telephony call records.",
        {
            "filter": ParameterSpec(
                "object", "Call filter (PORTAL_USER_ID, CALL_TYPE ...).", optional=True
            ),
            "sort": ParameterSpec("string", 'Sort field (e.g. "CALL_START_DATE").', optional=True),
            "order": ParameterSpec("string", 'Sort direction, "ASC" or "DESC".', optional=True),
            "start": ParameterSpec("number", "Paging offset (default: 0).", optional=True),
        },
    ),
    ToolDefinition(
        "bitrix_get_call_statistics",
        "Get telephony call records within a date range.",
        {
            "dateFrom": ParameterSpec("string", "Range start, ISO 8601."),
            "dateTo": ParameterSpec("string", "Range end, ISO 8601."),
        },
    ),
    ToolDefinition(
        "bitrix_im_message_add",
        "Send a chat message to a user or chat.",
        {
            "dialogId": ParameterSpec("string", 'Dialog ID: user ID or "chat<ID>".'),
            "message": ParameterSpec("string", "Message text."),
        },
    ),
    ToolDefinition(
        "bitrix_crm_status_list",
        "List CRM reference values; without entityId the request carries no filter.",
        {"entityId": _STATUS_ENTITY_ID},
    ),
    ToolDefinition(
        "bitrix_get_status_list",
        "List CRM reference values (statuses, sources, stages ...).",
        {"entityId": _STATUS_ENTITY_ID},
    ),
    ToolDefinition(
        "bitrix_get_file",
        "Get file information from Bitrix24 Drive.",
        {"id": ParameterSpec("number", "File ID.")},
    ),
    ToolDefinition(
        "bitrix_upload_file",
        "Upload a Base64-encoded file into a Drive folder.",
        {
            "folderId": ParameterSpec("number", "Target folder ID."),
            "fileName": ParameterSpec("string", "File name."),
            "fileContent": ParameterSpec("string", "File content, Base64-encoded."),
        },
    ),
    ToolDefinition("bitrix_webhook_status", "Get information about the webhook application."),
    ToolDefinition("bitrix_validate_webhook", "Check that the webhook URL is valid."),
    ToolDefinition(
        "bitrix_diagnose_permissions", "List the permission scopes granted to the webhook."
    ),
    ToolDefinition("bitrix_check_crm_settings", "Get CRM settings, including the lead mode."),
    ToolDefinition(
        "bitrix_get_crm_summary",
        "Get record counts for deals, leads, contacts and companies.",
    ),
)


def _entity_type(args: Mapping[str, Any]) -> str:
    return ensure_enum(
        args.get("entityType"),
        ENTITY_TYPES,
        f'Parameter "entityType" must be one of: {", ".join(ENTITY_TYPES)}',
    )


def _comment_fields(args: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "ENTITY_ID": positive_id(args, "entityId"),
        "ENTITY_TYPE": _entity_type(args),
        "COMMENT": required_string(args, "comment"),
    }


class MiscRequestBuilder(BaseRequestBuilder):
    """Builds requests that do not belong to a single CRM entity family."""

    builder_domain = "misc"
    builder_tools = MISC_TOOLS

    def _handlers(self) -> dict[str, Handler]:
        return {
            "bitrix_add_comment": self._add_comment,
            "bitrix_timeline_comment_add": self._add_comment,
            "bitrix_add_timeline_comment": self._add_timeline_comment,
            "bitrix_get_timeline": self._timeline_comments,
            "bitrix_batch": self._batch,
            "bitrix_telephony_call_list": self._list_calls,
            "bitrix_get_call_statistics": self._call_statistics,
            "bitrix_im_message_add": self._send_message,
            "bitrix_crm_status_list": self._crm_status_list,
            "bitrix_get_status_list": self._status_list,
            "bitrix_get_file": self._get_file,
            "bitrix_upload_file": self._upload_file,
            "bitrix_webhook_status": self._constant("app.info"),
            "bitrix_validate_webhook": self._constant("user.current"),
            "bitrix_diagnose_permissions": self._constant("scope"),
            "bitrix_check_crm_settings": self._constant("crm.settings.mode.get"),
            "bitrix_get_crm_summary": self._crm_summary,
        }

    @staticmethod
    def _constant(method: str) -> Handler:
        def build(args: Mapping[str, Any]) -> BitrixRequest:
            return BitrixRequest(method, {})

        return build

    def _add_comment(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.timeline.comment.add", {"fields": _comment_fields(args)})

    def _add_timeline_comment(self, args: Mapping[str, Any]) -> BitrixRequest:
        fields = _comment_fields(args)
        author_id = optional_positive_id(args, "authorId")
        if author_id is not None:
            fields["AUTHOR_ID"] = author_id
        return BitrixRequest("crm.timeline.comment.add", {"fields": fields})

    def _timeline_comments(self, args: Mapping[str, Any]) -> BitrixRequest:
        entity_type = _entity_type(args)
        entity_id = positive_id(args, "entityId")
        return BitrixRequest(
            "crm.timeline.comment.list",
            search_payload({"ENTITY_ID": entity_id, "ENTITY_TYPE": entity_type}, args),
        )

    def _batch(self, args: Mapping[str, Any]) -> BitrixRequest:
        cmd = optional_object(args, "cmd")
        if not cmd:
            raise ValidationError(
                'Parameter "cmd" is required and must contain at least one command'
            )
        if len(cmd) > MAX_BATCH_COMMANDS:
            raise ValidationError(
                f'Parameter "cmd" must not contain more than {MAX_BATCH_COMMANDS} commands'
            )
        for name, command in cmd.items():
            if not isinstance(command, str) or not command.strip():
                raise ValidationError(f'Command "{name}" must be a non-empty string')
        halt = optional_boolean(args, "halt")
        return BitrixRequest("batch", {"cmd": cmd, "halt": 1 if halt else 0})

    def _list_calls(self, args: Mapping[str, Any]) -> BitrixRequest:
        start = ensure_non_negative_number(
            args.get("start"), 'Parameter "start" must be a non-negative number when provided'
        )
        payload: dict[str, Any] = {
            "FILTER": optional_object(args, "filter"),
            "START": start if start is not None else 0,
        }
        sort = optional_string(args, "sort")
        order = optional_string(args, "order")
        if sort is not None:
            payload["SORT"] = sort
        if order is not None:
            payload["ORDER"] = order
        return BitrixRequest("voximplant.statistic.get", payload)

    def _call_statistics(self, args: Mapping[str, Any]) -> BitrixRequest:
        date_from = optional_iso_date(args, "dateFrom")
        date_to = optional_iso_date(args, "dateTo")
        if date_from is None or date_to is None:
            raise ValidationError('Both "dateFrom" and "dateTo" are required')
        return BitrixRequest(
            "voximplant.statistic.get",
            {"FILTER": {">=CALL_START_DATE": date_from, "<=CALL_START_DATE": date_to}},
        )

    def _send_message(self, args: Mapping[str, Any]) -> BitrixRequest:
        dialog_id = required_string(args, "dialogId")
        message = required_string(args, "message")
        return BitrixRequest("im.message.add", {"DIALOG_ID": dialog_id, "MESSAGE": message})

    def _status_list(self, args: Mapping[str, Any]) -> BitrixRequest:
        entity_id = optional_string(args, "entityId")
        filter_ = {"ENTITY_ID": entity_id} if entity_id is not None else {}
        return BitrixRequest("crm.status.list", {"filter": filter_})

    def _crm_status_list(self, args: Mapping[str, Any]) -> BitrixRequest:
        entity_id = optional_string(args, "entityId")
        if entity_id is None:
            return BitrixRequest("crm.status.list", {})
        return BitrixRequest("crm.status.list", {"filter": {"ENTITY_ID": entity_id}})

    def _get_file(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("disk.file.get", {"id": positive_id(args)})

    def _upload_file(self, args: Mapping[str, Any]) -> BitrixRequest:
        folder_id = positive_id(args, "folderId")
        file_name = required_string(args, "fileName")
        file_content = required_string(args, "fileContent")
        return BitrixRequest(
            "disk.folder.uploadfile",
            {
                "id": folder_id,
                "data": {"NAME": file_name},
                "fileContent": [file_name, file_content],
            },
        )

    def _crm_summary(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("batch", {"halt": 0, "cmd": dict(CRM_SUMMARY_COMMANDS)})
