"""Lead tools: CRUD, conversion, statuses and date-range queries."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bitrix_proxy.core.domain.errors import ValidationError
from bitrix_proxy.core.domain.models import BitrixRequest, ParameterSpec, ToolDefinition
from bitrix_proxy.infrastructure.builders.base import (
    DEFAULT_LATEST_LIMIT,
    LIMIT_PARAMETER,
    LIST_PARAMETERS,
    BaseRequestBuilder,
    Handler,
    list_payload,
    merge_fields,
    optional_boolean,
    optional_iso_date,
    optional_object,
    positive_id,
    required_fields,
    required_string,
    search_payload,
    yes_no,
)

_LEAD_ID = ParameterSpec("number", "Numeric Bitrix24 lead ID.")

LEAD_TOOLS = (
    ToolDefinition("bitrix_get_lead", "Get a Bitrix24 lead by its ID.", {"id": _LEAD_ID}),
    ToolDefinition(
        "bitrix_create_lead",
        "Create a Bitrix24 lead with a mandatory title and optional extra fields.",
        {
            "title": ParameterSpec("string", "Lead title."),
            "fields": ParameterSpec(
                "object", "Additional lead fields (NAME, PHONE, SOURCE_ID ...).", optional=True
            ),
        },
    ),
    ToolDefinition(
        "bitrix_update_lead",
        "Update an existing Bitrix24 lead.",
        {"id": _LEAD_ID, "fields": ParameterSpec("object", "Lead fields to update.")},
    ),
    ToolDefinition("bitrix_delete_lead", "Delete a Bitrix24 lead by its ID.", {"id": _LEAD_ID}),
    ToolDefinition(
        "bitrix_list_leads",
        "List leads with filtering, field selection, sorting and paging.",
        LIST_PARAMETERS,
    ),
    ToolDefinition(
        "bitrix_search_leads",
        "Search leads by filter (status, source, responsible, dates).",
        {
            "filter": ParameterSpec(
                "object", "Search filter (STATUS_ID, SOURCE_ID, ASSIGNED_BY_ID ...).", optional=True
            ),
            "limit": LIMIT_PARAMETER,
        },
    ),
    ToolDefinition(
        "bitrix_get_latest_leads",
        "Get the most recently created leads.",
        {"limit": ParameterSpec("number", "Number of leads (default: 10).", optional=True)},
    ),
    ToolDefinition(
        "bitrix_get_leads_from_date_range",
        "List leads created within a date range.",
        {
            "dateFrom": ParameterSpec("string", "Range start, ISO 8601 (e.g. 2024-01-15)."),
            "dateTo": ParameterSpec("string", "Range end, ISO 8601 (e.g. 2024-01-31)."),
            "limit": LIMIT_PARAMETER,
        },
    ),
    ToolDefinition("bitrix_get_lead_statuses", "List the available lead statuses."),
    ToolDefinition("bitrix_get_lead_fields", "Describe lead fields with their types."),
    ToolDefinition("bitrix_get_lead_userfields", "List custom (user) fields of leads."),
    ToolDefinition(
        "bitrix_convert_lead",
        "Convert a lead into a deal, contact and/or company.",
        {
            "id": _LEAD_ID,
            "createDeal": ParameterSpec("boolean", "Create a deal (default: false).", optional=True),
            "createContact": ParameterSpec(
                "boolean", "Create a contact (default: false).", optional=True
            ),
            "createCompany": ParameterSpec(
                "boolean", "Create a company (default: false).", optional=True
            ),
        },
    ),
)


class LeadRequestBuilder(BaseRequestBuilder):
    """Builds ``crm.lead.*`` requests."""

    builder_domain = "leads"
    builder_tools = LEAD_TOOLS

    def _handlers(self) -> dict[str, Handler]:
        return {
            "bitrix_get_lead": self._get,
            "bitrix_create_lead": self._create,
            "bitrix_update_lead": self._update,
            "bitrix_delete_lead": self._delete,
            "bitrix_list_leads": self._list,
            "bitrix_search_leads": self._search,
            "bitrix_get_latest_leads": self._latest,
            "bitrix_get_leads_from_date_range": self._date_range,
            "bitrix_get_lead_statuses": self._statuses,
            "bitrix_get_lead_fields": self._fields,
            "bitrix_get_lead_userfields": self._userfields,
            "bitrix_convert_lead": self._convert,
        }

    def _get(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.lead.get", {"id": positive_id(args)})

    def _create(self, args: Mapping[str, Any]) -> BitrixRequest:
        title = required_string(args, "title")
        fields = merge_fields(optional_object(args, "fields"), TITLE=title)
        return BitrixRequest("crm.lead.add", {"fields": fields})

    def _update(self, args: Mapping[str, Any]) -> BitrixRequest:
        lead_id = positive_id(args)
        return BitrixRequest(
            "crm.lead.update", {"id": lead_id, "fields": required_fields(args)}
        )

    def _delete(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.lead.delete", {"id": positive_id(args)})

    def _list(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.lead.list", list_payload(args))

    def _search(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest(
            "crm.lead.list", search_payload(optional_object(args, "filter"), args)
        )

    def _latest(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest(
            "crm.lead.list",
            search_payload(
                {},
                args,
                default_limit=DEFAULT_LATEST_LIMIT,
                order={"DATE_CREATE": "DESC"},
            ),
        )

    def _date_range(self, args: Mapping[str, Any]) -> BitrixRequest:
        date_from = optional_iso_date(args, "dateFrom")
        date_to = optional_iso_date(args, "dateTo")
        if date_from is None or date_to is None:
            raise ValidationError('Both "dateFrom" and "dateTo" are required')
        return BitrixRequest(
            "crm.lead.list",
            search_payload(
                {">=DATE_CREATE": date_from, "<=DATE_CREATE": date_to},
                args,
                order={"DATE_CREATE": "DESC"},
            ),
        )

    def _statuses(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.status.list", {"filter": {"ENTITY_ID": "STATUS"}})

    def _fields(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.lead.fields", {})

    def _userfields(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.lead.userfield.list", {})

    def _convert(self, args: Mapping[str, Any]) -> BitrixRequest:
        lead_id = positive_id(args)
        params = {
            "CREATE_DEAL": yes_no(optional_boolean(args, "createDeal")),
            "CREATE_CONTACT": yes_no(optional_boolean(args, "createContact")),
            "CREATE_COMPANY": yes_no(optional_boolean(args, "createCompany")),
        }
        return BitrixRequest("crm.lead.convert", {"id": lead_id, "params": params})
