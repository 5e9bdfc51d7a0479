"""Company tools."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bitrix_proxy.core.domain.models import BitrixRequest, ParameterSpec, ToolDefinition
from bitrix_proxy.infrastructure.builders.base import (
    DEFAULT_LATEST_LIMIT,
    LIMIT_PARAMETER,
    LIST_PARAMETERS,
    BaseRequestBuilder,
    Handler,
    list_payload,
    merge_fields,
    optional_object,
    positive_id,
    required_fields,
    required_string,
    search_payload,
)

_COMPANY_ID = ParameterSpec("number", "Numeric Bitrix24 company ID.")

COMPANY_TOOLS = (
    ToolDefinition("bitrix_get_company", "Get a Bitrix24 company by its ID.", {"id": _COMPANY_ID}),
    ToolDefinition(
        "bitrix_create_company",
        "Create a Bitrix24 company with a mandatory title and optional extra fields.",
        {
            "title": ParameterSpec("string", "Company name."),
            "fields": ParameterSpec(
                "object", "Additional company fields (INDUSTRY, PHONE ...).", optional=True
            ),
        },
    ),
    ToolDefinition(
        "bitrix_update_company",
        "Update an existing Bitrix24 company.",
        {"id": _COMPANY_ID, "fields": ParameterSpec("object", "Company fields to update.")},
    ),
    ToolDefinition(
        "bitrix_delete_company", "Delete a Bitrix24 company by its ID.", {"id": _COMPANY_ID}
    ),
    ToolDefinition(
        "bitrix_list_companies",
        "List companies with filtering, field selection, sorting and paging.",
        LIST_PARAMETERS,
    ),
    ToolDefinition(
        "bitrix_search_companies",
        "Search companies by name (partial match).",
        {
            "query": ParameterSpec("string", "Text matched against the company name."),
            "limit": LIMIT_PARAMETER,
        },
    ),
    ToolDefinition(
        "bitrix_get_latest_companies",
        "Get the most recently created companies.",
        {"limit": ParameterSpec("number", "Number of companies (default: 10).", optional=True)},
    ),
    ToolDefinition("bitrix_get_company_fields", "Describe company fields with their types."),
)


class CompanyRequestBuilder(BaseRequestBuilder):
    """Builds ``crm.company.*`` requests."""

    builder_domain = "companies"
    builder_tools = COMPANY_TOOLS

    def _handlers(self) -> dict[str, Handler]:
        return {
            "bitrix_get_company": self._get,
            "bitrix_create_company": self._create,
            "bitrix_update_company": self._update,
            "bitrix_delete_company": self._delete,
            "bitrix_list_companies": self._list,
            "bitrix_search_companies": self._search,
            "bitrix_get_latest_companies": self._latest,
            "bitrix_get_company_fields": self._fields,
        }

    def _get(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.company.get", {"id": positive_id(args)})

    def _create(self, args: Mapping[str, Any]) -> BitrixRequest:
        title = required_string(args, "title")
        fields = merge_fields(optional_object(args, "fields"), TITLE=title)
        return BitrixRequest("crm.company.add", {"fields": fields})

    def _update(self, args: Mapping[str, Any]) -> BitrixRequest:
        company_id = positive_id(args)
        return BitrixRequest(
            "crm.company.update", {"id": company_id, "fields": required_fields(args)}
        )

    def _delete(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.company.delete", {"id": positive_id(args)})

    def _list(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.company.list", list_payload(args))

    def _search(self, args: Mapping[str, Any]) -> BitrixRequest:
        query = required_string(args, "query")
        return BitrixRequest("crm.company.list", search_payload({"%TITLE": query}, args))

    def _latest(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest(
            "crm.company.list",
            search_payload(
                {},
                args,
                default_limit=DEFAULT_LATEST_LIMIT,
                order={"DATE_CREATE": "DESC"},
            ),
        )

    def _fields(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.company.fields", {})
