"""Deal tools: CRUD, pipelines and stages, user fields and deal filters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bitrix_proxy.core.domain.errors import ValidationError
from bitrix_proxy.core.domain.models import BitrixRequest, ParameterSpec, ToolDefinition
from bitrix_proxy.core.domain.validation import ensure_number
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

_DEAL_ID = ParameterSpec("number", "Numeric Bitrix24 deal ID.")

DEAL_TOOLS = (
    ToolDefinition(
        "bitrix_get_deal",
        "Get a Bitrix24 deal by its ID.",
        {"id": _DEAL_ID},
    ),
    ToolDefinition(
        "bitrix_create_deal",
        "Create a Bitrix24 deal with a mandatory title and optional extra fields.",
        {
            "title": ParameterSpec("string", "Deal title."),
            "fields": ParameterSpec(
                "object",
                "Additional deal fields (e.g. COMMENTS, OPPORTUNITY, STAGE_ID).",
                optional=True,
            ),
        },
    ),
    ToolDefinition(
        "bitrix_update_deal",
        "Update an existing Bitrix24 deal.",
        {
            "id": _DEAL_ID,
            "fields": ParameterSpec("object", "Deal fields to update."),
        },
    ),
    ToolDefinition(
        "bitrix_delete_deal",
        "Delete a Bitrix24 deal by its ID.",
        {"id": _DEAL_ID},
    ),
    ToolDefinition(
        "bitrix_list_deals",
        "List deals with filtering, field selection, sorting and paging.",
        LIST_PARAMETERS,
    ),
    ToolDefinition(
        "bitrix_search_deals",
        "Search deals by filter (stage, responsible, dates, amount).",
        {
            "filter": ParameterSpec(
                "object",
                "Search filter (STAGE_ID, ASSIGNED_BY_ID, >=OPPORTUNITY ...).",
                optional=True,
            ),
            "limit": LIMIT_PARAMETER,
        },
    ),
    ToolDefinition(
        "bitrix_get_latest_deals",
        "Get the most recently created deals.",
        {"limit": ParameterSpec("number", "Number of deals (default: 10).", optional=True)},
    ),
    ToolDefinition(
        "bitrix_filter_deals_by_pipeline",
        "List deals of one sales pipeline (deal category).",
        {
            "categoryId": ParameterSpec("number", "Pipeline (category) ID."),
            "limit": LIMIT_PARAMETER,
        },
    ),
    ToolDefinition(
        "bitrix_filter_deals_by_budget",
        "List deals whose amount lies within a minimum and/or maximum budget.",
        {
            "minBudget": ParameterSpec("number", "Minimum deal amount.", optional=True),
            "maxBudget": ParameterSpec("number", "Maximum deal amount.", optional=True),
            "limit": LIMIT_PARAMETER,
        },
    ),
    ToolDefinition(
        "bitrix_filter_deals_by_status",
        "List deals in a given stage.",
        {
            "stageId": ParameterSpec("string", 'Stage ID (e.g. "NEW", "WON", "LOSE").'),
            "limit": LIMIT_PARAMETER,
        },
    ),
    ToolDefinition(
        "bitrix_get_deal_categories",
        "List sales pipelines (deal categories).",
    ),
    ToolDefinition(
        "bitrix_get_deal_stages",
        "List the stages of a sales pipeline.",
        {
            "categoryId": ParameterSpec(
                "number", "Pipeline (category) ID, 0 for the default pipeline.", optional=True
            )
        },
    ),
    ToolDefinition(
        "bitrix_get_deal_fields",
        "Describe deal fields with their types.",
    ),
    ToolDefinition(
        "bitrix_get_deal_userfields",
        "List custom (user) fields of deals.",
    ),
    ToolDefinition(
        "bitrix_add_deal_userfield",
        "Create a custom (user) field for deals.",
        {
            "fields": ParameterSpec(
                "object", "User field definition; FIELD_NAME and USER_TYPE_ID are required."
            )
        },
    ),
)


class DealRequestBuilder(BaseRequestBuilder):
    """Builds ``crm.deal.*`` and deal pipeline requests."""

    builder_domain = "deals"
    builder_tools = DEAL_TOOLS

    def _handlers(self) -> dict[str, Handler]:
        return {
            "bitrix_get_deal": self._get,
            "bitrix_create_deal": self._create,
            "bitrix_update_deal": self._update,
            "bitrix_delete_deal": self._delete,
            "bitrix_list_deals": self._list,
            "bitrix_search_deals": self._search,
            "bitrix_get_latest_deals": self._latest,
            "bitrix_filter_deals_by_pipeline": self._by_pipeline,
            "bitrix_filter_deals_by_budget": self._by_budget,
            "bitrix_filter_deals_by_status": self._by_status,
            "bitrix_get_deal_categories": self._categories,
            "bitrix_get_deal_stages": self._stages,
            "bitrix_get_deal_fields": self._fields,
            "bitrix_get_deal_userfields": self._userfields,
            "bitrix_add_deal_userfield": self._add_userfield,
        }

    def _get(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.deal.get", {"id": positive_id(args)})

    def _create(self, args: Mapping[str, Any]) -> BitrixRequest:
        title = required_string(args, "title")
        fields = merge_fields(optional_object(args, "fields"), TITLE=title)
        return BitrixRequest("crm.deal.add", {"fields": fields})

    def _update(self, args: Mapping[str, Any]) -> BitrixRequest:
        deal_id = positive_id(args)
        return BitrixRequest(
            "crm.deal.update", {"id": deal_id, "fields": required_fields(args)}
        )

    def _delete(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.deal.delete", {"id": positive_id(args)})

    def _list(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.deal.list", list_payload(args))

    def _search(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest(
            "crm.deal.list", search_payload(optional_object(args, "filter"), args)
        )

    def _latest(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest(
            "crm.deal.list",
            search_payload(
                {},
                args,
                default_limit=DEFAULT_LATEST_LIMIT,
                order={"DATE_CREATE": "DESC"},
            ),
        )

    def _by_pipeline(self, args: Mapping[str, Any]) -> BitrixRequest:
        category_id = positive_id(args, "categoryId")
        return BitrixRequest(
            "crm.deal.list", search_payload({"CATEGORY_ID": category_id}, args)
        )

    def _by_budget(self, args: Mapping[str, Any]) -> BitrixRequest:
        min_budget = ensure_number(
            args.get("minBudget"), 'Parameter "minBudget" must be a number when provided'
        )
        max_budget = ensure_number(
            args.get("maxBudget"), 'Parameter "maxBudget" must be a number when provided'
        )
        if min_budget is None and max_budget is None:
            raise ValidationError(
                'At least one of "minBudget" or "maxBudget" must be provided'
            )
        filter_: dict[str, Any] = {}
        if min_budget is not None:
            filter_[">=OPPORTUNITY"] = min_budget
        if max_budget is not None:
            filter_["<=OPPORTUNITY"] = max_budget
        return BitrixRequest("crm.deal.list", search_payload(filter_, args))

    def _by_status(self, args: Mapping[str, Any]) -> BitrixRequest:
        stage_id = required_string(args, "stageId")
        return BitrixRequest(
            "crm.deal.list", search_payload({"STAGE_ID": stage_id}, args)
        )

    def _categories(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.dealcategory.list", {})

    def _stages(self, args: Mapping[str, Any]) -> BitrixRequest:
        category_id = ensure_number(
            args.get("categoryId"), 'Parameter "categoryId" must be a number when provided'
        )
        return BitrixRequest(
            "crm.dealcategory.stage.list",
            {"id": category_id if category_id is not None else 0},
        )

    def _fields(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.deal.fields", {})

    def _userfields(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.deal.userfield.list", {})

    def _add_userfield(self, args: Mapping[str, Any]) -> BitrixRequest:
        fields = required_fields(args)
        if not fields.get("FIELD_NAME") or not fields.get("USER_TYPE_ID"):
            raise ValidationError(
                'Parameter "fields" must include FIELD_NAME and USER_TYPE_ID'
            )
        return BitrixRequest("crm.deal.userfield.add", {"fields": fields})
