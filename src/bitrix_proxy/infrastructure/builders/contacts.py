"""Contact tools: CRUD, lookup by phone or email and duplicate search."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bitrix_proxy.core.domain.errors import ValidationError
from bitrix_proxy.core.domain.models import BitrixRequest, ParameterSpec, ToolDefinition
from bitrix_proxy.infrastructure.builders.base import (
    LIMIT_PARAMETER,
    LIST_PARAMETERS,
    BaseRequestBuilder,
    Handler,
    list_payload,
    merge_fields,
    optional_object,
    optional_string,
    positive_id,
    required_fields,
    required_string,
    search_payload,
)

FIND_CONTACT_SELECT = ["ID", "NAME", "LAST_NAME", "PHONE", "EMAIL"]

_CONTACT_ID = ParameterSpec("number", "Numeric Bitrix24 contact ID.")


def _communication(value: str | None) -> list[dict[str, str]] | None:
    if value is None:
        return None
    return [{"VALUE": value, "VALUE_TYPE": "WORK"}]


CONTACT_TOOLS = (
    ToolDefinition("bitrix_get_contact", "Get a Bitrix24 contact by its ID.", {"id": _CONTACT_ID}),
    ToolDefinition(
        "bitrix_create_contact",
        "Create a Bitrix24 contact with a first name and optional last name, phone and email.",
        {
            "firstName": ParameterSpec("string", "Contact first name."),
            "lastName": ParameterSpec("string", "Contact last name.", optional=True),
            "phone": ParameterSpec("string", "Work phone number.", optional=True),
            "email": ParameterSpec("string", "Work email address.", optional=True),
            "fields": ParameterSpec("object", "Additional contact fields.", optional=True),
        },
    ),
    ToolDefinition(
        "bitrix_update_contact",
        "Update an existing Bitrix24 contact.",
        {"id": _CONTACT_ID, "fields": ParameterSpec("object", "Contact fields to update.")},
    ),
    ToolDefinition(
        "bitrix_delete_contact", "Delete a Bitrix24 contact by its ID.", {"id": _CONTACT_ID}
    ),
    ToolDefinition(
        "bitrix_list_contacts",
        "List contacts with filtering, field selection, sorting and paging.",
        LIST_PARAMETERS,
    ),
    ToolDefinition(
        "bitrix_find_contact",
        "Find contacts by phone number and/or email address.",
        {
            "phone": ParameterSpec("string", "Phone number to match.", optional=True),
            "email": ParameterSpec("string", "Email address to match.", optional=True),
        },
    ),
    ToolDefinition(
        "bitrix_search_contacts",
        "Search contacts by name (partial match), phone or email.",
        {
            "query": ParameterSpec("string", "Free text matched against the name.", optional=True),
            "name": ParameterSpec("string", "Name (partial match).", optional=True),
            "phone": ParameterSpec("string", "Phone number.", optional=True),
            "email": ParameterSpec("string", "Email address.", optional=True),
            "limit": LIMIT_PARAMETER,
        },
    ),
    ToolDefinition(
        "bitrix_find_duplicates_by_phone",
        "Find contacts that share a phone number.",
        {"phone": ParameterSpec("string", "Phone number to look up.")},
    ),
    ToolDefinition("bitrix_get_contact_fields", "Describe contact fields with their types."),
)


class ContactRequestBuilder(BaseRequestBuilder):
    """Builds ``crm.contact.*`` and contact duplicate lookups."""

    builder_domain = "contacts"
    builder_tools = CONTACT_TOOLS

    def _handlers(self) -> dict[str, Handler]:
        return {
            "bitrix_get_contact": self._get,
            "bitrix_create_contact": self._create,
            "bitrix_update_contact": self._update,
            "bitrix_delete_contact": self._delete,
            "bitrix_list_contacts": self._list,
            "bitrix_find_contact": self._find,
            "bitrix_search_contacts": self._search,
            "bitrix_find_duplicates_by_phone": self._duplicates_by_phone,
            "bitrix_get_contact_fields": self._fields,
        }

    def _get(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.contact.get", {"id": positive_id(args)})

    def _create(self, args: Mapping[str, Any]) -> BitrixRequest:
        first_name = required_string(args, "firstName")
        last_name = optional_string(args, "lastName")
        phone = optional_string(args, "phone")
        email = optional_string(args, "email")
        fields = merge_fields(
            optional_object(args, "fields"),
            NAME=first_name,
            LAST_NAME=last_name,
            PHONE=_communication(phone),
            EMAIL=_communication(email),
        )
        return BitrixRequest("crm.contact.add", {"fields": fields})

    def _update(self, args: Mapping[str, Any]) -> BitrixRequest:
        contact_id = positive_id(args)
        return BitrixRequest(
            "crm.contact.update", {"id": contact_id, "fields": required_fields(args)}
        )

    def _delete(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.contact.delete", {"id": positive_id(args)})

    def _list(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.contact.list", list_payload(args))

    def _find(self, args: Mapping[str, Any]) -> BitrixRequest:
        phone = optional_string(args, "phone")
        email = optional_string(args, "email")
        if phone is None and email is None:
            raise ValidationError('Either "phone" or "email" must be provided')
        filter_: dict[str, Any] = {}
        if phone is not None:
            filter_["PHONE"] = phone
        if email is not None:
            filter_["EMAIL"] = email
        return BitrixRequest(
            "crm.contact.list",
            {"filter": filter_, "select": list(FIND_CONTACT_SELECT)},
        )

    def _search(self, args: Mapping[str, Any]) -> BitrixRequest:
        query = optional_string(args, "query")
        name = optional_string(args, "name")
        phone = optional_string(args, "phone")
        email = optional_string(args, "email")
        if query is None and name is None and phone is None and email is None:
            raise ValidationError(
                "At least one search parameter (query, name, phone, or email) must be provided"
            )
        filter_: dict[str, Any] = {}
        # an explicit name takes precedence over the free-text query
        if name is not None or query is not None:
            filter_["%NAME"] = name if name is not None else query
        if phone is not None:
            filter_["PHONE"] = phone
        if email is not None:
            filter_["EMAIL"] = email
        return BitrixRequest("crm.contact.list", search_payload(filter_, args))

    def _duplicates_by_phone(self, args: Mapping[str, Any]) -> BitrixRequest:
        phone = required_string(args, "phone")
        return BitrixRequest(
            "crm.duplicate.findbycomm",
            {"type": "PHONE", "values": [phone], "entity_type": "CONTACT"},
        )

    def _fields(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("crm.contact.fields", {})
