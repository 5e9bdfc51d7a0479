"""Tests for contact and company request building."""

import pytest

from bitrix_proxy.core.domain.errors import ValidationError
from bitrix_proxy.core.domain.models import BitrixRequest
from bitrix_proxy.infrastructure.builders.companies import CompanyRequestBuilder
from bitrix_proxy.infrastructure.builders.contacts import ContactRequestBuilder


@pytest.fixture
def contacts() -> ContactRequestBuilder:
    return ContactRequestBuilder()


class TestContacts:
    def test_create_contact_builds_communications(self, contacts) -> None:
        request = contacts.try_build(
            "bitrix_create_contact",
            {
                "firstName": "Ivan",
                "lastName": "Petrov",
                "phone": "+79990000000",
                "email": "ivan@example.com",
                "fields": {"NAME": "ignored", "POST": "CEO"},
            },
        )
        assert request == BitrixRequest(
            "crm.contact.add",
            {
                "fields": {
                    "NAME": "Ivan",
                    "POST": "CEO",
                    "LAST_NAME": "Petrov",
                    "PHONE": [{"VALUE": "+79990000000", "VALUE_TYPE": "WORK"}],
                    "EMAIL": [{"VALUE": "ivan@example.com", "VALUE_TYPE": "WORK"}],
                }
            },
        )

    def test_create_contact_minimal(self, contacts) -> None:
        request = contacts.try_build("bitrix_create_contact", {"firstName": "Ivan"})
        assert request.payload == {"fields": {"NAME": "Ivan"}}

    def test_find_contact_by_phone(self, contacts) -> None:
        request = contacts.try_build("bitrix_find_contact", {"phone": "+7999"})
        assert request == BitrixRequest(
            "crm.contact.list",
            {
                "filter": {"PHONE": "+7999"},
                "select": ["ID", "NAME", "LAST_NAME", "PHONE", "EMAIL"],
            },
        )

    def test_find_contact_requires_phone_or_email(self, contacts) -> None:
        with pytest.raises(ValidationError) as exc_info:
            contacts.try_build("bitrix_find_contact", {})
        assert exc_info.value.message == 'Either "phone" or "email" must be provided'

    def test_search_name_beats_query(self, contacts) -> None:
        request = contacts.try_build(
            "bitrix_search_contacts", {"query": "Iv", "name": "Ivan", "limit": 3}
        )
        assert request.payload == {"filter": {"%NAME": "Ivan"}, "start": 0, "limit": 3}

    def test_search_requires_a_criterion(self, contacts) -> None:
        with pytest.raises(ValidationError):
            contacts.try_build("bitrix_search_contacts", {"limit": 3})

    def test_duplicates_by_phone(self, contacts) -> None:
        request = contacts.try_build("bitrix_find_duplicates_by_phone", {"phone": "+7999"})
        assert request == BitrixRequest(
            "crm.duplicate.findbycomm",
            {"type": "PHONE", "values": ["+7999"], "entity_type": "CONTACT"},
        )


class TestCompanies:
    def test_search_companies(self) -> None:
        request = CompanyRequestBuilder().try_build(
            "bitrix_search_companies", {"query": "Acme"}
        )
        assert request == BitrixRequest(
            "crm.company.list", {"filter": {"%TITLE": "Acme"}, "start": 0, "limit": 50}
        )

    def test_search_companies_requires_query(self) -> None:
        with pytest.raises(ValidationError):
            CompanyRequestBuilder().try_build("bitrix_search_companies", {})

    def test_create_company(self) -> None:
        request = CompanyRequestBuilder().try_build(
            "bitrix_create_company", {"title": "Acme", "fields": {"INDUSTRY": "IT"}}
        )
        assert request.payload == {"fields": {"INDUSTRY": "IT", "TITLE": "Acme"}}
