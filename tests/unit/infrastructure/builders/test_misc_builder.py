"""Tests for cross-entity request building."""

import pytest

from bitrix_proxy.core.domain.errors import ValidationError
from bitrix_proxy.core.domain.models import BitrixRequest
from bitrix_proxy.infrastructure.builders.misc import (
    CRM_SUMMARY_COMMANDS,
    MAX_BATCH_COMMANDS,
    MiscRequestBuilder,
)


@pytest.fixture
def builder() -> MiscRequestBuilder:
    return MiscRequestBuilder()


class TestTimeline:
    def test_add_comment_canonicalizes_entity_type(self, builder) -> None:
        request = builder.try_build(
            "bitrix_add_timeline_comment",
            {"entityType": "DEAL", "entityId": 10, "comment": "Called"},
        )
        assert request == BitrixRequest(
            "crm.timeline.comment.add",
            {"fields": {"ENTITY_ID": 10, "ENTITY_TYPE": "deal", "COMMENT": "Called"}},
        )

    def test_rejects_unknown_entity_type(self, builder) -> None:
        with pytest.raises(ValidationError):
            builder.try_build(
                "bitrix_add_timeline_comment",
                {"entityType": "quote", "entityId": 10, "comment": "x"},
            )

    def test_list_comments(self, builder) -> None:
        request = builder.try_build(
            "bitrix_get_timeline", {"entityType": "lead", "entityId": 3}
        )
        assert request == BitrixRequest(
            "crm.timeline.comment.list",
            {"filter": {"ENTITY_ID": 3, "ENTITY_TYPE": "lead"}, "start": 0, "limit": 50},
        )

    @pytest.mark.parametrize("tool", ["bitrix_add_comment", "bitrix_timeline_comment_add"])
    def test_plain_comment_tools_ignore_author(self, builder, tool) -> None:
        request = builder.try_build(
            tool, {"entityType": "contact", "entityId": 4, "comment": "Hi", "authorId": 9}
        )
        assert request == BitrixRequest(
            "crm.timeline.comment.add",
            {"fields": {"ENTITY_ID": 4, "ENTITY_TYPE": "contact", "COMMENT": "Hi"}},
        )

    def test_add_timeline_comment_with_author(self, builder) -> None:
        request = builder.try_build(
            "bitrix_add_timeline_comment",
            {"entityType": "company", "entityId": 5, "comment": "Hi", "authorId": 9},
        )
        assert request.payload["fields"]["AUTHOR_ID"] == 9


class TestBatch:
    def test_batch(self, builder) -> None:
        request = builder.try_build(
            "bitrix_batch", {"cmd": {"a": "crm.deal.get?id=1"}, "halt": True}
        )
        assert request == BitrixRequest(
            "batch", {"cmd": {"a": "crm.deal.get?id=1"}, "halt": 1}
        )

    def test_batch_requires_commands(self, builder) -> None:
        with pytest.raises(ValidationError):
            builder.try_build("bitrix_batch", {"cmd": {}})

    def test_batch_limit(self, builder) -> None:
        cmd = {f"c{i}": "user.current" for i in range(MAX_BATCH_COMMANDS + 1)}
        with pytest.raises(ValidationError):
            builder.try_build("bitrix_batch", {"cmd": cmd})

    def test_batch_rejects_non_string_command(self, builder) -> None:
        with pytest.raises(ValidationError):
            builder.try_build("bitrix_batch", {"cmd": {"a": 1}})

    def test_crm_summary(self, builder) -> None:
        request = builder.try_build("bitrix_get_crm_summary", {})
        assert request.method == "batch"
        assert request.payload["cmd"] == CRM_SUMMARY_COMMANDS


class TestTelephonyAndFiles:
    def test_call_statistics(self, builder) -> None:
        request = builder.try_build(
            "bitrix_get_call_statistics", {"dateFrom": "2024-01-01", "dateTo": "2024-01-02"}
        )
        assert request == BitrixRequest(
            "voximplant.statistic.get",
            {"FILTER": {">=CALL_START_DATE": "2024-01-01", "<=CALL_START_DATE": "2024-01-02"}},
        )

    def test_list_calls_defaults(self, builder) -> None:
        request = builder.try_build("bitrix_telephony_call_list", {})
        assert request.payload == {"FILTER": {}, "START": 0}

    def test_upload_file_uses_file_name(self, builder) -> None:
        request = builder.try_build(
            "bitrix_upload_file",
            {"folderId": 2, "fileName": "report.csv", "fileContent": "YSxi"},
        )
        assert request.payload == {
            "id": 2,
            "data": {"NAME": "report.csv"},
            "fileContent": ["report.csv", "YSxi"],
        }

    def test_im_message_add(self, builder) -> None:
        request = builder.try_build(
            "bitrix_im_message_add", {"dialogId": "chat7", "message": "Hello"}
        )
        assert request == BitrixRequest(
            "im.message.add", {"DIALOG_ID": "chat7", "MESSAGE": "Hello"}
        )


class TestStatusLists:
    def test_crm_status_list_without_entity_sends_empty_payload(self, builder) -> None:
        assert builder.try_build("bitrix_crm_status_list", {}) == BitrixRequest(
            "crm.status.list", {}
        )

    def test_crm_status_list_with_entity(self, builder) -> None:
        request = builder.try_build("bitrix_crm_status_list", {"entityId": "SOURCE"})
        assert request.payload == {"filter": {"ENTITY_ID": "SOURCE"}}

    def test_get_status_list_always_sends_filter(self, builder) -> None:
        assert builder.try_build("bitrix_get_status_list", {}).payload == {"filter": {}}


@pytest.mark.parametrize(
    "tool, method",
    [
        ("bitrix_webhook_status", "app.info"),
        ("bitrix_validate_webhook", "user.current"),
        ("bitrix_diagnose_permissions", "scope"),
        ("bitrix_check_crm_settings", "crm.settings.mode.get"),
    ],
)
def test_diagnostic_tools(builder, tool, method) -> None:
    assert builder.try_build(tool, {}) == BitrixRequest(method, {})
