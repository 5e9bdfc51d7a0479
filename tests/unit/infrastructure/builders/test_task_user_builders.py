"""Tests for task and user request building."""

import pytest

from bitrix_proxy.core.domain.errors import ValidationError
from bitrix_proxy.core.domain.models import BitrixRequest
from bitrix_proxy.infrastructure.builders.tasks import TaskRequestBuilder
from bitrix_proxy.infrastructure.builders.users import UserRequestBuilder


class TestTasks:
    def test_create_task(self) -> None:
        request = TaskRequestBuilder().try_build(
            "bitrix_create_task",
            {
                "title": "Call back",
                "responsibleId": 1,
                "deadline": "2024-05-01T18:00:00Z",
                "priority": 2,
            },
        )
        assert request == BitrixRequest(
            "tasks.task.add",
            {
                "fields": {
                    "TITLE": "Call back",
                    "RESPONSIBLE_ID": 1,
                    "DEADLINE": "2024-05-01T18:00:00Z",
                    "PRIORITY": 2,
                }
            },
        )

    def test_create_task_requires_responsible(self) -> None:
        with pytest.raises(ValidationError):
            TaskRequestBuilder().try_build("bitrix_create_task", {"title": "x"})

    def test_task_id_key(self) -> None:
        builder = TaskRequestBuilder()
        assert builder.try_build("bitrix_get_task", {"id": 8}) == BitrixRequest(
            "tasks.task.get", {"taskId": 8}
        )
        assert builder.try_build("bitrix_complete_task", {"id": 8}) == BitrixRequest(
            "tasks.task.complete", {"taskId": 8}
        )

    def test_add_comment(self) -> None:
        request = TaskRequestBuilder().try_build(
            "bitrix_add_task_comment", {"taskId": 8, "comment": "Done"}
        )
        assert request == BitrixRequest(
            "task.commentitem.add", {"TASKID": 8, "FIELDS": {"POST_MESSAGE": "Done"}}
        )


class TestUsers:
    def test_list_users_defaults(self) -> None:
        assert UserRequestBuilder().try_build("bitrix_list_users", {}) == BitrixRequest(
            "user.get", {"filter": {}, "start": 0}
        )

    def test_get_user(self) -> None:
        assert UserRequestBuilder().try_build("bitrix_get_user", {"id": 1}) == BitrixRequest(
            "user.get", {"ID": 1}
        )

    def test_search_users(self) -> None:
        request = UserRequestBuilder().try_build(
            "bitrix_search_users", {"searchString": "Ivan"}
        )
        assert request.payload == {"filter": {}, "start": 0, "FIND": "Ivan"}

    def test_user_activity_range(self) -> None:
        request = UserRequestBuilder().try_build(
            "bitrix_get_user_activity", {"userId": 4, "dateFrom": "2024-01-01"}
        )
        assert request.method == "crm.activity.list"
        assert request.payload["filter"] == {
            "RESPONSIBLE_ID": 4,
            ">=START_TIME": "2024-01-01",
        }
