"""Task tools (``tasks.task.*``, comments and checklists)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bitrix_proxy.core.domain.models import BitrixRequest, ParameterSpec, ToolDefinition
from bitrix_proxy.core.domain.validation import ensure_number
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

_TASK_ID = ParameterSpec("number", "Numeric Bitrix24 task ID.")

TASK_TOOLS = (
    ToolDefinition(
        "bitrix_create_task",
        "Create a task with a title and a responsible user.",
        {
            "title": ParameterSpec("string", "Task title."),
            "responsibleId": ParameterSpec("number", "Responsible user ID."),
            "description": ParameterSpec("string", "Task description.", optional=True),
            "deadline": ParameterSpec("string", "Deadline, ISO 8601.", optional=True),
            "priority": ParameterSpec("number", "Priority: 0 low, 1 normal, 2 high.", optional=True),
            "groupId": ParameterSpec("number", "Workgroup (project) ID.", optional=True),
            "fields": ParameterSpec("object", "Additional task fields.", optional=True),
        },
    ),
    ToolDefinition("bitrix_get_task", "Get a task by its ID.", {"id": _TASK_ID}),
    ToolDefinition(
        "bitrix_update_task",
        "Update an existing task.",
        {"id": _TASK_ID, "fields": ParameterSpec("object", "Task fields to update.")},
    ),
    ToolDefinition(
        "bitrix_list_tasks",
        "List tasks with filtering, field selection, sorting and paging.",
        LIST_PARAMETERS,
    ),
    ToolDefinition("bitrix_complete_task", "Complete (close) a task.", {"id": _TASK_ID}),
    ToolDefinition(
        "bitrix_get_task_comments", "List the comments of a task.", {"taskId": _TASK_ID}
    ),
    ToolDefinition(
        "bitrix_add_task_comment",
        "Add a comment to a task.",
        {"taskId": _TASK_ID, "comment": ParameterSpec("string", "Comment text.")},
    ),
    ToolDefinition(
        "bitrix_get_task_checklist", "List the checklist items of a task.", {"taskId": _TASK_ID}
    ),
)


class TaskRequestBuilder(BaseRequestBuilder):
    """Builds task, task comment and checklist requests."""

    builder_domain = "tasks"
    builder_tools = TASK_TOOLS

    def _handlers(self) -> dict[str, Handler]:
        return {
            "bitrix_create_task": self._create,
            "bitrix_get_task": self._get,
            "bitrix_update_task": self._update,
            "bitrix_list_tasks": self._list,
            "bitrix_complete_task": self._complete,
            "bitrix_get_task_comments": self._comments,
            "bitrix_add_task_comment": self._add_comment,
            "bitrix_get_task_checklist": self._checklist,
        }

    def _create(self, args: Mapping[str, Any]) -> BitrixRequest:
        title = required_string(args, "title")
        responsible_id = positive_id(args, "responsibleId")
        priority = ensure_number(
            args.get("priority"), 'Parameter "priority" must be a number when provided'
        )
        fields = merge_fields(
            optional_object(args, "fields"),
            TITLE=title,
            RESPONSIBLE_ID=responsible_id,
            DESCRIPTION=optional_string(args, "description"),
            DEADLINE=optional_iso_date(args, "deadline"),
            PRIORITY=priority,
            GROUP_ID=optional_positive_id(args, "groupId"),
        )
        return BitrixRequest("tasks.task.add", {"fields": fields})

    def _get(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("tasks.task.get", {"taskId": positive_id(args)})

    def _update(self, args: Mapping[str, Any]) -> BitrixRequest:
        task_id = positive_id(args)
        return BitrixRequest(
            "tasks.task.update", {"taskId": task_id, "fields": required_fields(args)}
        )

    def _list(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("tasks.task.list", list_payload(args))

    def _complete(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest("tasks.task.complete", {"taskId": positive_id(args)})

    def _comments(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest(
            "task.commentitem.getlist", {"TASKID": positive_id(args, "taskId")}
        )

    def _add_comment(self, args: Mapping[str, Any]) -> BitrixRequest:
        task_id = positive_id(args, "taskId")
        comment = required_string(args, "comment")
        return BitrixRequest(
            "task.commentitem.add",
            {"TASKID": task_id, "FIELDS": {"POST_MESSAGE": comment}},
        )

    def _checklist(self, args: Mapping[str, Any]) -> BitrixRequest:
        return BitrixRequest(
            "task.checklistitem.getlist", {"TASKID": positive_id(args, "taskId")}
        )
