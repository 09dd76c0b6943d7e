"""
TasksClient — typed, high-level wrapper around the Google Tasks API v1.

Supports task lists (list, read, create) and tasks (list, read, create,
update, complete, reopen, delete).
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from googleapiclient.errors import HttpError

from .exceptions import TasksError, ValidationError
from .google_factory import GoogleServiceFactory
from .models import DEFAULT_TASKLIST, Task, TaskLink, TaskList

logger = logging.getLogger(__name__)


def _parse_rfc3339(s: str) -> Optional[datetime]:
    """RFC 3339 timestamp to aware datetime; empty or malformed gives None."""
    if not s:
        return None
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None


def _due(d: datetime) -> str:
    # The Tasks API stores only the date; the time part must be zero
    return d.strftime("%Y-%m-%dT00:00:00.000Z")


class TasksClient:
    """
    Task lists and the tasks inside them.

    Methods taking `tasklist_id` default to the account's default list
    ("@default"). Parsed tasks carry the list ID they were fetched from.

    Usage:
        client = TasksClient(factory)
        open_items = client.list_tasks()
        client.complete_task(open_items[0].id)
    """

    def __init__(self, factory: GoogleServiceFactory) -> None:
        self._svc = factory.tasks

    # ── Task lists ────────────────────────────────────────────────────────────

    def list_task_lists(self) -> list[TaskList]:
        """Return the first page (up to 100) of task lists."""
        try:
            resp = self._svc.tasklists().list(maxResults=100).execute()
        except HttpError as exc:
            raise TasksError(f"failed to list task lists: {exc}") from exc
        return [_parse_tasklist(item) for item in resp.get("items", [])]

    def get_task_list(self, tasklist_id: str) -> TaskList:
        try:
            raw = self._svc.tasklists().get(tasklist=tasklist_id).execute()
        except HttpError as exc:
            raise TasksError(f"failed to get task list {tasklist_id}: {exc}") from exc
        return _parse_tasklist(raw)

    def create_task_list(self, title: str) -> TaskList:
        if not title.strip():
            raise ValidationError("task list title cannot be empty")
        try:
            raw = self._svc.tasklists().insert(body={"title": title}).execute()
        except HttpError as exc:
            raise TasksError(f"failed to create task list: {exc}") from exc
        logger.info("Created task list %s: %s", raw["id"], title)
        return _parse_tasklist(raw)

    # ── Tasks ─────────────────────────────────────────────────────────────────

    def list_tasks(
        self,
        tasklist_id: str = DEFAULT_TASKLIST,
        include_completed: bool = False,
        max_results: int = 100,
    ) -> list[Task]:
        """
        Return one page of tasks from `tasklist_id`.

        Completed and hidden tasks are only included with include_completed.
        """
        try:
            resp = self._svc.tasks().list(
                tasklist=tasklist_id,
                maxResults=max_results,
                showCompleted=include_completed,
                showHidden=include_completed,
            ).execute()
        except HttpError as exc:
            raise TasksError(f"failed to list tasks: {exc}") from exc
        return [_parse_task(t, tasklist_id) for t in resp.get("items", [])]

    def get_task(self, task_id: str, tasklist_id: str = DEFAULT_TASKLIST) -> Task:
        try:
            raw = self._svc.tasks().get(tasklist=tasklist_id, task=task_id).execute()
        except HttpError as exc:
            raise TasksError(f"failed to get task {task_id}: {exc}") from exc
        return _parse_task(raw, tasklist_id)

    def create_task(
        self,
        title: str,
        tasklist_id: str = DEFAULT_TASKLIST,
        due: Optional[datetime] = None,
        notes: str = "",
        parent_id: Optional[str] = None,
    ) -> Task:
        """
        Create a task and return it as stored.

        Args:
            title:        Task title (required).
            tasklist_id:  Target list, '@default' unless given.
            due:          Due date; the API keeps only the date part.
            notes:        Free-text notes.
            parent_id:    Create as a subtask of this task.
        """
        if not title.strip():
            raise ValidationError("task title cannot be empty")
        body: dict = {"title": title, "status": "needsAction"}
        if notes:
            body["notes"] = notes
        if due is not None:
            body["due"] = _due(due)

        kwargs: dict = {"tasklist": tasklist_id, "body": body}
        if parent_id:
            kwargs["parent"] = parent_id
        try:
            raw = self._svc.tasks().insert(**kwargs).execute()
        except HttpError as exc:
            raise TasksError(f"failed to create task: {exc}") from exc
        logger.info("Created task %s: %s", raw["id"], title)
        return _parse_task(raw, tasklist_id)

    def update_task(
        self,
        task_id: str,
        tasklist_id: str = DEFAULT_TASKLIST,
        title: Optional[str] = None,
        notes: Optional[str] = None,
        due: Optional[datetime] = None,
    ) -> Task:
        """Patch the given fields; at least one must be set."""
        body: dict = {}
        if title is not None:
            body["title"] = title
        if notes is not None:
            body["notes"] = notes
        if due is not None:
            body["due"] = _due(due)
        if not body:
            raise ValidationError("nothing to update")
        try:
            raw = self._svc.tasks().patch(
                tasklist=tasklist_id, task=task_id, body=body
            ).execute()
        except HttpError as exc:
            raise TasksError(f"failed to update task {task_id}: {exc}") from exc
        logger.info("Updated task %s: %s", task_id, list(body))
        return _parse_task(raw, tasklist_id)

    def complete_task(self, task_id: str, tasklist_id: str = DEFAULT_TASKLIST) -> Task:
        """Mark a task as completed and return the updated task."""
        try:
            raw = self._svc.tasks().patch(
                tasklist=tasklist_id,
                task=task_id,
                body={"status": "completed"},
            ).execute()
        except HttpError as exc:
            raise TasksError(f"failed to complete task {task_id}: {exc}") from exc
        logger.info("Completed task %s", task_id)
        return _parse_task(raw, tasklist_id)

    def reopen_task(self, task_id: str, tasklist_id: str = DEFAULT_TASKLIST) -> Task:
        """Mark a completed task back to needsAction, clearing its completion time."""
        try:
            raw = self._svc.tasks().patch(
                tasklist=tasklist_id,
                task=task_id,
                body={"status": "needsAction", "completed": None},
            ).execute()
        except HttpError as exc:
            raise TasksError(f"failed to reopen task {task_id}: {exc}") from exc
        logger.info("Reopened task %s", task_id)
        return _parse_task(raw, tasklist_id)

    def delete_task(self, task_id: str, tasklist_id: str = DEFAULT_TASKLIST) -> None:
        """Delete a task. The API keeps no trash for tasks."""
        try:
            self._svc.tasks().delete(tasklist=tasklist_id, task=task_id).execute()
        except HttpError as exc:
            raise TasksError(f"failed to delete task {task_id}: {exc}") from exc
        logger.info("Deleted task %s", task_id)


# ── Parsers ───────────────────────────────────────────────────────────────────

def _parse_task(raw: dict, tasklist_id: str = "") -> Task:
    return Task(
        id=raw["id"],
        title=raw.get("title", ""),
        status=raw.get("status", "needsAction"),
        task_list_id=tasklist_id,
        notes=raw.get("notes", ""),
        due=_parse_rfc3339(raw.get("due", "")),
        completed=_parse_rfc3339(raw.get("completed", "")),
        parent=raw.get("parent"),
        position=raw.get("position", ""),
        updated=_parse_rfc3339(raw.get("updated", "")),
        links=[
            TaskLink(
                type=link.get("type", ""),
                description=link.get("description", ""),
                link=link.get("link", ""),
            )
            for link in raw.get("links", [])
        ],
        hidden=raw.get("hidden", False),
        deleted=raw.get("deleted", False),
    )


def _parse_tasklist(raw: dict) -> TaskList:
    return TaskList(
        id=raw["id"],
        title=raw.get("title", ""),
        updated=_parse_rfc3339(raw.get("updated", "")),
        self_link=raw.get("selfLink", ""),
    )
