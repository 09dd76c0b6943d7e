"""Tests for the Tasks client."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError

from goog.exceptions import TasksError, ValidationError
from goog.tasks_client import TasksClient


def http_error(status=500):
    return HttpError(httplib2.Response({"status": status}), b"backend error")


@pytest.fixture
def tasks():
    service = MagicMock()
    factory = MagicMock(tasks=service)
    return TasksClient(factory), service


def test_list_task_lists(tasks):
    client, service = tasks
    service.tasklists().list().execute.return_value = {"items": [
        {"id": "abc", "title": "My Tasks", "updated": "2026-03-01T10:00:00.000Z",
         "selfLink": "https://tasks.googleapis.com/abc"},
    ]}
    lists = client.list_task_lists()
    assert lists[0].title == "My Tasks"
    assert lists[0].updated.year == 2026
    assert not lists[0].is_default()


def test_list_tasks(tasks):
    client, service = tasks
    service.tasks().list().execute.return_value = {"items": [
        {"id": "t1", "title": "File taxes", "status": "needsAction",
         "due": "2026-04-15T00:00:00.000Z"},
        {"id": "t2", "title": "Gather receipts", "status": "completed",
         "parent": "t1", "completed": "2026-03-01T09:00:00.000Z"},
    ]}
    items = client.list_tasks("@default", include_completed=True)
    assert items[0].due.month == 4
    assert items[0].task_list_id == "@default"
    assert items[1].is_completed()
    assert items[1].is_subtask()
    kwargs = service.tasks().list.call_args.kwargs
    assert kwargs["showCompleted"] is True


def test_get_task_without_optional_fields(tasks):
    client, service = tasks
    service.tasks().get().execute.return_value = {"id": "t1", "title": "Call mom"}
    task = client.get_task("t1")
    assert task.due is None
    assert task.parent is None
    assert task.status == "needsAction"


def test_complete_task(tasks):
    client, service = tasks
    service.tasks().patch().execute.return_value = {
        "id": "t1", "title": "File taxes", "status": "completed",
    }
    assert client.complete_task("t1", "list1").is_completed()
    service.tasks().patch.assert_called_with(
        tasklist="list1", task="t1", body={"status": "completed"}
    )


def test_delete_task_error(tasks):
    client, service = tasks
    service.tasks().delete().execute.side_effect = http_error(404)
    with pytest.raises(TasksError, match="failed to delete task t1"):
        client.delete_task("t1")


def test_create_task(tasks):
    client, service = tasks
    service.tasks().insert().execute.return_value = {
        "id": "t9", "title": "Renew passport", "status": "needsAction",
        "due": "2026-11-01T00:00:00.000Z",
    }
    task = client.create_task(
        "Renew passport",
        due=datetime(2026, 11, 1, 15, 30, tzinfo=timezone.utc),
        notes="bring photos",
        parent_id="t1",
    )
    assert task.id == "t9"
    assert task.task_list_id == "@default"
    service.tasks().insert.assert_called_with(
        tasklist="@default",
        parent="t1",
        body={
            "title": "Renew passport",
            "status": "needsAction",
            "notes": "bring photos",
            "due": "2026-11-01T00:00:00.000Z",
        },
    )


def test_create_task_requires_title(tasks):
    client, service = tasks
    with pytest.raises(ValidationError):
        client.create_task("   ")
    service.tasks().insert.assert_not_called()


def test_create_task_error(tasks):
    client, service = tasks
    service.tasks().insert().execute.side_effect = http_error()
    with pytest.raises(TasksError, match="failed to create task"):
        client.create_task("Renew passport")


def test_update_task_patches_given_fields(tasks):
    client, service = tasks
    service.tasks().patch().execute.return_value = {"id": "t1", "title": "File taxes today"}
    client.update_task("t1", title="File taxes today")
    service.tasks().patch.assert_called_with(
        tasklist="@default", task="t1", body={"title": "File taxes today"}
    )


def test_update_task_requires_change(tasks):
    client, _ = tasks
    with pytest.raises(ValidationError, match="nothing to update"):
        client.update_task("t1")


def test_reopen_task(tasks):
    client, service = tasks
    service.tasks().patch().execute.return_value = {"id": "t1", "status": "needsAction"}
    task = client.reopen_task("t1", "abc")
    assert task.status == "needsAction"
    assert task.completed is None
    service.tasks().patch.assert_called_with(
        tasklist="abc", task="t1", body={"status": "needsAction", "completed": None}
    )


def test_create_task_list(tasks):
    client, service = tasks
    service.tasklists().insert().execute.return_value = {"id": "l2", "title": "Errands"}
    assert client.create_task_list("Errands").title == "Errands"
    service.tasklists().insert.assert_called_with(body={"title": "Errands"})
