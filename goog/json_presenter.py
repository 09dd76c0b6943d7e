"""
JSONPresenter — structured output.

Entities are emitted as their dataclass field tree in declaration order,
indented by two spaces. Datetimes become ISO 8601 strings, absent optionals
become null. None elements inside collections are dropped, so the array
length matches the number of rows the table and plain presenters print.

An encoding failure never escapes: it is logged and the output degrades to
"{}" for a single entity or "[]" for a collection.
"""
from __future__ import annotations

import dataclasses
import json
import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from .models import (
    Account,
    ACLRule,
    Calendar,
    Contact,
    ContactGroup,
    Draft,
    Event,
    FreeBusyResponse,
    Label,
    Message,
    Task,
    TaskList,
    Thread,
)
from .presenter import Presenter

logger = logging.getLogger(__name__)


def _default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _dumps(tree: Any) -> str:
    return json.dumps(tree, indent=2, ensure_ascii=False, default=_default)


class JSONPresenter(Presenter):
    """Formats output as indented JSON."""

    # ── Internal ──────────────────────────────────────────────────────────────

    def _one(self, entity: Any) -> str:
        if entity is None:
            return "null"
        try:
            return _dumps(dataclasses.asdict(entity))
        except (TypeError, ValueError) as exc:
            logger.warning("JSON encoding of %s failed: %s", type(entity).__name__, exc)
            return "{}"

    def _many(self, entities: Optional[Sequence[Any]]) -> str:
        if not entities:
            return "[]"
        try:
            return _dumps([dataclasses.asdict(e) for e in entities if e is not None])
        except (TypeError, ValueError) as exc:
            logger.warning("JSON encoding of collection failed: %s", exc)
            return "[]"

    def _document(self, doc: dict[str, str]) -> str:
        return _dumps(doc)

    # ── Mail ──────────────────────────────────────────────────────────────────

    def render_message(self, msg: Optional[Message]) -> str:
        return self._one(msg)

    def render_messages(self, msgs: Optional[Sequence[Optional[Message]]]) -> str:
        return self._many(msgs)

    def render_draft(self, draft: Optional[Draft]) -> str:
        return self._one(draft)

    def render_drafts(self, drafts: Optional[Sequence[Optional[Draft]]]) -> str:
        return self._many(drafts)

    def render_thread(self, thread: Optional[Thread]) -> str:
        return self._one(thread)

    def render_threads(self, threads: Optional[Sequence[Optional[Thread]]]) -> str:
        return self._many(threads)

    def render_label(self, label: Optional[Label]) -> str:
        return self._one(label)

    def render_labels(self, labels: Optional[Sequence[Optional[Label]]]) -> str:
        return self._many(labels)

    # ── Calendar ──────────────────────────────────────────────────────────────

    def render_event(self, event: Optional[Event]) -> str:
        return self._one(event)

    def render_events(self, events: Optional[Sequence[Optional[Event]]]) -> str:
        return self._many(events)

    def render_calendar(self, cal: Optional[Calendar]) -> str:
        return self._one(cal)

    def render_calendars(self, cals: Optional[Sequence[Optional[Calendar]]]) -> str:
        return self._many(cals)

    def render_acl_rule(self, rule: Optional[ACLRule]) -> str:
        return self._one(rule)

    def render_acl_rules(self, rules: Optional[Sequence[Optional[ACLRule]]]) -> str:
        return self._many(rules)

    def render_free_busy(self, response: Optional[FreeBusyResponse]) -> str:
        return self._one(response)

    # ── Account ───────────────────────────────────────────────────────────────

    def render_account(self, acct: Optional[Account]) -> str:
        return self._one(acct)

    def render_accounts(self, accts: Optional[Sequence[Optional[Account]]]) -> str:
        return self._many(accts)

    # ── Tasks ─────────────────────────────────────────────────────────────────

    def render_task_list(self, task_list: Optional[TaskList]) -> str:
        return self._one(task_list)

    def render_task_lists(self, task_lists: Optional[Sequence[Optional[TaskList]]]) -> str:
        return self._many(task_lists)

    def render_task(self, task: Optional[Task]) -> str:
        return self._one(task)

    def render_tasks(self, tasks: Optional[Sequence[Optional[Task]]]) -> str:
        return self._many(tasks)

    # ── Contacts ──────────────────────────────────────────────────────────────

    def render_contact(self, contact: Optional[Contact]) -> str:
        return self._one(contact)

    def render_contacts(self, contacts: Optional[Sequence[Optional[Contact]]]) -> str:
        return self._many(contacts)

    def render_contact_group(self, group: Optional[ContactGroup]) -> str:
        return self._one(group)

    def render_contact_groups(self, groups: Optional[Sequence[Optional[ContactGroup]]]) -> str:
        return self._many(groups)

    # ── Generic ───────────────────────────────────────────────────────────────

    def render_error(self, err: Optional[BaseException]) -> str:
        return self._document({"error": "" if err is None else str(err)})

    def render_success(self, msg: str) -> str:
        return self._document({"message": msg})
