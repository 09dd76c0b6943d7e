"""
Presenter — the rendering contract shared by every output format.

Three strategies implement it:
    json   — goog.json_presenter.JSONPresenter   (structured, machine-readable)
    table  — goog.table_presenter.TablePresenter (columnar, human-scannable)
    plain  — goog.plain_presenter.PlainPresenter (line-oriented, pipe/grep-friendly)

Every render method returns a string for any input, including None and
collections containing None. Nothing here raises.

Usage:
    presenter = new_presenter("table")
    print(presenter.render_messages(client.list_messages("is:unread")))
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

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

FORMAT_JSON = "json"
FORMAT_TABLE = "table"
FORMAT_PLAIN = "plain"

FORMATS: tuple[str, ...] = (FORMAT_JSON, FORMAT_TABLE, FORMAT_PLAIN)


class Presenter(ABC):
    """Renders domain entities as formatted text."""

    # ── Mail ──────────────────────────────────────────────────────────────────

    @abstractmethod
    def render_message(self, msg: Optional[Message]) -> str: ...

    @abstractmethod
    def render_messages(self, msgs: Optional[Sequence[Optional[Message]]]) -> str: ...

    @abstractmethod
    def render_draft(self, draft: Optional[Draft]) -> str: ...

    @abstractmethod
    def render_drafts(self, drafts: Optional[Sequence[Optional[Draft]]]) -> str: ...

    @abstractmethod
    def render_thread(self, thread: Optional[Thread]) -> str: ...

    @abstractmethod
    def render_threads(self, threads: Optional[Sequence[Optional[Thread]]]) -> str: ...

    @abstractmethod
    def render_label(self, label: Optional[Label]) -> str: ...

    @abstractmethod
    def render_labels(self, labels: Optional[Sequence[Optional[Label]]]) -> str: ...

    # ── Calendar ──────────────────────────────────────────────────────────────

    @abstractmethod
    def render_event(self, event: Optional[Event]) -> str: ...

    @abstractmethod
    def render_events(self, events: Optional[Sequence[Optional[Event]]]) -> str: ...

    @abstractmethod
    def render_calendar(self, cal: Optional[Calendar]) -> str: ...

    @abstractmethod
    def render_calendars(self, cals: Optional[Sequence[Optional[Calendar]]]) -> str: ...

    @abstractmethod
    def render_acl_rule(self, rule: Optional[ACLRule]) -> str: ...

    @abstractmethod
    def render_acl_rules(self, rules: Optional[Sequence[Optional[ACLRule]]]) -> str: ...

    @abstractmethod
    def render_free_busy(self, response: Optional[FreeBusyResponse]) -> str: ...

    # ── Account ───────────────────────────────────────────────────────────────

    @abstractmethod
    def render_account(self, acct: Optional[Account]) -> str: ...

    @abstractmethod
    def render_accounts(self, accts: Optional[Sequence[Optional[Account]]]) -> str: ...

    # ── Tasks ─────────────────────────────────────────────────────────────────

    @abstractmethod
    def render_task_list(self, task_list: Optional[TaskList]) -> str: ...

    @abstractmethod
    def render_task_lists(self, task_lists: Optional[Sequence[Optional[TaskList]]]) -> str: ...

    @abstractmethod
    def render_task(self, task: Optional[Task]) -> str: ...

    @abstractmethod
    def render_tasks(self, tasks: Optional[Sequence[Optional[Task]]]) -> str: ...

    # ── Contacts ──────────────────────────────────────────────────────────────

    @abstractmethod
    def render_contact(self, contact: Optional[Contact]) -> str: ...

    @abstractmethod
    def render_contacts(self, contacts: Optional[Sequence[Optional[Contact]]]) -> str: ...

    @abstractmethod
    def render_contact_group(self, group: Optional[ContactGroup]) -> str: ...

    @abstractmethod
    def render_contact_groups(self, groups: Optional[Sequence[Optional[ContactGroup]]]) -> str: ...

    # ── Generic ───────────────────────────────────────────────────────────────

    @abstractmethod
    def render_error(self, err: Optional[BaseException]) -> str: ...

    @abstractmethod
    def render_success(self, msg: str) -> str: ...


def new_presenter(fmt: Optional[str]) -> Presenter:
    """
    Return the presenter for a format token: "json", "table" or "plain".

    Any other value, including None and "", selects the table presenter.
    """
    # Imported here: the strategy modules import Presenter from this module.
    from .json_presenter import JSONPresenter
    from .plain_presenter import PlainPresenter
    from .table_presenter import TablePresenter

    if fmt == FORMAT_JSON:
        return JSONPresenter()
    if fmt == FORMAT_PLAIN:
        return PlainPresenter()
    return TablePresenter()
