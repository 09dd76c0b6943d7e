"""
TablePresenter — human-scannable ASCII tables.

Single entities render as a two-column FIELD/VALUE grid; optional fields are
left out when empty. Collections render as one summary row per entity with a
fixed column set, in input order, skipping None elements. Long strings are
cut with truncate() to a per-column width.

Output never ends with a newline; callers print() it.
"""
from __future__ import annotations

from typing import Optional, Sequence

from .models import (
    Account,
    ACLRule,
    Attendee,
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

_DATE = "%Y-%m-%d"
_DATETIME = "%Y-%m-%d %H:%M"


def truncate(s: str, max_len: int) -> str:
    """
    Shorten `s` to at most `max_len` characters.

    Longer strings keep their first max_len-3 characters plus "..."; when
    max_len is 3 or less they are cut hard with no ellipsis.
    """
    if len(s) <= max_len:
        return s
    if max_len <= 3:
        return s[:max_len]
    return s[: max_len - 3] + "..."


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _yes(value: bool) -> str:
    return "Yes" if value else ""


def _attendee_label(attendee: Attendee) -> str:
    if attendee.display_name:
        return f"{attendee.display_name} <{attendee.email}>"
    return attendee.email


class _Grid:
    """Minimal ASCII grid writer. Cells may contain embedded newlines."""

    def __init__(self, headers: Sequence[str]) -> None:
        self.headers = [h.upper() for h in headers]
        self.rows: list[list[str]] = []

    def append(self, row: Sequence[str]) -> None:
        self.rows.append([str(cell) for cell in row])

    def render(self) -> str:
        widths = [len(h) for h in self.headers]
        for row in self.rows:
            for i, cell in enumerate(row):
                for line in cell.split("\n"):
                    widths[i] = max(widths[i], len(line))

        border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
        lines = [border, self._line(self.headers, widths), border]
        for row in self.rows:
            cells = [cell.split("\n") for cell in row]
            height = max(len(c) for c in cells) if cells else 1
            for i in range(height):
                lines.append(self._line([c[i] if i < len(c) else "" for c in cells], widths))
        lines.append(border)
        return "\n".join(lines)

    @staticmethod
    def _line(cells: Sequence[str], widths: Sequence[int]) -> str:
        return "| " + " | ".join(c.ljust(w) for c, w in zip(cells, widths)) + " |"


def _field_grid() -> _Grid:
    return _Grid(["Field", "Value"])


class TablePresenter(Presenter):
    """Formats output as ASCII tables."""

    # ── Mail ──────────────────────────────────────────────────────────────────

    def render_message(self, msg: Optional[Message]) -> str:
        if msg is None:
            return "No message found"

        grid = _field_grid()
        grid.append(["ID", msg.id])
        grid.append(["Thread ID", msg.thread_id])
        grid.append(["From", msg.sender])
        grid.append(["To", ", ".join(msg.to)])
        if msg.cc:
            grid.append(["Cc", ", ".join(msg.cc)])
        grid.append(["Subject", msg.subject])
        grid.append(["Date", msg.date.strftime(_DATETIME)])
        grid.append(["Labels", ", ".join(msg.labels)])
        grid.append(["Read", _flag(msg.is_read)])
        grid.append(["Starred", _flag(msg.is_starred)])
        if msg.snippet:
            grid.append(["Snippet", truncate(msg.snippet, 60)])
        return grid.render()

    def render_messages(self, msgs: Optional[Sequence[Optional[Message]]]) -> str:
        if not msgs:
            return "No messages found"

        grid = _Grid(["ID", "From", "Subject", "Date", "Labels"])
        for msg in msgs:
            if msg is None:
                continue
            grid.append([
                truncate(msg.id, 12),
                truncate(msg.sender, 25),
                truncate(msg.subject, 40),
                msg.date.strftime(_DATE),
                truncate(", ".join(msg.labels), 20),
            ])
        return grid.render()

    def render_draft(self, draft: Optional[Draft]) -> str:
        if draft is None:
            return "No draft found"

        grid = _field_grid()
        grid.append(["Draft ID", draft.id])
        grid.append(["Created", draft.created.strftime(_DATETIME)])
        grid.append(["Updated", draft.updated.strftime(_DATETIME)])
        if draft.message is not None:
            grid.append(["Message ID", draft.message.id])
            grid.append(["To", ", ".join(draft.message.to)])
            grid.append(["Subject", draft.message.subject])
        return grid.render()

    def render_drafts(self, drafts: Optional[Sequence[Optional[Draft]]]) -> str:
        if not drafts:
            return "No drafts found"

        grid = _Grid(["ID", "Subject", "To", "Updated"])
        for draft in drafts:
            if draft is None:
                continue
            subject = to = ""
            if draft.message is not None:
                subject = draft.message.subject
                to = ", ".join(draft.message.to)
            grid.append([
                truncate(draft.id, 12),
                truncate(subject, 40),
                truncate(to, 25),
                draft.updated.strftime(_DATE),
            ])
        return grid.render()

    def render_thread(self, thread: Optional[Thread]) -> str:
        if thread is None:
            return "No thread found"

        info = _field_grid()
        info.append(["Thread ID", thread.id])
        info.append(["Message Count", str(thread.message_count())])
        info.append(["Labels", ", ".join(thread.labels)])
        if thread.snippet:
            info.append(["Snippet", truncate(thread.snippet, 60)])
        out = info.render()

        if thread.messages:
            messages = _Grid(["ID", "From", "Subject", "Date"])
            for msg in thread.messages:
                if msg is None:
                    continue
                messages.append([
                    truncate(msg.id, 12),
                    truncate(msg.sender, 25),
                    truncate(msg.subject, 40),
                    msg.date.strftime(_DATE),
                ])
            out += "\n\nMessages:\n" + messages.render()
        return out

    def render_threads(self, threads: Optional[Sequence[Optional[Thread]]]) -> str:
        if not threads:
            return "No threads found"

        grid = _Grid(["ID", "Messages", "Snippet", "Labels"])
        for thread in threads:
            if thread is None:
                continue
            grid.append([
                truncate(thread.id, 12),
                str(thread.message_count()),
                truncate(thread.snippet, 40),
                truncate(", ".join(thread.labels), 20),
            ])
        return grid.render()

    def render_label(self, label: Optional[Label]) -> str:
        if label is None:
            return "No label found"

        grid = _field_grid()
        grid.append(["ID", label.id])
        grid.append(["Name", label.name])
        grid.append(["Type", label.type])
        if label.message_list_visibility:
            grid.append(["Message Visibility", label.message_list_visibility])
        if label.label_list_visibility:
            grid.append(["Label Visibility", label.label_list_visibility])
        if label.color is not None:
            grid.append(["Background", label.color.background])
            grid.append(["Text Color", label.color.text])
        return grid.render()

    def render_labels(self, labels: Optional[Sequence[Optional[Label]]]) -> str:
        if not labels:
            return "No labels found"

        grid = _Grid(["ID", "Name", "Type"])
        for label in labels:
            if label is None:
                continue
            grid.append([label.id, label.name, label.type])
        return grid.render()

    # ── Calendar ──────────────────────────────────────────────────────────────

    def render_event(self, event: Optional[Event]) -> str:
        if event is None:
            return "No event found"

        grid = _field_grid()
        grid.append(["ID", event.id])
        grid.append(["Title", event.title])
        if event.description:
            grid.append(["Description", truncate(event.description, 60)])
        if event.location:
            grid.append(["Location", event.location])

        if event.all_day:
            grid.append(["Date", event.start.strftime(_DATE) + " (All Day)"])
        else:
            grid.append(["Start", event.start.strftime(_DATETIME)])
            grid.append(["End", event.end.strftime(_DATETIME)])

        grid.append(["Status", event.status])
        if event.calendar_id:
            grid.append(["Calendar", event.calendar_id])
        if event.organizer is not None and event.organizer.email:
            grid.append(["Organizer", _attendee_label(event.organizer)])
        if event.attendees:
            grid.append([
                "Attendees",
                "\n".join(f"{a.email} ({a.response_status})" for a in event.attendees),
            ])
        if event.recurrence:
            grid.append(["Recurrence", "\n".join(event.recurrence)])
        if event.has_conference():
            grid.append(["Conference", event.conference_data.uri])
        return grid.render()

    def render_events(self, events: Optional[Sequence[Optional[Event]]]) -> str:
        if not events:
            return "No events found"

        grid = _Grid(["ID", "Title", "Start", "End", "Location"])
        for event in events:
            if event is None:
                continue
            if event.all_day:
                start, end = event.start.strftime(_DATE), "(All Day)"
            else:
                start, end = event.start.strftime(_DATETIME), event.end.strftime(_DATETIME)
            grid.append([
                truncate(event.id, 12),
                truncate(event.title, 30),
                start,
                end,
                truncate(event.location, 20),
            ])
        return grid.render()

    def render_calendar(self, cal: Optional[Calendar]) -> str:
        if cal is None:
            return "No calendar found"

        grid = _field_grid()
        grid.append(["ID", cal.id])
        grid.append(["Title", cal.title])
        if cal.description:
            grid.append(["Description", truncate(cal.description, 60)])
        if cal.time_zone:
            grid.append(["Time Zone", cal.time_zone])
        grid.append(["Primary", _flag(cal.primary)])
        grid.append(["Access Role", cal.access_role])
        return grid.render()

    def render_calendars(self, cals: Optional[Sequence[Optional[Calendar]]]) -> str:
        if not cals:
            return "No calendars found"

        grid = _Grid(["ID", "Title", "Primary", "Access Role", "Time Zone"])
        for cal in cals:
            if cal is None:
                continue
            grid.append([
                truncate(cal.id, 20),
                truncate(cal.title, 25),
                _yes(cal.primary),
                cal.access_role,
                cal.time_zone,
            ])
        return grid.render()

    def render_acl_rule(self, rule: Optional[ACLRule]) -> str:
        if rule is None:
            return "No ACL rule found"

        grid = _field_grid()
        grid.append(["ID", rule.id])
        grid.append(["Role", rule.role])
        if rule.scope is not None:
            grid.append(["Scope Type", rule.scope.type])
            if rule.scope.value:
                grid.append(["Scope Value", rule.scope.value])
        return grid.render()

    def render_acl_rules(self, rules: Optional[Sequence[Optional[ACLRule]]]) -> str:
        if not rules:
            return "No ACL rules found"

        grid = _Grid(["ID", "Role", "Scope Type", "Scope Value"])
        for rule in rules:
            if rule is None:
                continue
            scope_type = scope_value = ""
            if rule.scope is not None:
                scope_type, scope_value = rule.scope.type, rule.scope.value
            grid.append([
                truncate(rule.id, 30),
                rule.role,
                scope_type,
                truncate(scope_value, 30),
            ])
        return grid.render()

    def render_free_busy(self, response: Optional[FreeBusyResponse]) -> str:
        if response is None or not response.calendars:
            return "No free/busy information found"

        grid = _Grid(["Calendar", "Busy Start", "Busy End"])
        for calendar_id, periods in response.calendars.items():
            if not periods:
                grid.append([calendar_id, "free", ""])
                continue
            for period in periods:
                if period is None:
                    continue
                grid.append([
                    calendar_id,
                    period.start.strftime(_DATETIME),
                    period.end.strftime(_DATETIME),
                ])
        return grid.render()

    # ── Account ───────────────────────────────────────────────────────────────

    def render_account(self, acct: Optional[Account]) -> str:
        if acct is None:
            return "No account found"

        grid = _field_grid()
        grid.append(["Alias", acct.alias])
        grid.append(["Email", acct.email])
        grid.append(["Default", _flag(acct.is_default)])
        grid.append(["Scopes", str(len(acct.scopes))])
        grid.append(["Added", acct.added.strftime(_DATE)])
        if acct.last_used is not None:
            grid.append(["Last Used", acct.last_used.strftime(_DATE)])
        if acct.scopes:
            grid.append(["Scope List", "\n".join(acct.scopes)])
        return grid.render()

    def render_accounts(self, accts: Optional[Sequence[Optional[Account]]]) -> str:
        if not accts:
            return "No accounts found"

        grid = _Grid(["Alias", "Email", "Default", "Scopes"])
        for acct in accts:
            if acct is None:
                continue
            grid.append([acct.alias, acct.email, _yes(acct.is_default), str(len(acct.scopes))])
        return grid.render()

    # ── Tasks ─────────────────────────────────────────────────────────────────

    def render_task_list(self, task_list: Optional[TaskList]) -> str:
        if task_list is None:
            return "No task list found"

        grid = _field_grid()
        grid.append(["ID", task_list.id])
        grid.append(["Title", task_list.title])
        if task_list.updated is not None:
            grid.append(["Updated", task_list.updated.strftime(_DATETIME)])
        return grid.render()

    def render_task_lists(self, task_lists: Optional[Sequence[Optional[TaskList]]]) -> str:
        if not task_lists:
            return "No task lists found"

        grid = _Grid(["ID", "Title", "Updated"])
        for task_list in task_lists:
            if task_list is None:
                continue
            grid.append([
                truncate(task_list.id, 25),
                truncate(task_list.title, 40),
                task_list.updated.strftime(_DATE) if task_list.updated else "",
            ])
        return grid.render()

    def render_task(self, task: Optional[Task]) -> str:
        if task is None:
            return "No task found"

        grid = _field_grid()
        grid.append(["ID", task.id])
        grid.append(["Title", task.title])
        grid.append(["Status", task.status])
        if task.notes:
            grid.append(["Notes", truncate(task.notes, 60)])
        if task.due is not None:
            grid.append(["Due", task.due.strftime(_DATE)])
        if task.completed is not None:
            grid.append(["Completed", task.completed.strftime(_DATETIME)])
        if task.parent is not None:
            grid.append(["Parent", task.parent])
        if task.updated is not None:
            grid.append(["Updated", task.updated.strftime(_DATETIME)])
        return grid.render()

    def render_tasks(self, tasks: Optional[Sequence[Optional[Task]]]) -> str:
        if not tasks:
            return "No tasks found"

        grid = _Grid(["ID", "Title", "Status", "Due"])
        for task in tasks:
            if task is None:
                continue
            grid.append([
                truncate(task.id, 12),
                truncate(task.title, 40),
                task.status,
                task.due.strftime(_DATE) if task.due else "",
            ])
        return grid.render()

    # ── Contacts ──────────────────────────────────────────────────────────────

    def render_contact(self, contact: Optional[Contact]) -> str:
        if contact is None:
            return "No contact found"

        grid = _field_grid()
        grid.append(["Resource Name", contact.resource_name])
        grid.append(["Name", contact.display_name()])
        if contact.nicknames:
            grid.append(["Nicknames", ", ".join(n.value for n in contact.nicknames)])
        if contact.emails:
            grid.append(["Emails", "\n".join(
                _typed(e.value, e.type, e.primary) for e in contact.emails
            )])
        if contact.phones:
            grid.append(["Phones", "\n".join(
                _typed(p.value, p.type, p.primary) for p in contact.phones
            )])
        if contact.organizations:
            grid.append(["Organizations", "\n".join(
                " - ".join(part for part in (o.name, o.title) if part)
                for o in contact.organizations
            )])
        if contact.addresses:
            grid.append(["Addresses", "\n".join(
                a.formatted_value.replace("\n", ", ") or ", ".join(
                    part for part in (a.street_address, a.city, a.region, a.postal_code, a.country)
                    if part
                )
                for a in contact.addresses
            )])
        birthday = _birthday(contact)
        if birthday:
            grid.append(["Birthday", birthday])
        if contact.biographies and contact.biographies[0].value:
            grid.append(["Biography", truncate(contact.biographies[0].value, 60)])
        if contact.urls:
            grid.append(["URLs", "\n".join(u.value for u in contact.urls)])
        if contact.memberships:
            grid.append(["Groups", "\n".join(
                m.contact_group_resource_name for m in contact.memberships
            )])
        return grid.render()

    def render_contacts(self, contacts: Optional[Sequence[Optional[Contact]]]) -> str:
        if not contacts:
            return "No contacts found"

        grid = _Grid(["Resource Name", "Name", "Email", "Phone", "Organization"])
        for contact in contacts:
            if contact is None:
                continue
            org = contact.organizations[0].name if contact.organizations else ""
            grid.append([
                truncate(contact.resource_name, 20),
                truncate(contact.display_name(), 25),
                truncate(contact.primary_email() or "", 30),
                truncate(contact.primary_phone() or "", 15),
                truncate(org, 20),
            ])
        return grid.render()

    def render_contact_group(self, group: Optional[ContactGroup]) -> str:
        if group is None:
            return "No contact group found"

        grid = _field_grid()
        grid.append(["Resource Name", group.resource_name])
        grid.append(["Name", group.name])
        if group.formatted_name:
            grid.append(["Formatted Name", group.formatted_name])
        grid.append(["Type", group.group_type])
        grid.append(["Members", str(group.member_count)])
        if group.metadata is not None and group.metadata.update_time is not None:
            grid.append(["Updated", group.metadata.update_time.strftime(_DATETIME)])
        return grid.render()

    def render_contact_groups(self, groups: Optional[Sequence[Optional[ContactGroup]]]) -> str:
        if not groups:
            return "No contact groups found"

        grid = _Grid(["Resource Name", "Name", "Type", "Members"])
        for group in groups:
            if group is None:
                continue
            grid.append([
                truncate(group.resource_name, 25),
                truncate(group.name, 25),
                group.group_type,
                str(group.member_count),
            ])
        return grid.render()

    # ── Generic ───────────────────────────────────────────────────────────────

    def render_error(self, err: Optional[BaseException]) -> str:
        if err is None:
            return ""
        return f"Error: {err}"

    def render_success(self, msg: str) -> str:
        return f"Success: {msg}"


def _typed(value: str, kind: str, primary: bool) -> str:
    out = f"{value} ({kind})" if kind else value
    return out + " *" if primary else out


def _birthday(contact: Contact) -> str:
    if not contact.birthdays:
        return ""
    first = contact.birthdays[0]
    if first.date is not None:
        return first.date.format()
    return first.text
