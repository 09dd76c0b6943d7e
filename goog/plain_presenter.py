"""
PlainPresenter — line-oriented output for grep, cut and awk.

A single entity is one "Key: Value" line per populated field. A collection
is one tab-separated line per entity, no header. Empty or None input gives
the empty string so nothing reaches a pipe. Line breaks and tabs inside
values become spaces, so every field and every element stays on one line.
No trailing newline.
"""
from __future__ import annotations

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
from .presenter import Presenter

_DATE = "%Y-%m-%d"
_MINUTES = "%Y-%m-%d %H:%M"
_SECONDS = "%Y-%m-%d %H:%M:%S"


def _flag(value: bool) -> str:
    return "true" if value else "false"


_FLATTEN = str.maketrans({"\n": " ", "\r": " ", "\t": " "})


def _flat(value: object) -> str:
    """Collapse line breaks and tabs to single spaces."""
    return str(value).replace("\r\n", " ").translate(_FLATTEN)


def _row(*fields: object) -> str:
    return "\t".join(_flat(f) for f in fields)


def _lines(lines: Sequence[str]) -> str:
    return "\n".join(_flat(line) for line in lines)


class PlainPresenter(Presenter):
    """Formats output as plain text, suitable for piping."""

    # ── Mail ──────────────────────────────────────────────────────────────────

    def render_message(self, msg: Optional[Message]) -> str:
        if msg is None:
            return ""

        lines = [
            f"ID: {msg.id}",
            f"ThreadID: {msg.thread_id}",
            f"From: {msg.sender}",
            f"To: {', '.join(msg.to)}",
        ]
        if msg.cc:
            lines.append(f"Cc: {', '.join(msg.cc)}")
        if msg.bcc:
            lines.append(f"Bcc: {', '.join(msg.bcc)}")
        lines += [
            f"Subject: {msg.subject}",
            f"Date: {msg.date.strftime(_SECONDS)}",
            f"Labels: {', '.join(msg.labels)}",
            f"Read: {_flag(msg.is_read)}",
            f"Starred: {_flag(msg.is_starred)}",
        ]
        if msg.snippet:
            lines.append(f"Snippet: {msg.snippet}")
        if msg.body:
            lines.append(f"Body: {msg.body}")
        return _lines(lines)

    def render_messages(self, msgs: Optional[Sequence[Optional[Message]]]) -> str:
        if not msgs:
            return ""
        return "\n".join(
            _row(m.id, m.sender, m.subject, m.date.strftime(_DATE))
            for m in msgs
            if m is not None
        )

    def render_draft(self, draft: Optional[Draft]) -> str:
        if draft is None:
            return ""

        lines = [
            f"ID: {draft.id}",
            f"Created: {draft.created.strftime(_SECONDS)}",
            f"Updated: {draft.updated.strftime(_SECONDS)}",
        ]
        if draft.message is not None:
            lines += [
                f"MessageID: {draft.message.id}",
                f"To: {', '.join(draft.message.to)}",
                f"Subject: {draft.message.subject}",
            ]
        return _lines(lines)

    def render_drafts(self, drafts: Optional[Sequence[Optional[Draft]]]) -> str:
        if not drafts:
            return ""
        return "\n".join(
            _row(d.id, d.message.subject if d.message else "", d.updated.strftime(_DATE))
            for d in drafts
            if d is not None
        )

    def render_thread(self, thread: Optional[Thread]) -> str:
        if thread is None:
            return ""

        lines = [
            f"ID: {thread.id}",
            f"Messages: {thread.message_count()}",
            f"Labels: {', '.join(thread.labels)}",
        ]
        if thread.snippet:
            lines.append(f"Snippet: {thread.snippet}")
        for i, msg in enumerate(thread.messages):
            if msg is None:
                continue
            lines.append(f"Message[{i}]: {msg.id} from {msg.sender}: {msg.subject}")
        return _lines(lines)

    def render_threads(self, threads: Optional[Sequence[Optional[Thread]]]) -> str:
        if not threads:
            return ""
        return "\n".join(
            _row(t.id, t.message_count(), t.snippet) for t in threads if t is not None
        )

    def render_label(self, label: Optional[Label]) -> str:
        if label is None:
            return ""

        lines = [f"ID: {label.id}", f"Name: {label.name}", f"Type: {label.type}"]
        if label.message_list_visibility:
            lines.append(f"MessageVisibility: {label.message_list_visibility}")
        if label.label_list_visibility:
            lines.append(f"LabelVisibility: {label.label_list_visibility}")
        if label.color is not None:
            lines.append(f"Background: {label.color.background}")
            lines.append(f"TextColor: {label.color.text}")
        return _lines(lines)

    def render_labels(self, labels: Optional[Sequence[Optional[Label]]]) -> str:
        if not labels:
            return ""
        return "\n".join(_row(l.id, l.name, l.type) for l in labels if l is not None)

    # ── Calendar ──────────────────────────────────────────────────────────────

    def render_event(self, event: Optional[Event]) -> str:
        if event is None:
            return ""

        lines = [f"ID: {event.id}", f"Title: {event.title}"]
        if event.description:
            lines.append(f"Description: {event.description}")
        if event.location:
            lines.append(f"Location: {event.location}")

        if event.all_day:
            lines.append(f"Date: {event.start.strftime(_DATE)} (All Day)")
        else:
            lines.append(f"Start: {event.start.strftime(_MINUTES)}")
            lines.append(f"End: {event.end.strftime(_MINUTES)}")

        lines.append(f"Status: {event.status}")
        if event.calendar_id:
            lines.append(f"Calendar: {event.calendar_id}")
        if event.organizer is not None and event.organizer.email:
            lines.append(f"Organizer: {event.organizer.email}")
        if event.attendees:
            lines.append(f"Attendees: {', '.join(a.email for a in event.attendees)}")
        if event.recurrence:
            lines.append(f"Recurrence: {'; '.join(event.recurrence)}")
        if event.has_conference():
            lines.append(f"Conference: {event.conference_data.uri}")
        if event.html_link:
            lines.append(f"Link: {event.html_link}")
        return _lines(lines)

    def render_events(self, events: Optional[Sequence[Optional[Event]]]) -> str:
        if not events:
            return ""

        lines = []
        for event in events:
            if event is None:
                continue
            if event.all_day:
                when = event.start.strftime(_DATE) + " (All Day)"
            else:
                when = event.start.strftime(_MINUTES)
            lines.append(_row(event.id, event.title, when, event.location))
        return "\n".join(lines)

    def render_calendar(self, cal: Optional[Calendar]) -> str:
        if cal is None:
            return ""

        lines = [f"ID: {cal.id}", f"Title: {cal.title}"]
        if cal.description:
            lines.append(f"Description: {cal.description}")
        if cal.time_zone:
            lines.append(f"TimeZone: {cal.time_zone}")
        lines.append(f"Primary: {_flag(cal.primary)}")
        lines.append(f"AccessRole: {cal.access_role}")
        return _lines(lines)

    def render_calendars(self, cals: Optional[Sequence[Optional[Calendar]]]) -> str:
        if not cals:
            return ""
        # Primary calendar is marked with a leading "*"
        return "\n".join(
            _row(("*" if c.primary else "") + c.id, c.title, c.access_role)
            for c in cals
            if c is not None
        )

    def render_acl_rule(self, rule: Optional[ACLRule]) -> str:
        if rule is None:
            return ""

        lines = [f"ID: {rule.id}", f"Role: {rule.role}"]
        if rule.scope is not None:
            lines.append(f"ScopeType: {rule.scope.type}")
            if rule.scope.value:
                lines.append(f"ScopeValue: {rule.scope.value}")
        return _lines(lines)

    def render_acl_rules(self, rules: Optional[Sequence[Optional[ACLRule]]]) -> str:
        if not rules:
            return ""

        lines = []
        for rule in rules:
            if rule is None:
                continue
            scope_type = scope_value = ""
            if rule.scope is not None:
                scope_type, scope_value = rule.scope.type, rule.scope.value
            lines.append(_row(rule.id, rule.role, scope_type, scope_value))
        return "\n".join(lines)

    def render_free_busy(self, response: Optional[FreeBusyResponse]) -> str:
        if response is None:
            return ""

        lines = []
        for calendar_id, periods in response.calendars.items():
            for period in periods:
                if period is None:
                    continue
                lines.append(_row(
                    calendar_id,
                    period.start.strftime(_MINUTES),
                    period.end.strftime(_MINUTES),
                ))
        return "\n".join(lines)

    # ── Account ───────────────────────────────────────────────────────────────

    def render_account(self, acct: Optional[Account]) -> str:
        if acct is None:
            return ""

        lines = [
            f"Alias: {acct.alias}",
            f"Email: {acct.email}",
            f"Default: {_flag(acct.is_default)}",
            f"Added: {acct.added.strftime(_DATE)}",
        ]
        if acct.last_used is not None:
            lines.append(f"LastUsed: {acct.last_used.strftime(_DATE)}")
        lines.append(f"Scopes: {len(acct.scopes)}")
        lines += [f"  - {scope}" for scope in acct.scopes]
        return _lines(lines)

    def render_accounts(self, accts: Optional[Sequence[Optional[Account]]]) -> str:
        if not accts:
            return ""
        # Default account is marked with a leading "*"
        return "\n".join(
            _row(("*" if a.is_default else "") + a.alias, a.email, len(a.scopes))
            for a in accts
            if a is not None
        )

    # ── Tasks ─────────────────────────────────────────────────────────────────

    def render_task_list(self, task_list: Optional[TaskList]) -> str:
        if task_list is None:
            return ""

        lines = [f"ID: {task_list.id}", f"Title: {task_list.title}"]
        if task_list.updated is not None:
            lines.append(f"Updated: {task_list.updated.strftime(_SECONDS)}")
        return _lines(lines)

    def render_task_lists(self, task_lists: Optional[Sequence[Optional[TaskList]]]) -> str:
        if not task_lists:
            return ""
        return "\n".join(
            _row(tl.id, tl.title, tl.updated.strftime(_DATE) if tl.updated else "")
            for tl in task_lists
            if tl is not None
        )

    def render_task(self, task: Optional[Task]) -> str:
        if task is None:
            return ""

        lines = [f"ID: {task.id}", f"Title: {task.title}", f"Status: {task.status}"]
        if task.notes:
            lines.append(f"Notes: {task.notes}")
        if task.due is not None:
            lines.append(f"Due: {task.due.strftime(_DATE)}")
        if task.completed is not None:
            lines.append(f"Completed: {task.completed.strftime(_SECONDS)}")
        if task.parent is not None:
            lines.append(f"Parent: {task.parent}")
        if task.updated is not None:
            lines.append(f"Updated: {task.updated.strftime(_SECONDS)}")
        return _lines(lines)

    def render_tasks(self, tasks: Optional[Sequence[Optional[Task]]]) -> str:
        if not tasks:
            return ""
        return "\n".join(
            _row(t.id, t.title, t.status, t.due.strftime(_DATE) if t.due else "")
            for t in tasks
            if t is not None
        )

    # ── Contacts ──────────────────────────────────────────────────────────────

    def render_contact(self, contact: Optional[Contact]) -> str:
        if contact is None:
            return ""

        lines = [f"ResourceName: {contact.resource_name}", f"Name: {contact.display_name()}"]
        if contact.nicknames:
            lines.append(f"Nicknames: {', '.join(n.value for n in contact.nicknames)}")
        if contact.emails:
            lines.append(f"Emails: {', '.join(e.value for e in contact.emails)}")
        if contact.phones:
            lines.append(f"Phones: {', '.join(p.value for p in contact.phones)}")
        if contact.organizations:
            lines.append(
                f"Organizations: {', '.join(o.name for o in contact.organizations if o.name)}"
            )
        if contact.birthdays:
            first = contact.birthdays[0]
            birthday = first.date.format() if first.date is not None else first.text
            if birthday:
                lines.append(f"Birthday: {birthday}")
        if contact.urls:
            lines.append(f"URLs: {', '.join(u.value for u in contact.urls)}")
        return _lines(lines)

    def render_contacts(self, contacts: Optional[Sequence[Optional[Contact]]]) -> str:
        if not contacts:
            return ""
        return "\n".join(
            _row(
                c.resource_name,
                c.display_name(),
                c.primary_email() or "",
                c.primary_phone() or "",
            )
            for c in contacts
            if c is not None
        )

    def render_contact_group(self, group: Optional[ContactGroup]) -> str:
        if group is None:
            return ""

        lines = [f"ResourceName: {group.resource_name}", f"Name: {group.name}"]
        if group.formatted_name:
            lines.append(f"FormattedName: {group.formatted_name}")
        lines.append(f"Type: {group.group_type}")
        lines.append(f"Members: {group.member_count}")
        if group.metadata is not None and group.metadata.update_time is not None:
            lines.append(f"Updated: {group.metadata.update_time.strftime(_SECONDS)}")
        return _lines(lines)

    def render_contact_groups(self, groups: Optional[Sequence[Optional[ContactGroup]]]) -> str:
        if not groups:
            return ""
        return "\n".join(
            _row(g.resource_name, g.name, g.group_type, g.member_count)
            for g in groups
            if g is not None
        )

    # ── Generic ───────────────────────────────────────────────────────────────

    def render_error(self, err: Optional[BaseException]) -> str:
        if err is None:
            return ""
        return f"error: {err}"

    def render_success(self, msg: str) -> str:
        return msg
