"""
goog — command-line entry point.

Wires argparse subcommands to the API clients and renders every result
through the presenter chosen with -o/--format (or GOOG_FORMAT).

Usage:
    goog account add work me@company.com --default
    goog mail list --query "is:unread" --max 5
    goog mail send --to bob@example.com --subject Hi --body "See you at 3"
    goog cal create --title Standup --start 2026-10-19T09:30
    goog tasks create "Renew passport" --due 2026-11-01
    goog -o json cal events --days 3
    goog tasks list --all
    goog cal freebusy --start 2026-10-19T09:00 --end 2026-10-19T17:00 primary
"""
from __future__ import annotations

import argparse
import email.utils
import logging
import sys
from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .base import BaseCommand, setup_logging
from .calendar_client import CalendarClient
from .config import AccountStore, Settings
from .contacts_client import ContactsClient
from .exceptions import ValidationError
from .gmail_client import GmailClient
from .google_factory import ALL_SCOPES, GoogleServiceFactory
from .models import (
    ACCESS_ROLE_READER,
    DEFAULT_TASKLIST,
    RESPONSE_ACCEPTED,
    RESPONSE_DECLINED,
    RESPONSE_TENTATIVE,
    Account,
    Biography,
    Message,
    Name,
    is_valid_access_role,
    is_valid_email,
    new_account,
    new_acl_rule,
    new_all_day_event,
    new_attendee,
    new_contact,
    new_event,
    new_free_busy_request,
    new_user_acl_scope,
)
from .presenter import FORMATS, Presenter, new_presenter
from .tasks_client import TasksClient

logger = logging.getLogger(__name__)


# ── Session ───────────────────────────────────────────────────────────────────

class Session:
    """
    Per-invocation state shared by commands: settings, the account store and
    lazily-built API clients for the selected account.
    """

    def __init__(self, settings: Settings, store: AccountStore, alias: str = "") -> None:
        self.settings = settings
        self.store = store
        self.alias = alias
        self._factory: Optional[GoogleServiceFactory] = None

    @property
    def account(self) -> Account:
        """The --account / GOOG_ACCOUNT alias, else the store's default."""
        if self.alias:
            return self.store.get(self.alias)
        return self.store.get_default()

    @property
    def tz(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.settings.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValidationError(f"unknown timezone: {self.settings.timezone}") from exc

    @property
    def factory(self) -> GoogleServiceFactory:
        if self._factory is None:
            acct = self.account
            logger.debug("Using account %s <%s>", acct.alias, acct.email)
            self._factory = GoogleServiceFactory(
                token_file=self.settings.token_file(acct.alias),
                client_secret_file=self.settings.client_secret_file,
                scopes=acct.scopes or None,
            )
            self.store.touch(acct.alias)
        return self._factory

    @property
    def gmail(self) -> GmailClient:
        return GmailClient(self.factory)

    @property
    def calendar(self) -> CalendarClient:
        return CalendarClient(self.factory, local_tz=self.tz)

    @property
    def contacts(self) -> ContactsClient:
        return ContactsClient(self.factory)

    @property
    def tasks(self) -> TasksClient:
        return TasksClient(self.factory)


class Command(BaseCommand):
    """A BaseCommand bound to the invocation's Session."""

    def __init__(self, presenter: Presenter, session: Session) -> None:
        super().__init__(presenter)
        self.session = session


# ── account ───────────────────────────────────────────────────────────────────

class AccountList(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_accounts(self.session.store.list())


class AccountAdd(Command):
    def run(self, args: argparse.Namespace) -> str:
        acct = new_account(args.alias, args.email)
        acct.is_default = args.default
        for scope in ALL_SCOPES:
            acct.add_scope(scope)
        self.session.store.save(acct)
        return self.presenter.render_success(f"Added account {acct.alias}")


class AccountShow(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_account(self.session.store.get(args.alias))


class AccountDefault(Command):
    def run(self, args: argparse.Namespace) -> str:
        acct = self.session.store.set_default(args.alias)
        return self.presenter.render_success(f"Default account is now {acct.alias}")


class AccountRemove(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.store.delete(args.alias)
        return self.presenter.render_success(f"Removed account {args.alias}")


# ── mail / thread / draft / label ─────────────────────────────────────────────

class MailList(Command):
    def run(self, args: argparse.Namespace) -> str:
        msgs = self.session.gmail.list_messages(query=args.query, max_results=args.max)
        self.logger.info("Fetched %d messages", len(msgs))
        return self.presenter.render_messages(msgs)


class MailShow(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_message(self.session.gmail.get_message(args.id))


class MailRead(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.gmail.mark_as_read(args.id)
        return self.presenter.render_success(f"Marked message {args.id} as read")


class MailUnread(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.gmail.mark_as_unread(args.id)
        return self.presenter.render_success(f"Marked message {args.id} as unread")


class MailTrash(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.gmail.trash_message(args.id)
        return self.presenter.render_success(f"Moved message {args.id} to trash")


class MailUntrash(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.gmail.untrash_message(args.id)
        return self.presenter.render_success(f"Restored message {args.id} from trash")


class MailArchive(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.gmail.archive_message(args.id)
        return self.presenter.render_success(f"Archived message {args.id}")


class MailModify(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.gmail.modify_labels(args.id, add=args.add, remove=args.remove)
        return self.presenter.render_success(f"Updated labels on message {args.id}")


class MailSend(Command):
    def run(self, args: argparse.Namespace) -> str:
        sent = self.session.gmail.send_message(_compose(args))
        self.logger.info("Sent message %s", sent.id)
        return self.presenter.render_message(sent)


class MailReply(Command):
    def run(self, args: argparse.Namespace) -> str:
        sent = self.session.gmail.reply_to_message(
            args.id,
            args.body,
            reply_all=args.all,
            self_email=self.session.account.email,
        )
        return self.presenter.render_message(sent)


class MailForward(Command):
    def run(self, args: argparse.Namespace) -> str:
        sent = self.session.gmail.forward_message(
            args.id, _recipients(args.to), intro=args.body
        )
        return self.presenter.render_message(sent)


def _recipients(addresses: Optional[list[str]]) -> list[str]:
    """Validate "addr" or "Name <addr>" recipients; raises ValidationError."""
    result = []
    for address in addresses or []:
        if not is_valid_email(email.utils.parseaddr(address)[1]):
            raise ValidationError(f"invalid email address: {address}")
        result.append(address)
    return result


def _compose(args: argparse.Namespace) -> Message:
    return Message(
        id="",
        to=_recipients(args.to),
        cc=_recipients(args.cc),
        bcc=_recipients(args.bcc),
        subject=args.subject,
        body=args.body,
        body_html=args.html,
    )


class ThreadList(Command):
    def run(self, args: argparse.Namespace) -> str:
        threads = self.session.gmail.list_threads(query=args.query, max_results=args.max)
        return self.presenter.render_threads(threads)


class ThreadShow(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_thread(self.session.gmail.get_thread(args.id))


class DraftList(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_drafts(self.session.gmail.list_drafts(max_results=args.max))


class DraftShow(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_draft(self.session.gmail.get_draft(args.id))


class DraftCreate(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_draft(self.session.gmail.create_draft(_compose(args)))


class DraftSend(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_message(self.session.gmail.send_draft(args.id))


class DraftDelete(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.gmail.delete_draft(args.id)
        return self.presenter.render_success(f"Deleted draft {args.id}")


class LabelList(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_labels(self.session.gmail.list_labels())


class LabelShow(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_label(self.session.gmail.get_label(args.id))


class LabelCreate(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_label(self.session.gmail.create_label(args.name))


class LabelDelete(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.gmail.delete_label(args.id)
        return self.presenter.render_success(f"Deleted label {args.id}")


# ── cal ───────────────────────────────────────────────────────────────────────

class CalEvents(Command):
    def run(self, args: argparse.Namespace) -> str:
        if args.days < 1:
            raise ValidationError("--days must be at least 1")
        start = datetime.now(self.session.tz)
        end = start + timedelta(days=args.days)
        events = self.session.calendar.list_events(
            args.calendar, start, end, query=args.query
        )
        self.logger.info("Fetched %d events from %s", len(events), args.calendar)
        return self.presenter.render_events(events)


class CalEvent(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_event(
            self.session.calendar.get_event(args.calendar, args.id)
        )


class CalDelete(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.calendar.delete_event(args.calendar, args.id)
        return self.presenter.render_success(f"Deleted event {args.id}")


class CalCreate(Command):
    """
    Create an event. Timed events default to one hour; with --all-day the
    event covers the --start day through the --end day (inclusive).
    """

    def run(self, args: argparse.Namespace) -> str:
        tz = self.session.tz
        start = _localize(args.start, tz)
        if args.all_day:
            event = new_all_day_event(args.title, start)
            if args.end is not None:
                event.end = new_all_day_event(args.title, _localize(args.end, tz)).end
        else:
            end = _localize(args.end, tz) if args.end is not None else start + timedelta(hours=1)
            event = new_event(args.title, start, end)
        event.location = args.location
        event.description = args.description
        for address in _recipients(args.attendees):
            event.add_attendee(new_attendee(email.utils.parseaddr(address)[1]))
        created = self.session.calendar.create_event(args.calendar, event, notify=args.notify)
        return self.presenter.render_event(created)


class CalUpdate(Command):
    def run(self, args: argparse.Namespace) -> str:
        tz = self.session.tz
        cal = self.session.calendar
        event = cal.get_event(args.calendar, args.id)
        if args.start is not None:
            # Moving the start keeps the duration unless --end is also given
            duration = event.duration()
            event.start = _localize(args.start, tz)
            event.end = event.start + duration
        if args.end is not None:
            event.end = _localize(args.end, tz)
        if args.title is not None:
            event.title = args.title
        if args.location is not None:
            event.location = args.location
        if args.description is not None:
            event.description = args.description
        return self.presenter.render_event(cal.update_event(args.calendar, event))


class CalQuick(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_event(
            self.session.calendar.quick_add(args.calendar, args.text)
        )


class CalInstances(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_events(
            self.session.calendar.list_instances(args.calendar, args.id, max_results=args.max)
        )


class CalRsvp(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_event(
            self.session.calendar.rsvp(args.calendar, args.id, args.response)
        )


class CalCalendars(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_calendars(self.session.calendar.list_calendars())


class CalCalendar(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_calendar(self.session.calendar.get_calendar(args.id))


class CalAcl(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_acl_rules(self.session.calendar.list_acl(args.calendar))


class CalShare(Command):
    def run(self, args: argparse.Namespace) -> str:
        if not is_valid_access_role(args.role):
            raise ValidationError(f"invalid role: {args.role}")
        rule = new_acl_rule(new_user_acl_scope(args.email), args.role)
        created = self.session.calendar.insert_acl_rule(args.calendar, rule)
        return self.presenter.render_acl_rule(created)


class CalUnshare(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.calendar.delete_acl_rule(args.calendar, args.rule_id)
        return self.presenter.render_success(f"Removed ACL rule {args.rule_id}")


class CalFreeBusy(Command):
    def run(self, args: argparse.Namespace) -> str:
        tz = self.session.tz
        start = _localize(args.start, tz)
        end = _localize(args.end, tz)
        request = new_free_busy_request(start, end, *(args.calendars or ["primary"]))
        return self.presenter.render_free_busy(self.session.calendar.query_free_busy(request))


def _localize(dt: datetime, tz: ZoneInfo) -> datetime:
    """Attach `tz` to naive datetimes; aware ones pass through."""
    return dt.replace(tzinfo=tz) if dt.tzinfo is None else dt


def _iso_datetime(value: str) -> datetime:
    """argparse type: ISO 8601 date or datetime ('Z' suffix accepted)."""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO 8601 date/time: {value!r}") from None


# ── contacts ──────────────────────────────────────────────────────────────────

class ContactsList(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_contacts(
            self.session.contacts.list_contacts(max_results=args.max)
        )


class ContactsShow(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_contact(self.session.contacts.get_contact(args.resource))


class ContactsSearch(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_contacts(self.session.contacts.search_contacts(args.query))


class ContactsCreate(Command):
    def run(self, args: argparse.Namespace) -> str:
        contact = new_contact()
        if args.given_name or args.family_name:
            contact.names.append(Name(given_name=args.given_name, family_name=args.family_name))
        for i, address in enumerate(args.email or []):
            contact.add_email(address, primary=i == 0)
        for i, phone in enumerate(args.phone or []):
            contact.add_phone(phone, primary=i == 0)
        if args.notes:
            contact.biographies.append(Biography(value=args.notes))
        return self.presenter.render_contact(self.session.contacts.create_contact(contact))


class ContactsDelete(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.contacts.delete_contact(args.resource)
        return self.presenter.render_success(f"Deleted contact {args.resource}")


class ContactsGroupAdd(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.contacts.add_group_members(args.group, args.contacts)
        return self.presenter.render_success(
            f"Added {len(args.contacts)} contact(s) to {args.group}"
        )


class ContactsGroupRemove(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.contacts.remove_group_members(args.group, args.contacts)
        return self.presenter.render_success(
            f"Removed {len(args.contacts)} contact(s) from {args.group}"
        )


class ContactsGroups(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_contact_groups(self.session.contacts.list_groups())


class ContactsGroup(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_contact_group(
            self.session.contacts.get_group(args.resource)
        )


# ── tasks ─────────────────────────────────────────────────────────────────────

class TasksLists(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_task_lists(self.session.tasks.list_task_lists())


class TasksList(Command):
    def run(self, args: argparse.Namespace) -> str:
        tasks = self.session.tasks.list_tasks(args.list, include_completed=args.all)
        return self.presenter.render_tasks(tasks)


class TasksShow(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_task(self.session.tasks.get_task(args.id, args.list))


class TasksDone(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_task(self.session.tasks.complete_task(args.id, args.list))


class TasksDelete(Command):
    def run(self, args: argparse.Namespace) -> str:
        self.session.tasks.delete_task(args.id, args.list)
        return self.presenter.render_success(f"Deleted task {args.id}")


class TasksCreate(Command):
    def run(self, args: argparse.Namespace) -> str:
        due = _localize(args.due, self.session.tz) if args.due is not None else None
        task = self.session.tasks.create_task(
            args.title, args.list, due=due, notes=args.notes, parent_id=args.parent
        )
        return self.presenter.render_task(task)


class TasksUpdate(Command):
    def run(self, args: argparse.Namespace) -> str:
        due = _localize(args.due, self.session.tz) if args.due is not None else None
        task = self.session.tasks.update_task(
            args.id, args.list, title=args.title, notes=args.notes, due=due
        )
        return self.presenter.render_task(task)


class TasksReopen(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_task(self.session.tasks.reopen_task(args.id, args.list))


class TasksCreateList(Command):
    def run(self, args: argparse.Namespace) -> str:
        return self.presenter.render_task_list(self.session.tasks.create_task_list(args.title))


# ── Parser ────────────────────────────────────────────────────────────────────

def _group(subparsers, name: str, help_text: str):
    parser = subparsers.add_parser(name, help=help_text)
    commands = parser.add_subparsers(dest="action", metavar="COMMAND")
    commands.required = True
    return commands


def _command(commands, name: str, cls: type[Command], help_text: str) -> argparse.ArgumentParser:
    parser = commands.add_parser(name, help=help_text)
    parser.set_defaults(command=cls)
    return parser


def _compose_arguments(parser: argparse.ArgumentParser, to_required: bool) -> None:
    parser.add_argument("--to", nargs="+", required=to_required, metavar="ADDR")
    parser.add_argument("--cc", nargs="+", metavar="ADDR")
    parser.add_argument("--bcc", nargs="+", metavar="ADDR")
    parser.add_argument("--subject", default="")
    parser.add_argument("--body", default="")
    parser.add_argument("--html", default="", help="HTML body (sent alongside --body)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="goog", description="goog — Google Workspace from the command line"
    )
    parser.add_argument(
        "-o", "--format", metavar="FMT",
        help=f"Output format: {', '.join(FORMATS)} (default: $GOOG_FORMAT or table)",
    )
    parser.add_argument("--account", metavar="ALIAS", help="Account alias to use")
    parser.add_argument("--debug", action="store_true")
    groups = parser.add_subparsers(dest="group", metavar="GROUP")
    groups.required = True

    # account
    g = _group(groups, "account", "Manage configured accounts")
    _command(g, "list", AccountList, "List accounts")
    p = _command(g, "add", AccountAdd, "Add an account")
    p.add_argument("alias")
    p.add_argument("email")
    p.add_argument("--default", action="store_true", help="Make it the default account")
    for name, cls, text in (
        ("show", AccountShow, "Show an account"),
        ("default", AccountDefault, "Set the default account"),
        ("remove", AccountRemove, "Remove an account"),
    ):
        _command(g, name, cls, text).add_argument("alias")

    # mail
    g = _group(groups, "mail", "Gmail messages")
    p = _command(g, "list", MailList, "List messages")
    p.add_argument("--query", default="", help='Gmail search query, e.g. "is:unread"')
    p.add_argument("--max", type=int, default=20, metavar="N")
    for name, cls, text in (
        ("show", MailShow, "Show a message"),
        ("read", MailRead, "Mark a message as read"),
        ("unread", MailUnread, "Mark a message as unread"),
        ("trash", MailTrash, "Move a message to trash"),
        ("untrash", MailUntrash, "Restore a message from trash"),
        ("archive", MailArchive, "Remove a message from the inbox"),
    ):
        _command(g, name, cls, text).add_argument("id")
    p = _command(g, "modify", MailModify, "Add or remove labels on a message")
    p.add_argument("id")
    p.add_argument("--add", nargs="+", metavar="LABEL")
    p.add_argument("--remove", nargs="+", metavar="LABEL")
    _compose_arguments(_command(g, "send", MailSend, "Send a message"), to_required=True)
    p = _command(g, "reply", MailReply, "Reply to a message")
    p.add_argument("id")
    p.add_argument("--body", required=True)
    p.add_argument("--all", action="store_true", help="Reply to all recipients")
    p = _command(g, "forward", MailForward, "Forward a message")
    p.add_argument("id")
    p.add_argument("--to", nargs="+", required=True, metavar="ADDR")
    p.add_argument("--body", default="", help="Text above the forwarded message")

    # thread
    g = _group(groups, "thread", "Gmail threads")
    p = _command(g, "list", ThreadList, "List threads")
    p.add_argument("--query", default="")
    p.add_argument("--max", type=int, default=20, metavar="N")
    _command(g, "show", ThreadShow, "Show a thread").add_argument("id")

    # draft
    g = _group(groups, "draft", "Gmail drafts")
    p = _command(g, "list", DraftList, "List drafts")
    p.add_argument("--max", type=int, default=20, metavar="N")
    _command(g, "show", DraftShow, "Show a draft").add_argument("id")
    _compose_arguments(_command(g, "create", DraftCreate, "Save a new draft"), to_required=False)
    _command(g, "send", DraftSend, "Send a draft").add_argument("id")
    _command(g, "delete", DraftDelete, "Delete a draft").add_argument("id")

    # label
    g = _group(groups, "label", "Gmail labels")
    _command(g, "list", LabelList, "List labels")
    _command(g, "show", LabelShow, "Show a label").add_argument("id")
    _command(g, "create", LabelCreate, "Create a label").add_argument("name")
    _command(g, "delete", LabelDelete, "Delete a label").add_argument("id")

    # cal
    g = _group(groups, "cal", "Google Calendar")
    p = _command(g, "events", CalEvents, "List upcoming events")
    p.add_argument("--calendar", default="primary")
    p.add_argument("--days", type=int, default=7, metavar="N")
    p.add_argument("--query", default=None)
    for name, cls, text in (
        ("event", CalEvent, "Show an event"),
        ("delete", CalDelete, "Delete an event"),
    ):
        p = _command(g, name, cls, text)
        p.add_argument("id")
        p.add_argument("--calendar", default="primary")
    p = _command(g, "create", CalCreate, "Create an event")
    p.add_argument("--title", required=True)
    p.add_argument("--start", type=_iso_datetime, required=True, metavar="T")
    p.add_argument("--end", type=_iso_datetime, default=None, metavar="T",
                   help="Default: one hour after --start")
    p.add_argument("--all-day", action="store_true")
    p.add_argument("--location", default="")
    p.add_argument("--description", default="")
    p.add_argument("--attendees", nargs="+", metavar="ADDR")
    p.add_argument("--notify", action="store_true", help="Email invitations to attendees")
    p.add_argument("--calendar", default="primary")
    p = _command(g, "update", CalUpdate, "Change an event")
    p.add_argument("id")
    p.add_argument("--title")
    p.add_argument("--start", type=_iso_datetime, metavar="T")
    p.add_argument("--end", type=_iso_datetime, metavar="T")
    p.add_argument("--location")
    p.add_argument("--description")
    p.add_argument("--calendar", default="primary")
    p = _command(g, "quick", CalQuick, "Create an event from free text")
    p.add_argument("text")
    p.add_argument("--calendar", default="primary")
    p = _command(g, "instances", CalInstances, "List occurrences of a recurring event")
    p.add_argument("id")
    p.add_argument("--max", type=int, default=25, metavar="N")
    p.add_argument("--calendar", default="primary")
    p = _command(g, "rsvp", CalRsvp, "Respond to an invitation")
    p.add_argument("id")
    p.add_argument("--calendar", default="primary")
    answer = p.add_mutually_exclusive_group(required=True)
    answer.add_argument("--accept", dest="response", action="store_const",
                        const=RESPONSE_ACCEPTED)
    answer.add_argument("--decline", dest="response", action="store_const",
                        const=RESPONSE_DECLINED)
    answer.add_argument("--tentative", dest="response", action="store_const",
                        const=RESPONSE_TENTATIVE)
    _command(g, "calendars", CalCalendars, "List calendars")
    _command(g, "calendar", CalCalendar, "Show a calendar").add_argument("id")
    _command(g, "acl", CalAcl, "List sharing rules").add_argument("calendar")
    p = _command(g, "share", CalShare, "Share a calendar with a user")
    p.add_argument("calendar")
    p.add_argument("email")
    p.add_argument("--role", default=ACCESS_ROLE_READER)
    p = _command(g, "unshare", CalUnshare, "Remove a sharing rule")
    p.add_argument("calendar")
    p.add_argument("rule_id")
    p = _command(g, "freebusy", CalFreeBusy, "Query busy periods")
    p.add_argument("--start", type=_iso_datetime, required=True, metavar="T")
    p.add_argument("--end", type=_iso_datetime, required=True, metavar="T")
    p.add_argument("calendars", nargs="*", metavar="CAL")

    # contacts
    g = _group(groups, "contacts", "Google Contacts")
    p = _command(g, "list", ContactsList, "List contacts")
    p.add_argument("--max", type=int, default=100, metavar="N")
    _command(g, "show", ContactsShow, "Show a contact").add_argument("resource")
    _command(g, "search", ContactsSearch, "Search contacts").add_argument("query")
    _command(g, "groups", ContactsGroups, "List contact groups")
    _command(g, "group", ContactsGroup, "Show a contact group").add_argument("resource")
    p = _command(g, "create", ContactsCreate, "Create a contact")
    p.add_argument("--given-name", default="")
    p.add_argument("--family-name", default="")
    p.add_argument("--email", action="append", metavar="ADDR", help="Repeatable; first is primary")
    p.add_argument("--phone", action="append", metavar="NUM", help="Repeatable; first is primary")
    p.add_argument("--notes", default="")
    _command(g, "delete", ContactsDelete, "Delete a contact").add_argument("resource")
    for name, cls, text in (
        ("group-add", ContactsGroupAdd, "Add contacts to a group"),
        ("group-remove", ContactsGroupRemove, "Remove contacts from a group"),
    ):
        p = _command(g, name, cls, text)
        p.add_argument("group")
        p.add_argument("contacts", nargs="+", metavar="CONTACT")

    # tasks
    g = _group(groups, "tasks", "Google Tasks")
    _command(g, "lists", TasksLists, "List task lists")
    p = _command(g, "list", TasksList, "List tasks")
    p.add_argument("--list", default=DEFAULT_TASKLIST, metavar="L")
    p.add_argument("--all", action="store_true", help="Include completed tasks")
    for name, cls, text in (
        ("show", TasksShow, "Show a task"),
        ("done", TasksDone, "Complete a task"),
        ("delete", TasksDelete, "Delete a task"),
        ("reopen", TasksReopen, "Mark a completed task as not done"),
    ):
        p = _command(g, name, cls, text)
        p.add_argument("id")
        p.add_argument("--list", default=DEFAULT_TASKLIST, metavar="L")
    p = _command(g, "create", TasksCreate, "Create a task")
    p.add_argument("title")
    p.add_argument("--notes", default="")
    p.add_argument("--due", type=_iso_datetime, metavar="DATE")
    p.add_argument("--parent", metavar="ID", help="Create as a subtask")
    p.add_argument("--list", default=DEFAULT_TASKLIST, metavar="L")
    p = _command(g, "update", TasksUpdate, "Change a task")
    p.add_argument("id")
    p.add_argument("--title")
    p.add_argument("--notes")
    p.add_argument("--due", type=_iso_datetime, metavar="DATE")
    p.add_argument("--list", default=DEFAULT_TASKLIST, metavar="L")
    _command(g, "create-list", TasksCreateList, "Create a task list").add_argument("title")

    return parser


# ── Entry point ───────────────────────────────────────────────────────────────

def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    setup_logging(
        "goog",
        logging.DEBUG if args.debug else logging.WARNING,
        settings.log_dir,
    )

    presenter = new_presenter(args.format or settings.output_format)
    session = Session(
        settings,
        AccountStore(settings.accounts_file),
        args.account or settings.account,
    )
    command = args.command(presenter, session)

    try:
        output, status = command.execute(args)
    except Exception:
        # Already logged with traceback by BaseCommand.execute
        return 1

    if output:
        print(output, file=sys.stdout if status == 0 else sys.stderr)
    return status


if __name__ == "__main__":
    sys.exit(main())
