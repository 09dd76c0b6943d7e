"""
Typed data models for all Google Workspace resources handled by goog.

All classes are plain dataclasses — no external dependencies, safe to import
anywhere. Business logic that touches the network lives in the client
classes; what stays here are the invariants the values themselves carry:
enumerated-field predicates, access-role hierarchies and time-range checks.

Enumerated predicates (is_valid_*) are exact, case-sensitive set membership.
No trimming or case folding is done; callers pass canonical API values.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Optional

from .exceptions import (
    InvalidAliasError,
    InvalidEmailError,
    InvalidTimeRangeError,
    ValidationError,
)


def _now() -> datetime:
    return datetime.now().astimezone()


# ── Account ───────────────────────────────────────────────────────────────────

@dataclass
class Account:
    """A Google account configured for use with the CLI."""

    alias: str
    email: str
    scopes: list[str] = field(default_factory=list)
    added: datetime = field(default_factory=_now)
    last_used: Optional[datetime] = None
    is_default: bool = False

    def validate(self) -> None:
        """Raise InvalidAliasError / InvalidEmailError when the account is unusable."""
        if not self.alias.strip():
            raise InvalidAliasError()
        _validate_account_email(self.email)

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes

    def add_scope(self, scope: str) -> None:
        if not self.has_scope(scope):
            self.scopes.append(scope)

    def remove_scope(self, scope: str) -> None:
        if scope in self.scopes:
            self.scopes.remove(scope)

    def to_dict(self) -> dict[str, Any]:
        """Structured wire form (same shape the JSON presenter emits)."""
        return {
            "alias": self.alias,
            "email": self.email,
            "scopes": list(self.scopes),
            "added": self.added.isoformat(),
            "last_used": self.last_used.isoformat() if self.last_used else None,
            "is_default": self.is_default,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Account:
        added = data.get("added")
        last_used = data.get("last_used")
        return cls(
            alias=data.get("alias", ""),
            email=data.get("email", ""),
            scopes=list(data.get("scopes") or []),
            added=datetime.fromisoformat(added) if added else _now(),
            last_used=datetime.fromisoformat(last_used) if last_used else None,
            is_default=bool(data.get("is_default", False)),
        )


def new_account(alias: str, email: str) -> Account:
    """Create an Account stamped with the current time, no scopes, not default."""
    return Account(alias=alias, email=email, scopes=[], added=_now(), is_default=False)


def is_valid_email(email: str) -> bool:
    """A bare local@domain address: one '@', both sides non-empty, no spaces."""
    if not email or " " in email:
        return False
    parts = email.split("@")
    return len(parts) == 2 and bool(parts[0]) and bool(parts[1])


def _validate_account_email(email: str) -> None:
    if not is_valid_email(email):
        raise InvalidEmailError()


# ── Mail ──────────────────────────────────────────────────────────────────────

LABEL_TYPE_SYSTEM = "system"
LABEL_TYPE_USER = "user"

LABEL_VISIBILITY_SHOW = "show"
LABEL_VISIBILITY_HIDE = "hide"
LABEL_VISIBILITY_SHOW_IF_UNREAD = "showIfUnread"
LABEL_VISIBILITY_LABEL_SHOW = "labelShow"
LABEL_VISIBILITY_LABEL_SHOW_IF_UNREAD = "labelShowIfUnread"
LABEL_VISIBILITY_LABEL_HIDE = "labelHide"


@dataclass
class Message:
    """A single Gmail message."""

    id: str
    thread_id: str = ""
    sender: str = ""
    to: list[str] = field(default_factory=list)
    cc: list[str] = field(default_factory=list)
    bcc: list[str] = field(default_factory=list)
    subject: str = ""
    body: str = ""
    body_html: str = ""
    labels: list[str] = field(default_factory=list)
    date: datetime = field(default_factory=_now)
    is_read: bool = False
    is_starred: bool = False
    snippet: str = ""

    def add_recipient(self, address: str) -> None:
        self.to.append(address)

    def add_cc(self, address: str) -> None:
        self.cc.append(address)

    def add_bcc(self, address: str) -> None:
        self.bcc.append(address)

    def add_label(self, label: str) -> None:
        self.labels.append(label)

    def remove_label(self, label: str) -> None:
        if label in self.labels:
            self.labels.remove(label)

    def has_label(self, label: str) -> bool:
        return label in self.labels

    def mark_as_read(self) -> None:
        self.is_read = True

    def mark_as_unread(self) -> None:
        self.is_read = False

    def star(self) -> None:
        self.is_starred = True

    def unstar(self) -> None:
        self.is_starred = False


def new_message(id: str, thread_id: str, sender: str, subject: str, body: str) -> Message:
    return Message(
        id=id, thread_id=thread_id, sender=sender, subject=subject, body=body, date=_now()
    )


@dataclass
class Draft:
    """A Gmail draft. The embedded message may be missing."""

    id: str
    message: Optional[Message] = None
    created: datetime = field(default_factory=_now)
    updated: datetime = field(default_factory=_now)

    def update_message(self, message: Optional[Message]) -> None:
        self.message = message
        self.updated = _now()

    def touch(self) -> None:
        self.updated = _now()


def new_draft(id: str, message: Optional[Message]) -> Draft:
    now = _now()
    return Draft(id=id, message=message, created=now, updated=now)


@dataclass
class Thread:
    """A Gmail conversation. `messages` may contain None placeholders."""

    id: str
    messages: list[Optional[Message]] = field(default_factory=list)
    snippet: str = ""
    labels: list[str] = field(default_factory=list)

    def add_message(self, message: Optional[Message]) -> None:
        self.messages.append(message)

    def message_count(self) -> int:
        """Number of real (non-None) messages."""
        return sum(1 for m in self.messages if m is not None)

    def latest_message(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None

    def first_message(self) -> Optional[Message]:
        return self.messages[0] if self.messages else None

    def add_label(self, label: str) -> None:
        self.labels.append(label)

    def remove_label(self, label: str) -> None:
        if label in self.labels:
            self.labels.remove(label)

    def has_label(self, label: str) -> bool:
        return label in self.labels


def new_thread(id: str) -> Thread:
    return Thread(id=id)


@dataclass
class LabelColor:
    background: str
    text: str


@dataclass
class Label:
    """A Gmail label (system or user)."""

    id: str
    name: str
    type: str = LABEL_TYPE_USER
    message_list_visibility: str = ""
    label_list_visibility: str = ""
    color: Optional[LabelColor] = None

    def is_system_label(self) -> bool:
        return self.type == LABEL_TYPE_SYSTEM

    def is_user_label(self) -> bool:
        return self.type == LABEL_TYPE_USER

    def set_color(self, background: str, text: str) -> None:
        self.color = LabelColor(background=background, text=text)

    def clear_color(self) -> None:
        self.color = None

    def has_color(self) -> bool:
        return self.color is not None


def new_label(id: str, name: str) -> Label:
    return Label(id=id, name=name, type=LABEL_TYPE_USER)


def new_system_label(id: str, name: str) -> Label:
    return Label(id=id, name=name, type=LABEL_TYPE_SYSTEM)


def is_valid_label_type(label_type: str) -> bool:
    return label_type in (LABEL_TYPE_SYSTEM, LABEL_TYPE_USER)


# ── Calendar ──────────────────────────────────────────────────────────────────

STATUS_CONFIRMED = "confirmed"
STATUS_TENTATIVE = "tentative"
STATUS_CANCELLED = "cancelled"

VISIBILITY_PUBLIC = "public"
VISIBILITY_PRIVATE = "private"

REMINDER_METHOD_EMAIL = "email"
REMINDER_METHOD_POPUP = "popup"

RESPONSE_NEEDS_ACTION = "needsAction"
RESPONSE_DECLINED = "declined"
RESPONSE_TENTATIVE = "tentative"
RESPONSE_ACCEPTED = "accepted"

ACCESS_ROLE_OWNER = "owner"
ACCESS_ROLE_WRITER = "writer"
ACCESS_ROLE_READER = "reader"
ACCESS_ROLE_FREE_BUSY_READER = "freeBusyReader"

ACL_SCOPE_TYPE_USER = "user"
ACL_SCOPE_TYPE_GROUP = "group"
ACL_SCOPE_TYPE_DOMAIN = "domain"
ACL_SCOPE_TYPE_DEFAULT = "default"

_WRITE_ROLES = frozenset({ACCESS_ROLE_OWNER, ACCESS_ROLE_WRITER})
_READ_ROLES = frozenset({ACCESS_ROLE_OWNER, ACCESS_ROLE_WRITER, ACCESS_ROLE_READER})


@dataclass
class Attendee:
    """A participant in a calendar event."""

    email: str
    display_name: str = ""
    response_status: str = RESPONSE_NEEDS_ACTION
    optional: bool = False
    organizer: bool = False
    is_self: bool = False


def new_attendee(email: str) -> Attendee:
    return Attendee(email=email, response_status=RESPONSE_NEEDS_ACTION)


def is_valid_response_status(status: str) -> bool:
    return status in (
        RESPONSE_NEEDS_ACTION,
        RESPONSE_DECLINED,
        RESPONSE_TENTATIVE,
        RESPONSE_ACCEPTED,
    )


@dataclass
class Reminder:
    method: str
    minutes: int


def new_reminder(method: str, minutes: int) -> Reminder:
    return Reminder(method=method, minutes=minutes)


def is_valid_reminder_method(method: str) -> bool:
    return method in (REMINDER_METHOD_EMAIL, REMINDER_METHOD_POPUP)


@dataclass
class ConferenceData:
    """Video conference attached to an event (e.g. type 'hangoutsMeet')."""

    type: str = ""
    uri: str = ""


@dataclass
class Event:
    """A Google Calendar event."""

    id: str
    title: str
    start: datetime
    end: datetime
    calendar_id: str = ""
    description: str = ""
    location: str = ""
    all_day: bool = False
    recurrence: list[str] = field(default_factory=list)
    attendees: list[Attendee] = field(default_factory=list)
    organizer: Optional[Attendee] = None
    status: str = STATUS_CONFIRMED
    visibility: str = VISIBILITY_PRIVATE
    color_id: str = ""
    reminders: list[Reminder] = field(default_factory=list)
    conference_data: Optional[ConferenceData] = None
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    html_link: str = ""

    def duration(self) -> timedelta:
        return self.end - self.start

    def is_recurring(self) -> bool:
        return len(self.recurrence) > 0

    def has_conference(self) -> bool:
        return self.conference_data is not None and self.conference_data.uri != ""

    def add_attendee(self, attendee: Attendee) -> None:
        self.attendees.append(attendee)

    def add_reminder(self, reminder: Reminder) -> None:
        self.reminders.append(reminder)


def new_event(title: str, start: datetime, end: datetime) -> Event:
    """Create a timed event, confirmed and private."""
    return Event(id="", title=title, start=start, end=end)


def new_all_day_event(title: str, day: datetime) -> Event:
    """Create an all-day event spanning local midnight to the next midnight."""
    start = day.replace(hour=0, minute=0, second=0, microsecond=0)
    return Event(id="", title=title, start=start, end=start + timedelta(days=1), all_day=True)


def is_valid_status(status: str) -> bool:
    return status in (STATUS_CONFIRMED, STATUS_TENTATIVE, STATUS_CANCELLED)


def is_valid_visibility(visibility: str) -> bool:
    return visibility in (VISIBILITY_PUBLIC, VISIBILITY_PRIVATE)


@dataclass
class Calendar:
    """A calendar as seen from the current user's calendar list."""

    id: str
    title: str
    description: str = ""
    time_zone: str = ""
    color_id: str = ""
    primary: bool = False
    selected: bool = False
    access_role: str = ACCESS_ROLE_OWNER

    def can_write(self) -> bool:
        return self.access_role in _WRITE_ROLES

    def can_read(self) -> bool:
        return self.access_role in _READ_ROLES

    def is_owner(self) -> bool:
        return self.access_role == ACCESS_ROLE_OWNER


def new_calendar(title: str) -> Calendar:
    return Calendar(id="", title=title, access_role=ACCESS_ROLE_OWNER)


def is_valid_access_role(role: str) -> bool:
    return role in (
        ACCESS_ROLE_OWNER,
        ACCESS_ROLE_WRITER,
        ACCESS_ROLE_READER,
        ACCESS_ROLE_FREE_BUSY_READER,
    )


@dataclass
class ACLScope:
    """Who an ACL rule applies to. `value` is empty for the default scope."""

    type: str
    value: str = ""

    def is_user(self) -> bool:
        return self.type == ACL_SCOPE_TYPE_USER

    def is_group(self) -> bool:
        return self.type == ACL_SCOPE_TYPE_GROUP

    def is_domain(self) -> bool:
        return self.type == ACL_SCOPE_TYPE_DOMAIN

    def is_default(self) -> bool:
        return self.type == ACL_SCOPE_TYPE_DEFAULT


def new_acl_scope(scope_type: str, value: str) -> ACLScope:
    return ACLScope(type=scope_type, value=value)


def new_user_acl_scope(email: str) -> ACLScope:
    return ACLScope(type=ACL_SCOPE_TYPE_USER, value=email)


def new_group_acl_scope(email: str) -> ACLScope:
    return ACLScope(type=ACL_SCOPE_TYPE_GROUP, value=email)


def new_domain_acl_scope(domain: str) -> ACLScope:
    return ACLScope(type=ACL_SCOPE_TYPE_DOMAIN, value=domain)


def new_default_acl_scope() -> ACLScope:
    return ACLScope(type=ACL_SCOPE_TYPE_DEFAULT)


def is_valid_acl_scope_type(scope_type: str) -> bool:
    return scope_type in (
        ACL_SCOPE_TYPE_USER,
        ACL_SCOPE_TYPE_GROUP,
        ACL_SCOPE_TYPE_DOMAIN,
        ACL_SCOPE_TYPE_DEFAULT,
    )


@dataclass
class ACLRule:
    """
    An access control rule on a calendar.

    Grants nest: owner implies write implies read. freeBusyReader grants none
    of the three.
    """

    id: str = ""
    scope: Optional[ACLScope] = None
    role: str = ""

    def grants_owner_access(self) -> bool:
        return self.role == ACCESS_ROLE_OWNER

    def grants_write_access(self) -> bool:
        return self.role in _WRITE_ROLES

    def grants_read_access(self) -> bool:
        return self.role in _READ_ROLES


def new_acl_rule(scope: Optional[ACLScope], role: str) -> ACLRule:
    return ACLRule(scope=scope, role=role)


@dataclass
class TimePeriod:
    """A half-open interval [start, end)."""

    start: datetime
    end: datetime

    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: TimePeriod) -> bool:
        # Touching boundaries do not overlap
        return self.start < other.end and other.start < self.end

    def contains(self, t: datetime) -> bool:
        return self.start <= t < self.end


def new_time_period(start: datetime, end: datetime) -> TimePeriod:
    """Raises InvalidTimeRangeError unless start < end."""
    if not start < end:
        raise InvalidTimeRangeError()
    return TimePeriod(start=start, end=end)


@dataclass
class FreeBusyRequest:
    time_min: datetime
    time_max: datetime
    calendar_ids: list[str] = field(default_factory=list)


def new_free_busy_request(
    time_min: datetime, time_max: datetime, *calendar_ids: str
) -> FreeBusyRequest:
    """Raises InvalidTimeRangeError unless time_min < time_max."""
    if not time_min < time_max:
        raise InvalidTimeRangeError()
    return FreeBusyRequest(time_min=time_min, time_max=time_max, calendar_ids=list(calendar_ids))


@dataclass
class FreeBusyResponse:
    """Busy periods keyed by calendar ID, in query order."""

    calendars: dict[str, list[TimePeriod]] = field(default_factory=dict)


# ── Contacts ──────────────────────────────────────────────────────────────────

GROUP_TYPE_SYSTEM = "SYSTEM_CONTACT_GROUP"
GROUP_TYPE_USER = "USER_CONTACT_GROUP"


@dataclass
class ContactDate:
    """A possibly partial calendar date (year 0 means unknown year)."""

    year: int = 0
    month: int = 0
    day: int = 0

    def format(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


@dataclass
class Name:
    display_name: str = ""
    given_name: str = ""
    family_name: str = ""
    middle_name: str = ""
    honorific_prefix: str = ""
    honorific_suffix: str = ""


@dataclass
class Nickname:
    value: str
    type: str = ""


@dataclass
class EmailAddress:
    value: str
    type: str = ""
    display_name: str = ""
    primary: bool = False


@dataclass
class PhoneNumber:
    value: str
    type: str = ""
    primary: bool = False


@dataclass
class Address:
    formatted_value: str = ""
    type: str = ""
    street_address: str = ""
    city: str = ""
    region: str = ""
    postal_code: str = ""
    country: str = ""
    country_code: str = ""


@dataclass
class Organization:
    name: str = ""
    title: str = ""
    department: str = ""
    type: str = ""
    current: bool = False


@dataclass
class Birthday:
    date: Optional[ContactDate] = None
    text: str = ""


@dataclass
class Biography:
    value: str
    content_type: str = ""


@dataclass
class Photo:
    url: str
    default: bool = False


@dataclass
class Url:
    value: str
    type: str = ""


@dataclass
class Membership:
    """Membership in a contact group (resource name `contactGroups/<id>`)."""

    contact_group_resource_name: str = ""
    contact_group_id: str = ""


@dataclass
class Source:
    type: str = ""
    id: str = ""
    etag: str = ""
    update_time: Optional[datetime] = None


@dataclass
class ContactMetadata:
    sources: list[Source] = field(default_factory=list)


@dataclass
class Contact:
    """A Google Contacts (People API) person record."""

    resource_name: str = ""
    etag: str = ""
    names: list[Name] = field(default_factory=list)
    nicknames: list[Nickname] = field(default_factory=list)
    emails: list[EmailAddress] = field(default_factory=list)
    phones: list[PhoneNumber] = field(default_factory=list)
    addresses: list[Address] = field(default_factory=list)
    organizations: list[Organization] = field(default_factory=list)
    birthdays: list[Birthday] = field(default_factory=list)
    biographies: list[Biography] = field(default_factory=list)
    photos: list[Photo] = field(default_factory=list)
    urls: list[Url] = field(default_factory=list)
    memberships: list[Membership] = field(default_factory=list)
    metadata: Optional[ContactMetadata] = None

    def add_email(self, email: str, email_type: str = "", primary: bool = False) -> None:
        """Append an email address. Raises ValidationError on a malformed address."""
        if not email:
            raise ValidationError("email cannot be empty")
        if "@" not in email or len(email) < 4:
            raise ValidationError("invalid email format")
        self.emails.append(EmailAddress(value=email, type=email_type, primary=primary))

    def add_phone(self, phone: str, phone_type: str = "", primary: bool = False) -> None:
        if not phone:
            raise ValidationError("phone cannot be empty")
        self.phones.append(PhoneNumber(value=phone, type=phone_type, primary=primary))

    def set_primary_email(self, email: str) -> None:
        """Flag `email` as primary and clear the flag on every other address."""
        found = False
        for entry in self.emails:
            entry.primary = entry.value == email
            found = found or entry.primary
        if not found:
            raise ValidationError("email not found")

    def primary_email(self) -> Optional[str]:
        """First email flagged primary, else the first email, else None."""
        for entry in self.emails:
            if entry.primary:
                return entry.value
        return self.emails[0].value if self.emails else None

    def primary_phone(self) -> Optional[str]:
        for entry in self.phones:
            if entry.primary:
                return entry.value
        return self.phones[0].value if self.phones else None

    def display_name(self) -> str:
        if not self.names:
            return ""
        name = self.names[0]
        if name.display_name:
            return name.display_name
        return " ".join(p for p in (name.given_name, name.family_name) if p)

    def is_in_group(self, group_resource_name: str) -> bool:
        return any(
            m.contact_group_resource_name == group_resource_name for m in self.memberships
        )


def new_contact() -> Contact:
    return Contact()


@dataclass
class GroupMetadata:
    update_time: Optional[datetime] = None
    deleted: bool = False


@dataclass
class ContactGroup:
    """A contact group (label) in Google Contacts."""

    resource_name: str = ""
    etag: str = ""
    name: str = ""
    formatted_name: str = ""
    group_type: str = GROUP_TYPE_USER
    member_count: int = 0
    member_resource_names: list[str] = field(default_factory=list)
    metadata: Optional[GroupMetadata] = None

    def is_system_group(self) -> bool:
        return self.group_type == GROUP_TYPE_SYSTEM

    def can_modify(self) -> bool:
        return not self.is_system_group()


def new_contact_group(name: str) -> ContactGroup:
    if not name:
        raise ValidationError("group name cannot be empty")
    return ContactGroup(name=name, group_type=GROUP_TYPE_USER)


# ── Tasks ─────────────────────────────────────────────────────────────────────

TASK_STATUS_NEEDS_ACTION = "needsAction"
TASK_STATUS_COMPLETED = "completed"

DEFAULT_TASKLIST = "@default"


def is_valid_task_status(status: str) -> bool:
    return status in (TASK_STATUS_NEEDS_ACTION, TASK_STATUS_COMPLETED)


@dataclass
class TaskLink:
    type: str = ""
    description: str = ""
    link: str = ""


@dataclass
class Task:
    """A single Google Task. `parent` is the id of a sibling task, not a reference."""

    id: str
    title: str
    status: str = TASK_STATUS_NEEDS_ACTION
    task_list_id: str = ""
    notes: str = ""
    due: Optional[datetime] = None
    completed: Optional[datetime] = None
    parent: Optional[str] = None
    position: str = ""
    updated: Optional[datetime] = None
    links: list[TaskLink] = field(default_factory=list)
    hidden: bool = False
    deleted: bool = False

    def complete(self) -> None:
        if self.status != TASK_STATUS_COMPLETED:
            now = _now()
            self.status = TASK_STATUS_COMPLETED
            self.completed = now
            self.updated = now

    def reopen(self) -> None:
        if self.status == TASK_STATUS_COMPLETED:
            self.status = TASK_STATUS_NEEDS_ACTION
            self.completed = None
            self.updated = _now()

    def is_completed(self) -> bool:
        return self.status == TASK_STATUS_COMPLETED

    def is_subtask(self) -> bool:
        return self.parent is not None

    def can_have_subtasks(self) -> bool:
        """Only top-level tasks can hold subtasks."""
        return not self.is_subtask()

    def set_parent(self, parent_id: str) -> None:
        if not parent_id:
            raise ValidationError("parent ID cannot be empty")
        self.parent = parent_id
        self.updated = _now()

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        if self.due is None or self.is_completed():
            return False
        if now is None:
            now = datetime.now(self.due.tzinfo)
        return self.due < now


def new_task(title: str, list_id: str) -> Task:
    if not title:
        raise ValidationError("title cannot be empty")
    if not list_id:
        raise ValidationError("list ID cannot be empty")
    return Task(id="", title=title, task_list_id=list_id, updated=_now())


@dataclass
class TaskList:
    """A Google Tasks list (container for tasks)."""

    id: str
    title: str
    updated: Optional[datetime] = None
    self_link: str = ""

    def is_default(self) -> bool:
        return self.id == DEFAULT_TASKLIST


def new_task_list(title: str) -> TaskList:
    if not title:
        raise ValidationError("title cannot be empty")
    return TaskList(id="", title=title, updated=_now())
