"""Shared fixtures: one populated sample of each entity kind."""

from datetime import datetime, timezone

import pytest

from goog.models import (
    ACLRule,
    ACLScope,
    Account,
    Attendee,
    Calendar,
    ConferenceData,
    Contact,
    ContactGroup,
    Draft,
    EmailAddress,
    Event,
    FreeBusyResponse,
    Label,
    Message,
    Name,
    Organization,
    PhoneNumber,
    Task,
    TaskList,
    Thread,
    TimePeriod,
)

WHEN = datetime(2026, 3, 2, 14, 30, 5, tzinfo=timezone.utc)


@pytest.fixture
def message():
    return Message(
        id="msg123",
        thread_id="thr456",
        sender="alice@example.com",
        to=["bob@example.com"],
        subject="Quarterly report",
        body="Numbers attached.",
        labels=["INBOX", "UNREAD"],
        date=WHEN,
        snippet="Numbers attached.",
    )


@pytest.fixture
def draft(message):
    return Draft(id="dr1", message=message, created=WHEN, updated=WHEN)


@pytest.fixture
def thread(message):
    return Thread(id="thr456", messages=[message, None], snippet="Numbers", labels=["INBOX"])


@pytest.fixture
def label():
    return Label(id="Label_1", name="Work", type="user")


@pytest.fixture
def event():
    return Event(
        id="evt1",
        title="Design review",
        start=WHEN,
        end=datetime(2026, 3, 2, 15, 30, tzinfo=timezone.utc),
        calendar_id="primary",
        location="Room 4",
        attendees=[Attendee(email="bob@example.com", response_status="accepted")],
        conference_data=ConferenceData(type="hangoutsMeet", uri="https://meet.google.com/x"),
    )


@pytest.fixture
def calendar():
    return Calendar(id="primary", title="Alice", time_zone="UTC", primary=True)


@pytest.fixture
def acl_rule():
    return ACLRule(id="user:bob@example.com", scope=ACLScope("user", "bob@example.com"),
                   role="reader")


@pytest.fixture
def free_busy():
    return FreeBusyResponse(calendars={
        "primary": [TimePeriod(start=WHEN, end=datetime(2026, 3, 2, 15, 0, tzinfo=timezone.utc))],
        "room@example.com": [],
    })


@pytest.fixture
def account():
    return Account(
        alias="work",
        email="user@company.com",
        scopes=["gmail.readonly"],
        added=WHEN,
        is_default=True,
    )


@pytest.fixture
def task_list():
    return TaskList(id="@default", title="My Tasks", updated=WHEN)


@pytest.fixture
def task():
    return Task(id="task1", title="File taxes", task_list_id="@default", due=WHEN)


@pytest.fixture
def contact():
    return Contact(
        resource_name="people/c1",
        names=[Name(display_name="Ada Lovelace")],
        emails=[EmailAddress(value="ada@example.com", type="work", primary=True)],
        phones=[PhoneNumber(value="+1 555 0100")],
        organizations=[Organization(name="Analytical Engines")],
    )


@pytest.fixture
def contact_group():
    return ContactGroup(resource_name="contactGroups/friends", name="Friends", member_count=3)
