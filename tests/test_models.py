"""Tests for domain models and their invariants."""

from datetime import datetime, timedelta, timezone

import pytest

from goog.exceptions import (
    InvalidAliasError,
    InvalidEmailError,
    InvalidTimeRangeError,
    ValidationError,
)
from goog.models import (
    ACCESS_ROLE_FREE_BUSY_READER,
    ACCESS_ROLE_OWNER,
    ACCESS_ROLE_READER,
    ACCESS_ROLE_WRITER,
    Calendar,
    ConferenceData,
    Contact,
    ContactDate,
    EmailAddress,
    GROUP_TYPE_SYSTEM,
    Membership,
    Name,
    TASK_STATUS_COMPLETED,
    TimePeriod,
    is_valid_access_role,
    is_valid_email,
    is_valid_acl_scope_type,
    is_valid_label_type,
    is_valid_reminder_method,
    is_valid_response_status,
    is_valid_status,
    is_valid_task_status,
    is_valid_visibility,
    new_account,
    new_acl_rule,
    new_all_day_event,
    new_calendar,
    new_contact_group,
    new_default_acl_scope,
    new_event,
    new_free_busy_request,
    new_label,
    new_message,
    new_system_label,
    new_task,
    new_task_list,
    new_thread,
    new_time_period,
    new_user_acl_scope,
)

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def at(hours: float) -> datetime:
    return T0 + timedelta(hours=hours)


# ── Validators ────────────────────────────────────────────────────────────────

def test_event_status_predicate():
    assert is_valid_status("confirmed")
    assert is_valid_status("tentative")
    assert is_valid_status("cancelled")
    assert not is_valid_status("")
    assert not is_valid_status("Confirmed")


def test_visibility_predicate():
    assert is_valid_visibility("public")
    assert is_valid_visibility("private")
    assert not is_valid_visibility("default")


def test_response_and_reminder_predicates():
    for status in ("needsAction", "declined", "tentative", "accepted"):
        assert is_valid_response_status(status)
    assert not is_valid_response_status("maybe")
    assert is_valid_reminder_method("email")
    assert is_valid_reminder_method("popup")
    assert not is_valid_reminder_method("sms")


def test_access_role_and_scope_predicates():
    for role in ("owner", "writer", "reader", "freeBusyReader"):
        assert is_valid_access_role(role)
    assert not is_valid_access_role("admin")
    for scope in ("user", "group", "domain", "default"):
        assert is_valid_acl_scope_type(scope)
    assert not is_valid_acl_scope_type("USER")


def test_label_and_task_predicates():
    assert is_valid_label_type("system")
    assert is_valid_label_type("user")
    assert not is_valid_label_type("custom")
    assert is_valid_task_status("needsAction")
    assert is_valid_task_status("completed")
    assert not is_valid_task_status("done")


# ── Account ───────────────────────────────────────────────────────────────────

def test_new_account_defaults():
    acct = new_account("work", "user@company.com")
    assert acct.scopes == []
    assert acct.is_default is False
    assert acct.last_used is None
    assert acct.added.tzinfo is not None


@pytest.mark.parametrize("alias", ["", "   "])
def test_account_rejects_blank_alias(alias):
    with pytest.raises(InvalidAliasError, match="alias cannot be empty"):
        new_account(alias, "user@company.com").validate()


@pytest.mark.parametrize("email", ["", "user", "user@", "@company.com", "a@b@c", "us er@x.com"])
def test_account_rejects_bad_email(email):
    with pytest.raises(InvalidEmailError):
        new_account("work", email).validate()


def test_account_scopes_have_no_duplicates():
    acct = new_account("work", "user@company.com")
    acct.add_scope("gmail.readonly")
    acct.add_scope("gmail.readonly")
    assert acct.scopes == ["gmail.readonly"]
    assert acct.has_scope("gmail.readonly")
    acct.remove_scope("gmail.readonly")
    assert not acct.has_scope("gmail.readonly")


def test_account_dict_round_trip():
    acct = new_account("work", "user@company.com")
    acct.add_scope("calendar")
    acct.last_used = T0
    assert type(acct).from_dict(acct.to_dict()) == acct


# ── Mail ──────────────────────────────────────────────────────────────────────

def test_message_helpers():
    msg = new_message("m1", "t1", "alice@example.com", "Hi", "body")
    msg.add_recipient("bob@example.com")
    msg.add_label("INBOX")
    msg.mark_as_read()
    msg.star()
    assert msg.to == ["bob@example.com"]
    assert msg.has_label("INBOX")
    assert msg.is_read and msg.is_starred
    msg.unstar()
    msg.mark_as_unread()
    assert not msg.is_read and not msg.is_starred


def test_thread_counts_only_real_messages():
    thread = new_thread("t1")
    thread.add_message(new_message("m1", "t1", "a@x.com", "s", "b"))
    thread.add_message(None)
    thread.add_message(new_message("m2", "t1", "a@x.com", "s", "b"))
    assert thread.message_count() == 2
    assert thread.first_message().id == "m1"
    assert thread.latest_message().id == "m2"


def test_empty_thread_has_no_first_or_latest():
    thread = new_thread("t1")
    assert thread.message_count() == 0
    assert thread.first_message() is None
    assert thread.latest_message() is None


def test_label_constructors_and_color():
    assert new_label("L1", "Work").is_user_label()
    assert new_system_label("INBOX", "INBOX").is_system_label()
    label = new_label("L1", "Work")
    assert not label.has_color()
    label.set_color("#000000", "#ffffff")
    assert label.has_color()
    label.clear_color()
    assert label.color is None


# ── Calendar ──────────────────────────────────────────────────────────────────

def test_new_event_defaults():
    event = new_event("Standup", at(0), at(0.5))
    assert event.status == "confirmed"
    assert event.visibility == "private"
    assert event.duration() == timedelta(minutes=30)
    assert not event.is_recurring()


def test_all_day_event_spans_midnight_to_midnight():
    event = new_all_day_event("Holiday", datetime(2026, 3, 2, 15, 45, tzinfo=timezone.utc))
    assert event.all_day
    assert event.start == datetime(2026, 3, 2, tzinfo=timezone.utc)
    assert event.end == datetime(2026, 3, 3, tzinfo=timezone.utc)


def test_has_conference_requires_uri():
    event = new_event("Call", at(0), at(1))
    assert not event.has_conference()
    event.conference_data = ConferenceData(type="hangoutsMeet", uri="")
    assert not event.has_conference()
    event.conference_data.uri = "https://meet.google.com/abc"
    assert event.has_conference()


@pytest.mark.parametrize("role, write, read, owner", [
    (ACCESS_ROLE_OWNER, True, True, True),
    (ACCESS_ROLE_WRITER, True, True, False),
    (ACCESS_ROLE_READER, False, True, False),
    (ACCESS_ROLE_FREE_BUSY_READER, False, False, False),
])
def test_calendar_access_roles(role, write, read, owner):
    cal = Calendar(id="c", title="Cal", access_role=role)
    assert cal.can_write() is write
    assert cal.can_read() is read
    assert cal.is_owner() is owner


def test_new_calendar_defaults_to_owner():
    assert new_calendar("Team").is_owner()


def test_acl_grants_nest():
    writer = new_acl_rule(new_user_acl_scope("a@x.com"), ACCESS_ROLE_WRITER)
    assert writer.grants_write_access()
    assert writer.grants_read_access()
    assert not writer.grants_owner_access()

    free_busy = new_acl_rule(new_default_acl_scope(), ACCESS_ROLE_FREE_BUSY_READER)
    assert not free_busy.grants_read_access()
    assert not free_busy.grants_write_access()
    assert free_busy.scope.is_default()
    assert free_busy.scope.value == ""


def test_time_period_overlap_is_strict():
    a = new_time_period(at(0), at(2))
    assert a.overlaps(new_time_period(at(1), at(3)))
    assert not a.overlaps(new_time_period(at(2), at(3)))
    assert a.duration() == timedelta(hours=2)


def test_time_period_contains_is_half_open():
    period = new_time_period(at(0), at(2))
    assert period.contains(at(0))
    assert period.contains(at(1))
    assert not period.contains(at(2))


@pytest.mark.parametrize("start, end", [(at(0), at(0)), (at(1), at(0))])
def test_time_period_rejects_bad_range(start, end):
    with pytest.raises(InvalidTimeRangeError, match="start must be before end"):
        new_time_period(start, end)


def test_free_busy_request_validates_range():
    request = new_free_busy_request(at(0), at(8), "primary", "team@x.com")
    assert request.calendar_ids == ["primary", "team@x.com"]
    with pytest.raises(InvalidTimeRangeError):
        new_free_busy_request(at(0), at(0), "primary")


def test_time_period_plain_constructor_allows_any_values():
    # The dataclass itself is a plain record; only new_time_period checks
    assert TimePeriod(start=at(1), end=at(0)).duration() < timedelta(0)


# ── Contacts ──────────────────────────────────────────────────────────────────

def test_primary_email_prefers_flagged_entry():
    contact = Contact(emails=[
        EmailAddress(value="first@x.com"),
        EmailAddress(value="second@x.com", primary=True),
    ])
    assert contact.primary_email() == "second@x.com"


def test_primary_email_falls_back_to_first_then_none():
    assert Contact(emails=[EmailAddress(value="only@x.com")]).primary_email() == "only@x.com"
    assert Contact().primary_email() is None
    assert Contact().primary_phone() is None


def test_set_primary_email_moves_flag():
    contact = Contact()
    contact.add_email("a@x.com", primary=True)
    contact.add_email("b@x.com")
    contact.set_primary_email("b@x.com")
    assert [e.primary for e in contact.emails] == [False, True]
    with pytest.raises(ValidationError, match="email not found"):
        contact.set_primary_email("c@x.com")


@pytest.mark.parametrize("email", ["", "nope", "a@b"])
def test_add_email_validates(email):
    with pytest.raises(ValidationError):
        Contact().add_email(email)


def test_display_name_falls_back_to_given_family():
    assert Contact(names=[Name(display_name="Ada L")]).display_name() == "Ada L"
    assert Contact(names=[Name(given_name="Ada", family_name="Lovelace")]).display_name() == (
        "Ada Lovelace"
    )
    assert Contact().display_name() == ""


def test_contact_group_membership():
    contact = Contact(memberships=[Membership(contact_group_resource_name="contactGroups/friends")])
    assert contact.is_in_group("contactGroups/friends")
    assert not contact.is_in_group("contactGroups/work")


def test_contact_date_format():
    assert ContactDate(year=1990, month=7, day=4).format() == "1990-07-04"


def test_contact_group_rules():
    group = new_contact_group("Friends")
    assert group.can_modify()
    group.group_type = GROUP_TYPE_SYSTEM
    assert group.is_system_group()
    assert not group.can_modify()
    with pytest.raises(ValidationError):
        new_contact_group("")


# ── Tasks ─────────────────────────────────────────────────────────────────────

def test_task_complete_and_reopen():
    task = new_task("Write report", "@default")
    task.complete()
    assert task.is_completed()
    assert task.status == TASK_STATUS_COMPLETED
    assert task.completed is not None
    task.reopen()
    assert not task.is_completed()
    assert task.completed is None


def test_task_subtasks():
    task = new_task("Child", "list1")
    assert task.can_have_subtasks()
    task.set_parent("parent1")
    assert task.is_subtask()
    assert not task.can_have_subtasks()
    with pytest.raises(ValidationError):
        task.set_parent("")


def test_task_overdue():
    task = new_task("Pay rent", "list1")
    assert not task.is_overdue(now=at(0))
    task.due = at(-1)
    assert task.is_overdue(now=at(0))
    task.complete()
    assert not task.is_overdue(now=at(0))


@pytest.mark.parametrize("title, list_id", [("", "list1"), ("Title", "")])
def test_new_task_requires_title_and_list(title, list_id):
    with pytest.raises(ValidationError):
        new_task(title, list_id)


def test_task_list_default():
    with pytest.raises(ValidationError):
        new_task_list("")
    task_list = new_task_list("Groceries")
    assert not task_list.is_default()
    task_list.id = "@default"
    assert task_list.is_default()


@pytest.mark.parametrize("address, ok", [
    ("bob@example.com", True),
    ("bob@localhost", True),
    ("bob", False),
    ("bob@", False),
    ("bob at example.com", False),
    ("a@b@c", False),
    ("", False),
])
def test_is_valid_email(address, ok):
    assert is_valid_email(address) is ok
