"""Tests for the ASCII table presenter."""

import pytest

from goog.models import Account, Calendar, Message, Thread
from goog.table_presenter import TablePresenter, truncate


@pytest.fixture
def presenter():
    return TablePresenter()


def data_rows(out: str) -> int:
    """Count grid body rows (lines starting with '| ' minus the header)."""
    return sum(1 for line in out.splitlines() if line.startswith("| ")) - 1


# ── truncate ──────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("s, n, expected", [
    ("hello", 10, "hello"),
    ("hello", 5, "hello"),
    ("hello world", 8, "hello..."),
    ("hello", 3, "hel"),
    ("hello", 2, "he"),
    ("", 0, ""),
])
def test_truncate(s, n, expected):
    assert truncate(s, n) == expected


def test_truncate_counts_characters():
    s = "日本語のテキストです"
    out = truncate(s, 6)
    assert out == "日本語..."
    assert len(out) == 6


@pytest.mark.parametrize("n", [0, 1, 3, 4, 7, 20])
def test_truncate_never_exceeds_limit(n):
    assert len(truncate("abcdefghijklmnop", n)) <= n


# ── Grid shape ────────────────────────────────────────────────────────────────

def test_single_view_has_field_value_header(presenter, message):
    out = presenter.render_message(message)
    lines = out.splitlines()
    assert lines[0].startswith("+-")
    assert lines[1].split("|")[1].strip() == "FIELD"
    assert lines[1].split("|")[2].strip() == "VALUE"
    assert lines[-1].startswith("+-")
    assert "| Read " in out and "false" in out


def test_collection_header_is_upper_cased(presenter, message):
    header = presenter.render_messages([message]).splitlines()[1]
    assert [h.strip() for h in header.strip("|").split("|")] == [
        "ID", "FROM", "SUBJECT", "DATE", "LABELS",
    ]


def test_none_elements_are_skipped(presenter, message):
    other = Message(id="m2", date=message.date)
    out = presenter.render_messages([message, None, other])
    assert data_rows(out) == 2


def test_collection_only_none_gives_empty_grid(presenter):
    out = presenter.render_messages([None])
    assert data_rows(out) == 0
    assert "ID" in out


def test_long_subject_truncated(presenter, message):
    message.subject = "x" * 100
    out = presenter.render_messages([message])
    assert "x" * 37 + "..." in out
    assert "x" * 38 not in out


def test_message_dates(presenter, message):
    assert "2026-03-02 14:30" in presenter.render_message(message)
    row = presenter.render_messages([message]).splitlines()[3]
    assert "2026-03-02" in row and "14:30" not in row


# ── Per-kind details ──────────────────────────────────────────────────────────

def test_thread_view_has_message_sub_table(presenter, thread):
    out = presenter.render_thread(thread)
    assert "\n\nMessages:\n" in out
    head, sub = out.split("\n\nMessages:\n")
    assert "| Message Count | 1 " in head
    assert data_rows(sub) == 1


def test_thread_without_messages_has_no_sub_table(presenter):
    assert "Messages:" not in presenter.render_thread(Thread(id="t"))


def test_primary_and_default_flags_are_yes(presenter, calendar, account):
    other_cal = Calendar(id="other", title="Other")
    cal_out = presenter.render_calendars([calendar, other_cal])
    assert "| Yes " in cal_out.splitlines()[3]
    assert "Yes" not in cal_out.splitlines()[4]

    other_acct = Account(alias="home", email="me@home.org", added=account.added)
    acct_out = presenter.render_accounts([account, other_acct])
    assert "| Yes " in acct_out.splitlines()[3]
    assert "Yes" not in acct_out.splitlines()[4]


def test_event_view(presenter, event):
    out = presenter.render_event(event)
    assert "2026-03-02 14:30" in out
    assert "bob@example.com (accepted)" in out
    assert "https://meet.google.com/x" in out


def test_all_day_event(presenter, event):
    event.all_day = True
    assert "2026-03-02 (All Day)" in presenter.render_event(event)
    assert "(All Day)" in presenter.render_events([event])


def test_acl_rules(presenter, acl_rule):
    out = presenter.render_acl_rules([acl_rule])
    assert "SCOPE TYPE" in out
    assert "bob@example.com" in out
    assert presenter.render_acl_rules([]) == "No ACL rules found"


def test_free_busy_marks_free_calendars(presenter, free_busy):
    out = presenter.render_free_busy(free_busy)
    assert data_rows(out) == 2
    assert "| room@example.com | free " in out


def test_contacts(presenter, contact):
    out = presenter.render_contacts([contact])
    assert "Ada Lovelace" in out
    assert "ada@example.com" in out
    assert "Analytical Engines" in out
    assert "ada@example.com (work) *" in presenter.render_contact(contact)


def test_tasks(presenter, task, task_list, contact_group):
    assert "| File taxes " in presenter.render_tasks([task])
    assert "My Tasks" in presenter.render_task_lists([task_list])
    assert "| 3 " in presenter.render_contact_groups([contact_group])


def test_error_and_success(presenter):
    assert presenter.render_error(RuntimeError("quota exceeded")) == "Error: quota exceeded"
    assert presenter.render_error(None) == ""
    assert presenter.render_success("Saved") == "Success: Saved"
