"""Tests for the presenter factory and behaviour shared by every format."""

import copy

import pytest

from goog.json_presenter import JSONPresenter
from goog.plain_presenter import PlainPresenter
from goog.presenter import FORMATS, Presenter, new_presenter
from goog.table_presenter import TablePresenter

SINGULAR = [
    "message", "draft", "thread", "label", "event", "calendar", "acl_rule",
    "account", "task_list", "task", "contact", "contact_group",
]


@pytest.mark.parametrize("fmt, cls", [
    ("json", JSONPresenter),
    ("plain", PlainPresenter),
    ("table", TablePresenter),
    ("", TablePresenter),
    (None, TablePresenter),
    ("JSON", TablePresenter),
    ("xml", TablePresenter),
])
def test_new_presenter(fmt, cls):
    presenter = new_presenter(fmt)
    assert type(presenter) is cls
    assert isinstance(presenter, Presenter)


def test_formats_listed():
    assert set(FORMATS) == {"json", "table", "plain"}


def _noun(kind):
    return "ACL rule" if kind == "acl_rule" else kind.replace("_", " ")


@pytest.mark.parametrize("kind", SINGULAR)
@pytest.mark.parametrize("fmt, single, many", [
    ("json", "null", "[]"),
    ("table", "No {noun} found", "No {noun}s found"),
    ("plain", "", ""),
])
def test_empty_sentinels(fmt, single, many, kind):
    presenter = new_presenter(fmt)
    noun = _noun(kind)
    assert getattr(presenter, f"render_{kind}")(None) == single.format(noun=noun)
    assert getattr(presenter, f"render_{kind}s")(None) == many.format(noun=noun)
    assert getattr(presenter, f"render_{kind}s")([]) == many.format(noun=noun)


@pytest.mark.parametrize("fmt", FORMATS)
def test_collections_with_only_none_render(fmt):
    presenter = new_presenter(fmt)
    out = presenter.render_messages([None, None])
    assert isinstance(out, str)


@pytest.mark.parametrize("fmt", FORMATS)
def test_output_has_no_trailing_newline(fmt, message):
    presenter = new_presenter(fmt)
    for out in (presenter.render_message(message), presenter.render_messages([message])):
        assert not out.endswith("\n")


@pytest.mark.parametrize("fmt", FORMATS)
def test_every_plural_method_accepts_entities(
    fmt, message, draft, thread, label, event, calendar, acl_rule,
    account, task_list, task, contact, contact_group,
):
    presenter = new_presenter(fmt)
    samples = {
        "message": message, "draft": draft, "thread": thread, "label": label,
        "event": event, "calendar": calendar, "acl_rule": acl_rule, "account": account,
        "task_list": task_list, "task": task, "contact": contact,
        "contact_group": contact_group,
    }
    for kind, entity in samples.items():
        assert getattr(presenter, f"render_{kind}")(entity)
        assert getattr(presenter, f"render_{kind}s")([entity, None])


def test_free_busy_none():
    assert new_presenter("json").render_free_busy(None) == "null"
    assert new_presenter("table").render_free_busy(None) == "No free/busy information found"
    assert new_presenter("plain").render_free_busy(None) == ""


def test_message_never_mutated(message):
    before = copy.deepcopy(message)
    for fmt in FORMATS:
        new_presenter(fmt).render_message(message)
    assert message == before
