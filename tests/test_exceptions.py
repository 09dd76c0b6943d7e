"""Tests for exception hierarchy."""

from goog.exceptions import (
    AccountError,
    AccountExistsError,
    AccountNotFoundError,
    AuthError,
    CalendarError,
    ContactsError,
    GoogError,
    InvalidAliasError,
    InvalidEmailError,
    InvalidTimeRangeError,
    MailError,
    TasksError,
    ValidationError,
)


def test_all_inherit_from_base():
    for exc_class in [
        ValidationError, InvalidAliasError, InvalidEmailError, InvalidTimeRangeError,
        AccountError, AccountNotFoundError, AccountExistsError,
        AuthError, MailError, CalendarError, ContactsError, TasksError,
    ]:
        assert issubclass(exc_class, GoogError)


def test_validation_hierarchy():
    assert issubclass(InvalidAliasError, ValidationError)
    assert issubclass(InvalidEmailError, ValidationError)
    assert issubclass(InvalidTimeRangeError, ValidationError)


def test_account_hierarchy():
    assert issubclass(AccountNotFoundError, AccountError)
    assert issubclass(AccountExistsError, AccountError)


def test_default_messages():
    assert str(InvalidAliasError()) == "invalid alias: alias cannot be empty"
    assert str(InvalidEmailError()) == "invalid email: must be a valid email address"
    assert str(InvalidTimeRangeError()) == "invalid time range: start must be before end"


def test_exception_message():
    e = MailError("test error")
    assert str(e) == "test error"
