"""Exception hierarchy for goog."""


class GoogError(Exception):
    """Base exception for all goog errors."""


# Validation
class ValidationError(GoogError):
    """A value failed a domain invariant."""


class InvalidAliasError(ValidationError):
    """Account alias is empty or whitespace-only."""

    def __init__(self, message: str = "invalid alias: alias cannot be empty") -> None:
        super().__init__(message)


class InvalidEmailError(ValidationError):
    """Email address is not of the form local@domain."""

    def __init__(self, message: str = "invalid email: must be a valid email address") -> None:
        super().__init__(message)


class InvalidTimeRangeError(ValidationError):
    """Time range whose start is not strictly before its end."""

    def __init__(self, message: str = "invalid time range: start must be before end") -> None:
        super().__init__(message)


# Accounts
class AccountError(GoogError):
    """Base exception for the local account store."""


class AccountNotFoundError(AccountError):
    """No account with the requested alias."""


class AccountExistsError(AccountError):
    """An account with this alias is already stored."""


# Auth
class AuthError(GoogError):
    """OAuth credentials could not be obtained."""


# API families
class MailError(GoogError):
    """Base exception for Gmail operations."""


class CalendarError(GoogError):
    """Base exception for Calendar operations."""


class ContactsError(GoogError):
    """Base exception for People API operations."""


class TasksError(GoogError):
    """Base exception for Tasks operations."""
