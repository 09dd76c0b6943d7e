"""
goog — Google Workspace from the command line.

Package structure:
    goog.models            — Typed dataclasses (Account, Mail, Calendar, Contacts, Tasks)
    goog.exceptions        — GoogError hierarchy
    goog.presenter         — Presenter contract + new_presenter() factory
    goog.json_presenter    — JSONPresenter (structured output)
    goog.table_presenter   — TablePresenter (ASCII tables)
    goog.plain_presenter   — PlainPresenter (line-oriented text)
    goog.config            — Settings (env + .env) and AccountStore
    goog.base              — Logging setup and BaseCommand
    goog.google_auth       — OAuth2 credential helper
    goog.google_factory    — GoogleServiceFactory (single credential, lazy services)
    goog.gmail_client      — GmailClient
    goog.calendar_client   — CalendarClient
    goog.contacts_client   — ContactsClient
    goog.tasks_client      — TasksClient
    goog.cli               — argparse entry point (`goog`)
"""

__version__ = "0.1.0"
