"""
GoogleServiceFactory — one OAuth2 credential shared across all Google API clients.

The four service objects (Gmail, Calendar, People, Tasks) are built lazily
and cached, so constructing several clients from the same factory does not
trigger repeated auth flows or API client builds.

Usage:
    factory = GoogleServiceFactory(token_file=..., client_secret_file=...)

    # Access service objects directly (built on first access, cached after)
    gmail_svc    = factory.gmail
    calendar_svc = factory.calendar
    people_svc   = factory.people
    tasks_svc    = factory.tasks

    # Or pass the factory to a typed client class:
    from goog.gmail_client import GmailClient
    client = GmailClient(factory)
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from .google_auth import get_credentials

logger = logging.getLogger(__name__)

# Default scopes covering the four Google APIs goog talks to
ALL_SCOPES: list[str] = [
    "https://www.googleapis.com/auth/gmail.modify",
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/contacts",
    "https://www.googleapis.com/auth/tasks",
]


class GoogleServiceFactory:
    """
    Lazily builds the Gmail, Calendar, People and Tasks services for one
    account's token file. Each service is built once and reused.
    """

    def __init__(
        self,
        token_file: Path,
        client_secret_file: Path,
        scopes: Optional[list[str]] = None,
    ) -> None:
        self._token_file = token_file
        self._client_secret_file = client_secret_file
        self._scopes: list[str] = scopes or ALL_SCOPES
        self._creds: Optional[Credentials] = None
        self._services: dict[str, Any] = {}

    # ── Credentials ───────────────────────────────────────────────────────────

    @property
    def credentials(self) -> Credentials:
        """Credentials for the configured token file, re-acquired once invalid."""
        if self._creds is None or not self._creds.valid:
            self._creds = get_credentials(
                self._scopes, self._token_file, self._client_secret_file
            )
        return self._creds

    # ── Internal builder ──────────────────────────────────────────────────────

    def _build(self, name: str, version: str) -> Any:
        key = f"{name}/{version}"
        if key not in self._services:
            logger.debug("Building %s service", key)
            self._services[key] = build(
                name, version, credentials=self.credentials, cache_discovery=False
            )
        return self._services[key]

    # ── Service properties ────────────────────────────────────────────────────

    @property
    def gmail(self) -> Any:
        """Gmail API v1 service object."""
        return self._build("gmail", "v1")

    @property
    def calendar(self) -> Any:
        """Google Calendar API v3 service object."""
        return self._build("calendar", "v3")

    @property
    def people(self) -> Any:
        """Google People API v1 service object (Contacts)."""
        return self._build("people", "v1")

    @property
    def tasks(self) -> Any:
        """Google Tasks API v1 service object."""
        return self._build("tasks", "v1")
