"""
Google OAuth2 helper.

Credentials are read from an authorized-user token file when one exists and
refreshed in memory when expired. Without a usable token the installed-app
browser flow runs; the resulting credentials live for this process only.

Usage:
    from goog.google_auth import get_credentials
    creds = get_credentials(scopes, token_file, client_secret_file)
"""
from __future__ import annotations

import logging
from pathlib import Path

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from .exceptions import AuthError

logger = logging.getLogger(__name__)


def get_credentials(
    scopes: list[str],
    token_file: Path,
    client_secret_file: Path,
) -> Credentials:
    """
    Return valid Google credentials, refreshing or re-authorizing as needed.
    Raises AuthError when neither a token nor a client secret is usable.
    """
    creds = None

    if token_file.exists():
        creds = Credentials.from_authorized_user_file(str(token_file), scopes)

    if creds and creds.valid:
        return creds

    if creds and creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
        except RefreshError as exc:
            logger.warning("Token refresh failed for %s: %s", token_file, exc)
        else:
            logger.info("Token refreshed silently")
            return creds

    if not client_secret_file.exists():
        raise AuthError(
            f"no usable token at {token_file} and no OAuth client file at {client_secret_file}"
        )

    flow = InstalledAppFlow.from_client_secrets_file(str(client_secret_file), scopes)
    creds = flow.run_local_server(port=0)
    logger.info("OAuth flow completed")
    return creds
