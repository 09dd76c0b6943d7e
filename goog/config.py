"""
Configuration — environment settings and the local account store.

Settings come from the process environment, with <config_dir>/.env loaded
first through python-dotenv (it never overrides variables already set).

Usage:
    settings = Settings.from_env()
    store = AccountStore(settings.accounts_file)
    acct = store.get_default()
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import AccountExistsError, AccountNotFoundError
from .models import Account
from .presenter import FORMAT_TABLE

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path("~/.config/goog").expanduser()


@dataclass
class Settings:
    """Resolved runtime settings."""

    config_dir: Path
    output_format: str
    account: str
    client_secret_file: Path
    token_dir: Path
    log_dir: Path
    timezone: str

    @property
    def accounts_file(self) -> Path:
        return self.config_dir / "accounts.json"

    def token_file(self, alias: str) -> Path:
        return self.token_dir / f"{alias}.json"

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> Settings:
        """
        Build settings from `environ` (defaults to os.environ).

        When reading os.environ, <config_dir>/.env is loaded first.
        """
        if environ is None:
            config_dir = Path(os.environ.get("GOOG_CONFIG_DIR", DEFAULT_CONFIG_DIR)).expanduser()
            load_dotenv(config_dir / ".env", override=False)
            environ = dict(os.environ)

        config_dir = Path(environ.get("GOOG_CONFIG_DIR", DEFAULT_CONFIG_DIR)).expanduser()
        return cls(
            config_dir=config_dir,
            output_format=environ.get("GOOG_FORMAT", FORMAT_TABLE),
            account=environ.get("GOOG_ACCOUNT", ""),
            client_secret_file=Path(
                environ.get("GOOG_CLIENT_SECRET_FILE", config_dir / "client_secret.json")
            ).expanduser(),
            token_dir=Path(environ.get("GOOG_TOKEN_DIR", config_dir / "tokens")).expanduser(),
            log_dir=Path(environ.get("GOOG_LOG_DIR", config_dir / "logs")).expanduser(),
            timezone=environ.get("GOOG_TIMEZONE", "UTC"),
        )


class AccountStore:
    """
    Accounts persisted as a JSON array in a single file.

    At most one stored account is the default: marking one clears the flag
    on all others, and the first account saved becomes the default.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    # ── Reads ─────────────────────────────────────────────────────────────────

    def list(self) -> list[Account]:
        if not self.path.exists():
            return []
        with open(self.path, encoding="utf-8") as f:
            raw = json.load(f)
        return [Account.from_dict(item) for item in raw]

    def get(self, alias: str) -> Account:
        for acct in self.list():
            if acct.alias == alias:
                return acct
        raise AccountNotFoundError(f"account not found: {alias}")

    def get_default(self) -> Account:
        for acct in self.list():
            if acct.is_default:
                return acct
        raise AccountNotFoundError("no default account configured")

    # ── Writes ────────────────────────────────────────────────────────────────

    def save(self, account: Account, replace: bool = False) -> None:
        """Store `account`. Raises AccountExistsError unless `replace` is set."""
        account.validate()
        accounts = self.list()
        existing = [a for a in accounts if a.alias == account.alias]
        if existing and not replace:
            raise AccountExistsError(f"account already exists: {account.alias}")

        accounts = [a for a in accounts if a.alias != account.alias]
        if not accounts:
            account.is_default = True
        if account.is_default:
            for other in accounts:
                other.is_default = False
        accounts.append(account)
        self._write(accounts)
        logger.info("Saved account %s", account.alias)

    def delete(self, alias: str) -> None:
        accounts = self.list()
        remaining = [a for a in accounts if a.alias != alias]
        if len(remaining) == len(accounts):
            raise AccountNotFoundError(f"account not found: {alias}")
        self._write(remaining)
        logger.info("Deleted account %s", alias)

    def set_default(self, alias: str) -> Account:
        accounts = self.list()
        if not any(a.alias == alias for a in accounts):
            raise AccountNotFoundError(f"account not found: {alias}")
        chosen = None
        for acct in accounts:
            acct.is_default = acct.alias == alias
            if acct.is_default:
                chosen = acct
        self._write(accounts)
        logger.info("Default account set to %s", alias)
        return chosen

    def touch(self, alias: str) -> None:
        """Stamp last_used on an account; unknown aliases are ignored."""
        accounts = self.list()
        for acct in accounts:
            if acct.alias == alias:
                acct.last_used = datetime.now().astimezone()
                self._write(accounts)
                return

    def _write(self, accounts: list[Account]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump([a.to_dict() for a in accounts], f, indent=2)
        tmp.replace(self.path)
