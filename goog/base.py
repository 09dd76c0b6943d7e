"""
BaseCommand — abstract base class for every goog CLI command.

Provides:
  - setup_logging(): rotating file logger + stderr handler, <log_dir>/<name>.log
  - Abstract run() method that must return the rendered output string
  - execute(): times run(), turns GoogError into the presenter's error text

Subclass usage:
    class ListLabels(BaseCommand):
        def run(self, args) -> str:
            self.logger.info("listing labels...")
            return self.presenter.render_labels(self.gmail.list_labels())
"""
from __future__ import annotations

import argparse
import logging
import time
from abc import ABC, abstractmethod
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .exceptions import GoogError
from .presenter import Presenter

LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s — %(message)s"


def setup_logging(name: str, level: int, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configure the `name` logger to write to both:
      - <log_dir>/<name>.log  (rotating, max 2 MB × 5 backups), when log_dir is given
      - stderr (stdout carries rendered output)
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid adding duplicate handlers if configured twice in one process
    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    fmt = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    if log_dir is not None:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_dir / f"{name}.log",
                maxBytes=2_000_000,   # 2 MB per file
                backupCount=5,
                encoding="utf-8",
            )
        except OSError as exc:
            logger.warning("File logging disabled: %s", exc)
        else:
            file_handler.setFormatter(fmt)
            logger.addHandler(file_handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(fmt)
    stream_handler.setLevel(level)
    logger.addHandler(stream_handler)
    return logger


class BaseCommand(ABC):
    """Abstract base for all goog commands."""

    def __init__(self, presenter: Presenter) -> None:
        self.presenter = presenter
        # Derive the command name from the concrete class name (lowercased)
        self.name: str = type(self).__name__.lower()
        self.logger: logging.Logger = logging.getLogger(f"goog.{self.name}")

    @abstractmethod
    def run(self, args: argparse.Namespace) -> str:
        """Execute the command and return its rendered output."""

    def execute(self, args: argparse.Namespace) -> tuple[str, int]:
        """
        Run the command, returning (output, exit_status).

        GoogError is rendered through the presenter with status 1; any other
        exception is logged with its traceback and re-raised.
        """
        t0 = time.monotonic()
        try:
            output = self.run(args)
        except GoogError as exc:
            elapsed = time.monotonic() - t0
            self.logger.info("Failed after %.2fs: %s", elapsed, exc)
            return self.presenter.render_error(exc), 1
        except Exception:
            elapsed = time.monotonic() - t0
            self.logger.exception("Command failed after %.2fs", elapsed)
            raise
        self.logger.info("Completed in %.2fs", time.monotonic() - t0)
        return output, 0
