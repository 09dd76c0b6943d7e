"""Tests for logging setup and BaseCommand."""

import argparse
import logging

import pytest

from goog.base import BaseCommand, setup_logging
from goog.exceptions import MailError
from goog.presenter import new_presenter


class Echo(BaseCommand):
    def run(self, args):
        return self.presenter.render_success(args.text)


class Failing(BaseCommand):
    def __init__(self, presenter, exc):
        super().__init__(presenter)
        self.exc = exc

    def run(self, args):
        raise self.exc


def test_execute_returns_output_and_zero():
    out, status = Echo(new_presenter("table")).execute(argparse.Namespace(text="hi"))
    assert (out, status) == ("Success: hi", 0)


def test_goog_error_is_rendered():
    cmd = Failing(new_presenter("plain"), MailError("quota exceeded"))
    assert cmd.execute(argparse.Namespace()) == ("error: quota exceeded", 1)


def test_unexpected_error_propagates(caplog):
    cmd = Failing(new_presenter("table"), RuntimeError("bug"))
    with caplog.at_level(logging.ERROR):
        with pytest.raises(RuntimeError, match="bug"):
            cmd.execute(argparse.Namespace())
    assert "Command failed" in caplog.text


def test_logger_named_after_command():
    assert Echo(new_presenter("json")).logger.name == "goog.echo"


def test_setup_logging_writes_file(tmp_path):
    logger = setup_logging("goog-test-file", logging.INFO, tmp_path / "logs")
    try:
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in (tmp_path / "logs" / "goog-test-file.log").read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


def test_setup_logging_is_idempotent():
    logger = setup_logging("goog-test-idem", logging.WARNING)
    try:
        count = len(logger.handlers)
        setup_logging("goog-test-idem", logging.DEBUG)
        assert len(logger.handlers) == count
        assert logger.level == logging.DEBUG
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
