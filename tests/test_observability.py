"""Tests for log formatting."""

import json
import logging
import sys

from gesedels._internal.observability import JSONFormatter, setup_logging


def make_record(**extra):
    record = logging.LogRecord("gesedels.server", logging.ERROR, __file__, 1, "failed %s", ("x",), None)
    record.__dict__.update(extra)
    return record


def test_json_formatter():
    log = json.loads(JSONFormatter().format(make_record()))
    assert log["level"] == "ERROR"
    assert log["logger"] == "gesedels.server"
    assert log["message"] == "failed x"
    assert "timestamp" in log
    assert "path" not in log


def test_json_formatter_extras():
    log = json.loads(JSONFormatter().format(make_record(path="/0000/alpha", status=500)))
    assert log["path"] == "/0000/alpha"
    assert log["status"] == 500


def test_setup_logging(monkeypatch):
    monkeypatch.setattr(logging.root, "handlers", [])
    monkeypatch.setattr(logging.root, "level", logging.WARNING)
    setup_logging("debug", "json")
    assert logging.root.level == logging.DEBUG
    assert isinstance(logging.root.handlers[0].formatter, JSONFormatter)


def test_setup_logging_text(monkeypatch):
    monkeypatch.setattr(logging.root, "handlers", [])
    monkeypatch.setattr(logging.root, "level", logging.WARNING)
    setup_logging("info", "text")
    assert logging.root.level == logging.INFO
    assert not isinstance(logging.root.handlers[0].formatter, JSONFormatter)


def test_setup_logging_replaces_own_handler(monkeypatch):
    other = logging.NullHandler()
    monkeypatch.setattr(logging.root, "handlers", [other])
    monkeypatch.setattr(logging.root, "level", logging.WARNING)

    setup_logging("info", "text")
    setup_logging("debug", "json")

    assert len(logging.root.handlers) == 2
    assert logging.root.handlers[0] is other
    assert isinstance(logging.root.handlers[1].formatter, JSONFormatter)
    assert logging.root.level == logging.DEBUG


def test_json_formatter_exception():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("gesedels", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
    log = json.loads(JSONFormatter().format(record))
    assert "RuntimeError: boom" in log["exception"]
