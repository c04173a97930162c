from __future__ import annotations

import json
import logging

import pytest

from insight_console.logging import CommandFilter, JsonFormatter, TextFormatter, configure_logging


def _record(message: str = "loaded %s", args: tuple = ("demo",)) -> logging.LogRecord:
    return logging.LogRecord("insight_console.fixtures", logging.WARNING, __file__, 1, message, args, None)


def test_json_formatter_includes_extra_fields() -> None:
    record = _record()
    record.fixtures_path = "/tmp/demo.json"

    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "insight_console.fixtures"
    assert payload["message"] == "loaded demo"
    assert payload["fixtures_path"] == "/tmp/demo.json"
    assert "args" not in payload
    assert "lineno" not in payload


def test_secret_looking_fields_are_redacted() -> None:
    record = _record()
    record.api_token = "abc123"

    assert json.loads(JsonFormatter().format(record))["api_token"] == "[REDACTED]"
    assert "abc123" not in TextFormatter().format(record)


def test_text_formatter_appends_sorted_context() -> None:
    record = _record()
    record.protocol_id = "p-1"
    record.command = "simulate"

    line = TextFormatter().format(record)
    assert "insight_console.fixtures loaded demo" in line
    assert line.endswith("[command=simulate protocol_id=p-1]")


def test_text_formatter_without_context_has_no_suffix() -> None:
    assert not TextFormatter().format(_record()).endswith("]")


def test_command_filter_stamps_without_overriding() -> None:
    stamped = _record()
    assert CommandFilter("insights").filter(stamped) is True
    assert stamped.command == "insights"

    explicit = _record()
    explicit.command = "counts"
    CommandFilter("insights").filter(explicit)
    assert explicit.command == "counts"


def test_configure_logging_selects_formatter(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    try:
        monkeypatch.setenv("INSIGHT_LOG_FORMAT", "text")
        configure_logging(verbose=True, command="counts")
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[-1].formatter, TextFormatter)

        monkeypatch.delenv("INSIGHT_LOG_FORMAT")
        configure_logging()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        root.handlers[:] = handlers
        root.setLevel(level)
