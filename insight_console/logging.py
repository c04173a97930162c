from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from typing import Any

LOG_FORMAT_ENV = "INSIGHT_LOG_FORMAT"

_SENSITIVE_KEYS = {"api_key", "authorization", "password", "secret", "token"}

# Attributes every LogRecord carries; anything else came in through `extra=`.
_STANDARD_ATTRS = set(logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__) | {"message", "asctime"}


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Return the `extra=` fields of a record, with secret-looking keys redacted."""
    context: dict[str, Any] = {}
    for key, value in record.__dict__.items():
        if key.startswith("_") or key in _STANDARD_ATTRS:
            continue
        lowered = key.lower()
        if any(secret in lowered for secret in _SENSITIVE_KEYS):
            context[key] = "[REDACTED]"
        else:
            context[key] = value
    return context


class CommandFilter(logging.Filter):
    """Stamp every record with the console subcommand being run."""

    def __init__(self, command: str | None) -> None:
        super().__init__()
        self.command = command

    def filter(self, record: logging.LogRecord) -> bool:
        if self.command and not hasattr(record, "command"):
            record.command = self.command
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        payload.update(record_context(record))
        return json.dumps(payload, ensure_ascii=True, separators=(",", ":"), default=str)


class TextFormatter(logging.Formatter):
    """Plain text with the extra fields appended as sorted key=value pairs."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={context[key]}" for key in sorted(context))
        return f"{line} [{pairs}]"


def configure_logging(verbose: bool = False, command: str | None = None) -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    level = logging.DEBUG if verbose else logging.INFO
    # stderr; stdout is reserved for command output
    handler = logging.StreamHandler()
    handler.addFilter(CommandFilter(command))

    if os.getenv(LOG_FORMAT_ENV, "json").lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(TextFormatter())

    root.setLevel(level)
    root.addHandler(handler)
