"""Structured logging for action runs.

Uses standard library logging with a JSON formatter. Every record is tagged with
the run id and event name so decisions from concurrent runs can be told apart
in aggregated logs.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

# Attributes every LogRecord carries; anything else came in via `extra=`.
_STANDARD_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "run_id", "event_name"}


class RunContextFilter(logging.Filter):
    """Stamp records with the current run id and event name."""

    def __init__(self, *, run_id: str = "", event_name: str = "") -> None:
        super().__init__()
        self.run_id = run_id
        self.event_name = event_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id
        record.event_name = self.event_name
        return True


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        run_id = getattr(record, "run_id", "")
        if run_id:
            payload["run_id"] = run_id
        event_name = getattr(record, "event_name", "")
        if event_name:
            payload["event_name"] = event_name

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(
    level: str,
    *,
    run_id: str = "",
    event_name: str = "",
    stream: TextIO | None = None,
) -> None:
    """Configure root logging with structured JSON output.

    Logs go to stderr by default so stdout stays free for command output.
    """

    root = logging.getLogger()

    # Re-configuring replaces handlers instead of stacking them.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=stream or sys.stderr)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RunContextFilter(run_id=run_id, event_name=event_name))

    root.addHandler(handler)
    root.setLevel(level.upper())
