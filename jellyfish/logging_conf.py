"""JSON-line logging for the server.

Every record becomes one JSON object on stdout, carrying any structured
fields passed via `logger.info("msg", extra={...})`. setup_logging() is
idempotent so tests and reloads never stack handlers.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from logging import Handler, LogRecord
from typing import Any

_DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Attributes every LogRecord carries; anything else on a record came from `extra`.
_RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    """Render a record as `{ts, level, logger, message, **extra}`."""

    def format(self, record: LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
        }
        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            payload["message"] = record.getMessage()

        for key, value in record.__dict__.items():
            if key not in _RESERVED and key not in payload:
                payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        # Paths and datetimes show up in extras; stringify rather than fail.
        return json.dumps(payload, ensure_ascii=False, default=str)


def _make_stream_handler(level: int) -> Handler:
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter())
    return handler


def resolve_level(level: str | int) -> int:
    """Map a level name ("debug", "WARN", ...) to its numeric value, INFO if unknown."""
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(level: str | int = _DEFAULT_LEVEL) -> None:
    """Attach the JSON handler to the root logger and route uvicorn through it.

    Idempotent: a root logger that already has handlers is left alone.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    numeric = resolve_level(level)
    root.setLevel(numeric)
    root.addHandler(_make_stream_handler(numeric))

    for name in _SERVER_LOGGERS:
        lg = logging.getLogger(name)
        lg.setLevel(numeric)
        lg.propagate = True
        for h in list(lg.handlers):
            lg.removeHandler(h)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a named logger, e.g. get_logger("service.static")."""
    return logging.getLogger(name if name else __name__)
