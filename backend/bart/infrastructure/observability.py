"""Structured Logging — JSON formatter and setup for game/session observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Game extras (session_id, round_index, event, pumps) and request extras
      (error_code, path) surfaced when present
    - setup_logging is idempotent: re-running replaces its own handler

Design Decisions:
    - JSON format in production, human-readable text in development
    - setup_logging called once on startup via lifespan
"""

import logging
import json
from datetime import datetime, timezone

EXTRA_FIELDS: tuple[str, ...] = (
    "session_id", "round_index", "event", "pumps", "error_code", "path",
)
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s — %(message)s"

_HANDLER_NAME = "bart"


class JSONFormatter(logging.Formatter):
    """Format logs as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update(_extract_extras(record))
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def _extract_extras(record: logging.LogRecord) -> dict:
    """Pick known `extra=` keys off a record, skipping unset ones."""
    return {
        key: record.__dict__[key]
        for key in EXTRA_FIELDS
        if record.__dict__.get(key) is not None
    }


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the bart handler on the root logger and return it."""
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
