"""Structured Logging - donation-aware log formatting and startup configuration.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Entity context (listing_id, request_id, report_id) and error context
      (error_code, operation, actor_role, path) appear only when the call site
      passed them via `extra=`
    - UUIDs and enums are rendered as plain strings in both formats
    - setup_logging is idempotent: calling it twice never duplicates output

Design Decisions:
    - "json" for deployed instances (one object per line), "text" for local runs
      with the entity context appended in brackets
    - SQLAlchemy engine chatter is held at WARNING unless the level is DEBUG
"""

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID


CONTEXT_FIELDS = ("listing_id", "request_id", "report_id")
ERROR_FIELDS = ("error_code", "operation", "actor_role", "path")
EXTRA_FIELDS = CONTEXT_FIELDS + ERROR_FIELDS

QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite")

_HANDLER_MARK = "_foodloop_handler"


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    return value


def record_context(record: logging.LogRecord, fields=EXTRA_FIELDS) -> dict:
    """Extra fields set on the record, in declaration order."""
    found = {}
    for key in fields:
        val = record.__dict__.get(key)
        if val is not None:
            found[key] = _plain(val)
    return found


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            payload["exc_type"] = record.exc_info[0].__name__
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ContextTextFormatter(logging.Formatter):
    """Human-readable lines with entity context appended."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in context.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the FoodLoop handler on the root logger, replacing a previous one."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, _HANDLER_MARK, False):
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else ContextTextFormatter())
    setattr(handler, _HANDLER_MARK, True)
    root.addHandler(handler)

    resolved = logging.getLevelName(level.upper())
    root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
    quiet = logging.DEBUG if root.level <= logging.DEBUG else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet)
    return handler
