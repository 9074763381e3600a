"""Structured Logging: one JSON object per record, schedule context included.

Invariants:
    - Every line carries timestamp (the record's own creation time), level,
      logger and message
    - Schedule context passed through `extra=` (EXTRA_FIELDS) is copied when
      present and never invented when absent
    - setup_logging is idempotent: calling it again replaces its handler
      instead of stacking a second one

Design Decisions:
    - Formatter on stdlib logging, no logging library
    - log_format "text" gives a plain single-line format for local runs
"""

import json
import logging
from datetime import datetime, timezone


EXTRA_FIELDS: tuple[str, ...] = (
    "schedule_id", "error_code", "attempt", "schedule_count",
    "operation", "path",
)

_HANDLER_NAME = "tempsched"


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, record.__dict__[key]) for key in EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the package's root handler, replacing any earlier one."""
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json"
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"),
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
