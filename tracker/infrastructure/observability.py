"""Structured Logging: one JSON object per record for the tracker logger tree.

Invariants:
    - Every line carries timestamp (record creation time, UTC), level, logger, message
    - Only whitelisted extras are emitted: store operation, entity ids, error code,
      HTTP status, saga step, result count
    - The auth token is never a log field; nothing outside the whitelist leaks

Design Decisions:
    - Library etiquette: importing tracker configures nothing; callers opt in through
      setup_logging() or TrackerClient.from_settings(configure_logging=True)
    - Handler attached to the "tracker" logger, not root, so host apps keep control
"""

import json
import logging
from datetime import datetime, timezone

LOG_FIELDS = (
    "operation", "project_id", "task_id", "card_id", "user_id",
    "comment_id", "error_code", "status_code", "step", "count",
)

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Render a record and its whitelisted extras as compact JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            name: value for name in LOG_FIELDS
            if (value := getattr(record, name, None)) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        # Ids may be any hashable the server sends; str() anything json can't encode
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Attach a stream handler to the "tracker" logger. Returns the handler."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT))
    tracker_logger = logging.getLogger("tracker")
    tracker_logger.addHandler(handler)
    tracker_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
