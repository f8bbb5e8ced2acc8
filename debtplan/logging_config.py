# debtplan/logging_config.py
"""Logging setup: plain text by default, one JSON object per line when enabled."""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from .config import Settings, get_settings

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    # LogRecord attributes that are not user-supplied extras
    _STANDARD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self._STANDARD_ATTRS
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        return json.dumps(log_data, default=str)


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Install a single stream handler on the ``debtplan`` logger.

    Safe to call more than once; the previous handler is replaced.
    """
    settings = settings or get_settings()
    logger = logging.getLogger("debtplan")
    logger.setLevel(settings.log_level)

    for handler in list(logger.handlers):
        if getattr(handler, "_debtplan_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._debtplan_handler = True
    handler.setFormatter(JSONFormatter() if settings.log_json else logging.Formatter(PLAIN_FORMAT))
    logger.addHandler(handler)
    return logger
