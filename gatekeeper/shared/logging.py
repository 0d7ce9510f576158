"""
Logging configuration for the application.

Sets up structured logging with a consistent format.
Logging must not change program behavior.
Never logs sensitive data (request bodies, secrets, raw payloads).
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from gatekeeper.infrastructure.resilience.log_sink import ERROR_LOGGER_NAME

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonRecordFormatter(logging.Formatter):
    """Render error records as one JSON object per line.

    Uses the ``error_record`` attached by LoggingLogSink when present,
    otherwise falls back to the formatted message.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
        }
        error_record = getattr(record, "error_record", None)
        if isinstance(error_record, dict):
            payload.update(error_record)
        else:
            payload["message"] = record.getMessage()
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: str = "INFO", error_log_file: Optional[str] = None) -> None:
    """Configure structured logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
        error_log_file: When set, error records are also appended to
            this file as JSON lines.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    error_logger = logging.getLogger(ERROR_LOGGER_NAME)
    for handler in list(error_logger.handlers):
        if getattr(handler, "_gatekeeper_error_file", False):
            error_logger.removeHandler(handler)
            handler.close()
    if error_log_file:
        file_handler = logging.FileHandler(error_log_file, encoding="utf-8", delay=True)
        file_handler.setLevel(logging.ERROR)
        file_handler.setFormatter(JsonRecordFormatter())
        file_handler._gatekeeper_error_file = True  # type: ignore[attr-defined]
        error_logger.addHandler(file_handler)

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
