"""
Log sink adapter backed by the standard logging module.

Implements the LogSink port. Records go to the "gatekeeper.errors"
logger at ERROR level; handlers attached by configure_logging decide
where they end up (console, JSON-lines file).
"""

import logging
from typing import Optional

from gatekeeper.domain.resilience.entities import ErrorLogRecord
from gatekeeper.domain.resilience.ports import LogSink

ERROR_LOGGER_NAME = "gatekeeper.errors"


class LoggingLogSink(LogSink):
    """Adapter that writes error records through a stdlib logger.

    The full record is attached as ``error_record`` so structured
    formatters can emit it verbatim.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger(ERROR_LOGGER_NAME)

    def write(self, record: ErrorLogRecord) -> None:
        self._logger.error(
            "%s %s -> %d: %s\n%s",
            record.method,
            record.path,
            record.status_code,
            record.message,
            record.stack,
            extra={"error_record": record.as_dict()},
        )
