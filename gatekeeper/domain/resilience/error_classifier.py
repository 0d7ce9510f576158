"""
Error classifier: the single funnel for failed requests.

Maps any raw error to a ClassificationResult through an ordered rule set
and writes one audit record per failed request.

Rules (later rules override earlier ones):
    1. Baseline: declared status or 500, own message or generic text.
    2. Validation entries → 400 with one FieldError per entry.
    3. Malformed/expired auth token → 401 with a fixed message.
    4. Database unique violation → 409 with a fixed message.
    5. Production mode masks messages of non-operational errors.
       Messages produced by rules 2-4 are never masked.
    6. Stack is disclosed only outside production, for non-operational errors.
"""

import logging
from typing import Union

from gatekeeper.domain.resilience.entities import (
    ClassificationResult,
    ErrorKind,
    ErrorLogRecord,
    FieldError,
    ObservedError,
    RequestContext,
)
from gatekeeper.domain.resilience.error_observer import observe_error
from gatekeeper.domain.resilience.ports import LogSink

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "A server error occurred"
INVALID_TOKEN_MESSAGE = "Invalid authentication token"
RECORD_EXISTS_MESSAGE = "Record already exists in the database"
UNKNOWN_ERROR_MESSAGE = "Unknown error"
NO_STACK_MESSAGE = "No stack trace available"

HTTP_400 = 400
HTTP_401 = 401
HTTP_409 = 409
HTTP_500 = 500

_RULE_DERIVED_KINDS = frozenset(
    {ErrorKind.VALIDATION, ErrorKind.AUTH_TOKEN, ErrorKind.CONFLICT}
)

PublicMessage = Union[str, tuple[FieldError, ...]]


class ErrorClassifier:
    """Deterministic, total mapping from raw errors to public responses.

    Args:
        log_sink: Receives one ErrorLogRecord per classified error.
        production: True when running in production disclosure mode.
    """

    def __init__(self, log_sink: LogSink, production: bool) -> None:
        self._log_sink = log_sink
        self._production = production

    def classify(self, err: object, context: RequestContext) -> ClassificationResult:
        """Classify a raw error raised while handling a request.

        Args:
            err: Any value raised by handler code.
            context: Path and method of the failed request.

        Returns:
            The status code and public payload for the response.
        """
        observed = observe_error(err)
        status_code, message = self._apply_rules(observed)

        self._emit(observed, context, status_code)

        if self._production and not self._is_disclosable(observed):
            message = GENERIC_SERVER_ERROR

        include_stack = not self._production and not observed.is_operational
        return ClassificationResult(
            status_code=status_code,
            message=message,
            include_stack=include_stack,
            stack=observed.stack if include_stack else None,
        )

    @staticmethod
    def _apply_rules(observed: ObservedError) -> tuple[int, PublicMessage]:
        status_code = observed.status_code or HTTP_500
        message: PublicMessage = observed.message or GENERIC_SERVER_ERROR

        if observed.kind is ErrorKind.VALIDATION:
            status_code, message = HTTP_400, observed.field_errors
        elif observed.kind is ErrorKind.AUTH_TOKEN:
            status_code, message = HTTP_401, INVALID_TOKEN_MESSAGE
        elif observed.kind is ErrorKind.CONFLICT:
            status_code, message = HTTP_409, RECORD_EXISTS_MESSAGE

        return status_code, message

    @staticmethod
    def _is_disclosable(observed: ObservedError) -> bool:
        return observed.is_operational or observed.kind in _RULE_DERIVED_KINDS

    def _emit(
        self, observed: ObservedError, context: RequestContext, status_code: int
    ) -> None:
        """Write the audit record. A failing sink never breaks the response."""
        record = ErrorLogRecord(
            message=observed.message or UNKNOWN_ERROR_MESSAGE,
            stack=observed.stack or NO_STACK_MESSAGE,
            path=context.path,
            method=context.method,
            status_code=status_code,
        )
        try:
            self._log_sink.write(record)
        except Exception:
            logger.warning(
                "Log sink rejected error record for %s %s",
                context.method,
                context.path,
                exc_info=True,
            )
