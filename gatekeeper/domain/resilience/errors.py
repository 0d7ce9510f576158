"""
Domain-specific errors for the resilience bounded context.

AppError is the explicit, deliberately-raised error for expected
failures. Its message is always safe to show to clients.
These are mapped to HTTP responses at the shared layer.
No framework imports allowed.
"""

from dataclasses import dataclass
from typing import Sequence

from gatekeeper.domain.resilience.entities import AdmissionDecision


class AppError(Exception):
    """An anticipated failure raised on purpose by application code.

    Operational errors keep their message in every disclosure mode
    and never carry a stack trace in the response.
    """

    is_operational = True

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

    def __setattr__(self, name: str, value: object) -> None:
        if name in ("message", "status_code") and name in self.__dict__:
            raise AttributeError(f"AppError.{name} is read-only")
        super().__setattr__(name, value)


@dataclass(frozen=True)
class ValidationEntry:
    """One failed validation rule, as reported by a request validator."""

    param: str
    msg: str


class FieldValidationError(Exception):
    """Raised when request input fails one or more validation rules."""

    def __init__(self, entries: Sequence[ValidationEntry]) -> None:
        self.entries = tuple(entries)
        super().__init__(f"Validation failed for {len(self.entries)} field(s)")


class RateLimitExceededError(Exception):
    """Raised when a route-class policy rejects a request.

    Never reaches the error classifier: it is rendered directly
    from the admission decision it carries.
    """

    def __init__(self, decision: AdmissionDecision) -> None:
        self.decision = decision
        super().__init__(decision.policy.rejection_message)
