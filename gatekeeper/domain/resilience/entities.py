"""
Domain entities for the resilience bounded context.

Value types exchanged between the error classifier, the rate limiter
and their adapters. They contain no framework imports and no IO.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class ErrorKind(Enum):
    """Closed set of error shapes the classifier distinguishes."""

    VALIDATION = "validation"
    AUTH_TOKEN = "auth_token"
    CONFLICT = "conflict"
    OPERATIONAL = "operational"
    PROGRAMMER = "programmer"


@dataclass(frozen=True)
class FieldError:
    """Client-visible detail for one failed validation rule."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class RequestContext:
    """The parts of a failed request the classifier logs."""

    path: str
    method: str


@dataclass(frozen=True)
class ObservedError:
    """A raw error tagged with its kind at the observation boundary.

    Attributes:
        kind: Which classification rule applies.
        status_code: Status declared by the raiser, if any.
        message: The error's own message ("" when it has none).
        stack: Formatted traceback text, if the error is an exception.
        is_operational: The error's own disclosure flag.
        field_errors: Mapped validation entries (VALIDATION kind only).
    """

    kind: ErrorKind
    status_code: Optional[int]
    message: str
    stack: Optional[str]
    is_operational: bool
    field_errors: tuple[FieldError, ...] = ()


@dataclass(frozen=True)
class ErrorLogRecord:
    """Audit record written to the log sink once per failed request."""

    message: str
    stack: str
    path: str
    method: str
    status_code: int

    def as_dict(self) -> dict[str, Union[str, int]]:
        return {
            "message": self.message,
            "stack": self.stack,
            "path": self.path,
            "method": self.method,
            "statusCode": self.status_code,
        }


@dataclass(frozen=True)
class ClassificationResult:
    """Status code and public payload computed for a failed request."""

    status_code: int
    message: Union[str, tuple[FieldError, ...]]
    include_stack: bool
    stack: Optional[str] = None

    def to_payload(self) -> dict[str, object]:
        """Render the external error body: {status, message, stack?}."""
        if isinstance(self.message, tuple):
            message: object = [item.to_dict() for item in self.message]
        else:
            message = self.message
        payload: dict[str, object] = {"status": "error", "message": message}
        if self.include_stack and self.stack is not None:
            payload["stack"] = self.stack
        return payload


@dataclass(frozen=True)
class RateLimitPolicy:
    """Static admission policy for one route class.

    Attributes:
        name: Policy identifier, also the counter namespace.
        window_ms: Length of one fixed window in milliseconds.
        max_requests: Requests admitted per client within one window.
        trust_proxy: Key clients by the first forwarded hop.
        rejection_message: Message returned once the quota is spent.
    """

    name: str
    window_ms: int
    max_requests: int
    trust_proxy: bool
    rejection_message: str

    def __post_init__(self) -> None:
        if self.window_ms <= 0:
            raise ValueError(f"window_ms must be positive, got {self.window_ms}")
        if self.max_requests < 1:
            raise ValueError(
                f"max_requests must be at least 1, got {self.max_requests}"
            )

    @property
    def window_seconds(self) -> float:
        return self.window_ms / 1000


@dataclass(frozen=True)
class RateLimitBucket:
    """Request counter for one client key within the current window."""

    key: str
    count: int
    window_started_at: float


@dataclass(frozen=True)
class AdmissionDecision:
    """Outcome of one admission check, with quota details for headers."""

    allowed: bool
    policy: RateLimitPolicy
    remaining: int
    reset_at: float
    decided_at: float = field(compare=False)

    @property
    def limit(self) -> int:
        return self.policy.max_requests

    @property
    def reset_after_seconds(self) -> int:
        return max(0, math.ceil(self.reset_at - self.decided_at))

    def headers(self) -> dict[str, str]:
        """Standard RateLimit-* headers, plus Retry-After on rejection."""
        headers = {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_after_seconds),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.reset_after_seconds)
        return headers

    def rejection_payload(self) -> dict[str, str]:
        return {"status": "error", "message": self.policy.rejection_message}
