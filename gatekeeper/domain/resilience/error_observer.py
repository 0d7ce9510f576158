"""
Observation boundary for raw errors.

Every value that escapes request handling is inspected here exactly once
and tagged with an ErrorKind. The classifier only ever sees ObservedError,
so shape checks on names, codes and sequences live in this module alone.

Precedence mirrors the classification order, where later rules win:
conflict > auth token > validation > operational > programmer.
"""

import traceback
from collections.abc import Mapping, Sequence
from typing import Optional

from gatekeeper.domain.resilience.entities import ErrorKind, FieldError, ObservedError
from gatekeeper.domain.resilience.errors import FieldValidationError

# Names used by JWT libraries for malformed and expired tokens.
AUTH_TOKEN_ERROR_NAMES = frozenset(
    {
        "JsonWebTokenError",
        "TokenExpiredError",
        "InvalidTokenError",
        "ExpiredSignatureError",
        "DecodeError",
    }
)

# PostgreSQL SQLSTATE for unique_violation.
UNIQUE_VIOLATION_CODE = "23505"

_DB_CODE_ATTRIBUTES = ("code", "pgcode", "sqlstate")
_MAX_CAUSE_DEPTH = 5

# Record-shaped errors may spell fields the way JSON payloads do.
_FIELD_ALIASES = {
    "status_code": ("status_code", "statusCode"),
    "is_operational": ("is_operational", "isOperational"),
}


def observe_error(err: object) -> ObservedError:
    """Tag a raw error with its kind and extract what classification needs.

    Errors may be exception objects or plain records (mappings); every
    field is read the same way from both.
    """
    field_errors = tuple(
        FieldError(
            field=str(_field(entry, "param")),
            message=str(_field(entry, "msg")),
        )
        for entry in _validation_entries(err)
    )
    is_operational = bool(_field(err, "is_operational", False))

    if _is_unique_violation(err):
        kind = ErrorKind.CONFLICT
    elif _is_auth_token_error(err):
        kind = ErrorKind.AUTH_TOKEN
    elif field_errors:
        kind = ErrorKind.VALIDATION
    elif is_operational:
        kind = ErrorKind.OPERATIONAL
    else:
        kind = ErrorKind.PROGRAMMER

    return ObservedError(
        kind=kind,
        status_code=_declared_status(err),
        message=_message_of(err),
        stack=_stack_of(err),
        is_operational=is_operational,
        field_errors=field_errors,
    )


def _field(source: object, name: str, default: object = None) -> object:
    """Read a field from an exception attribute or a mapping key."""
    for alias in _FIELD_ALIASES.get(name, (name,)):
        if isinstance(source, Mapping):
            if alias in source:
                return source[alias]
        elif hasattr(source, alias):
            return getattr(source, alias)
    return default


def _validation_entries(err: object) -> Sequence[object]:
    if isinstance(err, FieldValidationError):
        return err.entries
    if isinstance(err, (str, bytes)) or not isinstance(err, Sequence):
        return ()
    if len(err) == 0:
        return ()
    if all(_has_entry_shape(entry) for entry in err):
        return err
    return ()


def _has_entry_shape(entry: object) -> bool:
    if isinstance(entry, Mapping):
        return "param" in entry and "msg" in entry
    return hasattr(entry, "param") and hasattr(entry, "msg")


def _is_auth_token_error(err: object) -> bool:
    if _field(err, "name") in AUTH_TOKEN_ERROR_NAMES:
        return True
    return any(cls.__name__ in AUTH_TOKEN_ERROR_NAMES for cls in type(err).__mro__)


def _is_unique_violation(err: object) -> bool:
    """Check the error and its wrapped driver errors for SQLSTATE 23505.

    Database layers wrap driver errors (`orig` on SQLAlchemy's DBAPIError,
    `__cause__` on re-raised exceptions), so the chain is followed a few
    levels deep.
    """
    seen: set[int] = set()
    current: Optional[object] = err
    for _ in range(_MAX_CAUSE_DEPTH):
        if current is None or id(current) in seen:
            return False
        seen.add(id(current))
        for attribute in _DB_CODE_ATTRIBUTES:
            code = _field(current, attribute)
            if code is not None and str(code) == UNIQUE_VIOLATION_CODE:
                return True
        current = _field(current, "orig") or _field(current, "__cause__")
    return False


def _declared_status(err: object) -> Optional[int]:
    status = _field(err, "status_code")
    if isinstance(status, int) and not isinstance(status, bool) and status > 0:
        return status
    return None


def _message_of(err: object) -> str:
    message = _field(err, "message")
    if isinstance(message, str):
        return message
    if isinstance(err, BaseException):
        return str(err)
    return ""


def _stack_of(err: object) -> Optional[str]:
    if not isinstance(err, BaseException):
        stack = _field(err, "stack")
        return stack if isinstance(stack, str) else None
    return "".join(traceback.format_exception(type(err), err, err.__traceback__))
