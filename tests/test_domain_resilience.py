"""
Tests for the resilience domain layer.

Tests value types and error classes in isolation.
No external dependencies or IO required.
"""

import pytest

from gatekeeper.domain.resilience.entities import (
    AdmissionDecision,
    ClassificationResult,
    FieldError,
    RateLimitPolicy,
)
from gatekeeper.domain.resilience.errors import (
    AppError,
    FieldValidationError,
    RateLimitExceededError,
    ValidationEntry,
)

POLICY = RateLimitPolicy(
    name="auth",
    window_ms=900_000,
    max_requests=30,
    trust_proxy=True,
    rejection_message="Slow down",
)


class TestAppError:
    """Tests for the operational error type."""

    def test_carries_message_and_status(self) -> None:
        err = AppError("Not found - /widgets/9", 404)
        assert err.message == "Not found - /widgets/9"
        assert err.status_code == 404
        assert str(err) == "Not found - /widgets/9"

    def test_is_operational(self) -> None:
        assert AppError("x", 400).is_operational is True

    def test_is_immutable(self) -> None:
        err = AppError("x", 400)
        with pytest.raises(AttributeError):
            err.status_code = 500
        with pytest.raises(AttributeError):
            err.message = "y"

    def test_can_be_raised_and_caught(self) -> None:
        with pytest.raises(AppError) as excinfo:
            raise AppError("Conflict", 409)
        assert excinfo.value.status_code == 409


class TestFieldValidationError:
    """Tests for the validation error container."""

    def test_keeps_entries_in_order(self) -> None:
        entries = [ValidationEntry("a", "1"), ValidationEntry("b", "2")]
        err = FieldValidationError(entries)
        assert err.entries == tuple(entries)
        assert "2 field(s)" in str(err)


class TestClassificationResult:
    """Tests for payload rendering."""

    def test_field_errors_rendered_as_list(self) -> None:
        result = ClassificationResult(
            status_code=400,
            message=(FieldError("email", "invalid"),),
            include_stack=False,
        )
        assert result.to_payload() == {
            "status": "error",
            "message": [{"field": "email", "message": "invalid"}],
        }

    def test_stack_only_when_included(self) -> None:
        hidden = ClassificationResult(500, "boom", include_stack=False, stack="trace")
        shown = ClassificationResult(500, "boom", include_stack=True, stack="trace")
        assert "stack" not in hidden.to_payload()
        assert shown.to_payload()["stack"] == "trace"


class TestAdmissionDecision:
    """Tests for quota headers."""

    def test_reset_rounds_up_to_whole_seconds(self) -> None:
        decision = AdmissionDecision(
            allowed=True, policy=POLICY, remaining=5, reset_at=100.2, decided_at=99.0
        )
        assert decision.reset_after_seconds == 2
        assert decision.limit == 30

    def test_reset_never_negative(self) -> None:
        decision = AdmissionDecision(
            allowed=True, policy=POLICY, remaining=5, reset_at=10.0, decided_at=20.0
        )
        assert decision.reset_after_seconds == 0

    def test_rejection_error_carries_policy_message(self) -> None:
        decision = AdmissionDecision(
            allowed=False, policy=POLICY, remaining=0, reset_at=10.0, decided_at=5.0
        )
        err = RateLimitExceededError(decision)
        assert str(err) == "Slow down"
        assert err.decision.headers()["Retry-After"] == "5"
