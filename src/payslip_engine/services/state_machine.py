"""Payroll period state machine with transition validation."""

from __future__ import annotations

from enum import Enum


class PayrollStatus(str, Enum):
    """Payroll period status values."""

    DRAFT = "draft"
    PROCESSING = "processing"
    PAID = "paid"
    CANCELLED = "cancelled"


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class PayrollStateMachine:
    """State machine for payroll period status transitions.

    Allowed transitions:
    - draft → processing
    - draft → cancelled
    - processing → paid
    - processing → cancelled
    - processing → draft (reopen)
    """

    # Define valid transitions: {from_status: [allowed_to_statuses]}
    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayrollStatus.DRAFT.value: [PayrollStatus.PROCESSING.value, PayrollStatus.CANCELLED.value],
        PayrollStatus.PROCESSING.value: [
            PayrollStatus.PAID.value,
            PayrollStatus.CANCELLED.value,
            PayrollStatus.DRAFT.value,
        ],
        PayrollStatus.PAID.value: [],  # Terminal state
        PayrollStatus.CANCELLED.value: [],  # Terminal state
    }

    @staticmethod
    def _value(status: str | PayrollStatus) -> str:
        return status.value if isinstance(status, PayrollStatus) else status

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(cls._value(from_status), [])
        return cls._value(to_status) in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        from_status, to_status = cls._value(from_status), cls._value(to_status)
        if to_status not in cls.VALID_TRANSITIONS:
            raise InvalidTransitionError(from_status, to_status, "unknown status")
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

