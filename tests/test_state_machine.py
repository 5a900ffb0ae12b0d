"""Tests for payroll period state machine."""

import pytest

from payslip_engine.services.state_machine import (
    InvalidTransitionError,
    PayrollStateMachine,
    PayrollStatus,
)


class TestPayrollStateMachine:
    """Test state machine transitions."""

    def test_valid_transitions(self):
        """Test that valid transitions are allowed."""
        # draft → processing
        assert PayrollStateMachine.can_transition("draft", "processing") is True

        # draft → cancelled
        assert PayrollStateMachine.can_transition("draft", "cancelled") is True

        # processing → paid
        assert PayrollStateMachine.can_transition("processing", "paid") is True

        # processing → cancelled
        assert PayrollStateMachine.can_transition("processing", "cancelled") is True

        # processing → draft (reopen)
        assert PayrollStateMachine.can_transition("processing", "draft") is True

    def test_invalid_transitions(self):
        """Test that invalid transitions are blocked."""
        # Can't skip processing
        assert PayrollStateMachine.can_transition("draft", "paid") is False

        # Paid and cancelled are terminal
        assert PayrollStateMachine.can_transition("paid", "draft") is False
        assert PayrollStateMachine.can_transition("paid", "cancelled") is False
        assert PayrollStateMachine.can_transition("cancelled", "draft") is False

    def test_validate_transition_raises(self):
        """Test that validate_transition raises for invalid transitions."""
        with pytest.raises(InvalidTransitionError) as exc_info:
            PayrollStateMachine.validate_transition("draft", "paid")

        assert exc_info.value.from_status == "draft"
        assert exc_info.value.to_status == "paid"

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            PayrollStateMachine.validate_transition("draft", "archived")

        assert exc_info.value.reason == "unknown status"

    def test_enum_values_accepted(self):
        PayrollStateMachine.validate_transition(PayrollStatus.DRAFT, PayrollStatus.PROCESSING)

