"""Optional pre-check layer in front of the calculator.

The calculator itself is permissive: missing amounts are 0 and negative
amounts pass through. Callers that want stricter rules run these checks
first.
"""

from __future__ import annotations

from typing import Any, Mapping

from payslip_engine.calculators.types import CANONICAL_FIELDS, PayrollInput


class ValidationError(Exception):
    """Raised when a required field is missing or malformed."""

    def __init__(self, field_name: str, message: str):
        self.field_name = field_name
        self.message = message
        super().__init__(f"{field_name}: {message}")


class InputValidator:
    """Checks inputs before they reach the calculator or the record store."""

    def __init__(self, require_basic_salary: bool = True, allow_negative: bool = False):
        self.require_basic_salary = require_basic_salary
        self.allow_negative = allow_negative

    def validate(self, payroll_input: PayrollInput, raw: Mapping[str, Any] | None = None) -> None:
        """Raise ValidationError on the first problem found.

        ``raw`` is the mapping the input was built from, if any; it lets the
        basic-salary check tell "absent" apart from an explicit 0.
        """
        if self.require_basic_salary:
            if raw is not None and raw.get("basic_salary") in (None, ""):
                raise ValidationError("basic_salary", "is required")
            if payroll_input.basic_salary <= 0:
                raise ValidationError("basic_salary", "must be greater than zero")

        if not self.allow_negative:
            for name in CANONICAL_FIELDS:
                if payroll_input.amount(name) < 0:
                    raise ValidationError(name, "must not be negative")

    @staticmethod
    def validate_employee_name(name: Any) -> str:
        """Return the stripped name, or raise if blank."""
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("employee_name", "must not be blank")
        return name.strip()
