"""Tests for the optional input pre-check layer."""

import pytest
from decimal import Decimal

from payslip_engine.calculators.types import PayrollInput
from payslip_engine.calculators.validation import InputValidator, ValidationError


class TestInputValidator:

    def test_valid_input_passes(self):
        InputValidator().validate(PayrollInput(basic_salary=Decimal("1000")))

    def test_missing_basic_salary(self):
        raw = {"housing_allowance": "500"}

        with pytest.raises(ValidationError) as exc_info:
            InputValidator().validate(PayrollInput.from_mapping(raw), raw)

        assert exc_info.value.field_name == "basic_salary"
        assert exc_info.value.message == "is required"

    def test_zero_basic_salary(self):
        with pytest.raises(ValidationError) as exc_info:
            InputValidator().validate(PayrollInput())

        assert exc_info.value.message == "must be greater than zero"

    def test_basic_salary_optional(self):
        InputValidator(require_basic_salary=False).validate(PayrollInput())

    def test_negative_component_rejected(self):
        payroll_input = PayrollInput(
            basic_salary=Decimal("1000"), loan_repayment=Decimal("-5")
        )

        with pytest.raises(ValidationError) as exc_info:
            InputValidator().validate(payroll_input)

        assert exc_info.value.field_name == "loan_repayment"

    def test_negative_allowed_when_configured(self):
        payroll_input = PayrollInput(basic_salary=Decimal("1000"), bonus=Decimal("-5"))

        InputValidator(allow_negative=True).validate(payroll_input)

    def test_employee_name_stripped(self):
        assert InputValidator.validate_employee_name("  Ada Obi ") == "Ada Obi"

    @pytest.mark.parametrize("name", ["", "   ", None, 42])
    def test_blank_employee_name(self, name):
        with pytest.raises(ValidationError):
            InputValidator.validate_employee_name(name)
