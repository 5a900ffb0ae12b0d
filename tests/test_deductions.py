"""Tests for statutory pension and health insurance deductions."""

import pytest
from decimal import Decimal

from payslip_engine.calculators.deductions import DeductionCalculator
from payslip_engine.calculators.types import PayrollInput, ReliefPolicy, StatutoryRates


class TestDeductionCalculator:
    """Test percentage deductions."""

    def test_reference_employee(self):
        """Pension on basic + housing + transport; health on basic only."""
        deductions = DeductionCalculator().compute(
            PayrollInput(
                basic_salary=Decimal("100000"),
                housing_allowance=Decimal("20000"),
                transport_allowance=Decimal("10000"),
                bonus=Decimal("50000"),
            )
        )

        assert deductions.pension_base == Decimal("130000")
        assert deductions.employee_pension == Decimal("10400")
        assert deductions.employer_pension == Decimal("13000")
        assert deductions.health_insurance == Decimal("5000")

    def test_other_allowances_excluded_from_pension_base(self):
        calc = DeductionCalculator()
        deductions = calc.compute(
            PayrollInput(basic_salary=Decimal("1000"), utility_allowance=Decimal("9999"))
        )

        assert deductions.pension_base == Decimal("1000")

    def test_zero_input(self):
        deductions = DeductionCalculator().compute(PayrollInput())

        assert deductions.employee_pension == Decimal("0")
        assert deductions.employer_pension == Decimal("0")
        assert deductions.health_insurance == Decimal("0")

    def test_custom_rates(self):
        """Rates come from the injected StatutoryRates."""
        calc = DeductionCalculator(
            StatutoryRates(
                employee_pension_rate=Decimal("0.10"),
                employer_pension_rate=Decimal("0.12"),
                health_insurance_rate=Decimal("0"),
            )
        )

        assert calc.employee_pension(Decimal("1000")) == Decimal("100")
        assert calc.employer_pension(Decimal("1000")) == Decimal("120")
        assert calc.health_insurance(Decimal("1000")) == Decimal("0")

    def test_negative_amounts_pass_through(self):
        """No clamping: a negative basic yields a negative deduction."""
        deductions = DeductionCalculator().compute(PayrollInput(basic_salary=Decimal("-1000")))

        assert deductions.employee_pension == Decimal("-80")
        assert deductions.health_insurance == Decimal("-50")


class TestRateConfiguration:
    """Test config validation."""

    def test_rate_above_one_rejected(self):
        with pytest.raises(ValueError):
            StatutoryRates(employee_pension_rate=Decimal("1.5"))

    def test_negative_rate_rejected(self):
        with pytest.raises(ValueError):
            StatutoryRates(health_insurance_rate=Decimal("-0.01"))

    def test_relief_uses_floor_for_small_gross(self):
        """1% of 1.56m is below the 200000 floor."""
        relief = ReliefPolicy().relief_for(Decimal("1560000"))

        assert relief == Decimal("512000")

    def test_relief_uses_fraction_for_large_gross(self):
        """1% of 30m exceeds the floor."""
        relief = ReliefPolicy().relief_for(Decimal("30000000"))

        assert relief == Decimal("300000") + Decimal("6000000")

    def test_negative_floor_rejected(self):
        with pytest.raises(ValueError):
            ReliefPolicy(floor=Decimal("-1"))
