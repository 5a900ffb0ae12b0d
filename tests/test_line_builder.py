"""Unit tests for LineItemBuilder.

Tests rounding and the payslip details breakdown.
"""

from decimal import Decimal

from payslip_engine.calculators.line_builder import LineItemBuilder
from payslip_engine.calculators.types import (
    GROSS_COMPONENTS,
    PayrollInput,
    PayrollResult,
    StatutoryDeductions,
)


class TestRounding:
    """Test rounding behavior."""

    def test_round_half_up(self):
        """Halves round away from zero."""
        assert LineItemBuilder.round_to_cents(Decimal("0.125")) == Decimal("0.13")
        assert LineItemBuilder.round_to_cents(Decimal("2.675")) == Decimal("2.68")
        assert LineItemBuilder.round_to_cents(Decimal("-0.125")) == Decimal("-0.13")

    def test_round_down(self):
        assert LineItemBuilder.round_to_cents(Decimal("10.004")) == Decimal("10.00")

    def test_precision(self):
        """Rounded amounts carry exactly two decimal places."""
        rounded = LineItemBuilder.round_to_cents(Decimal("7790"))

        assert str(rounded) == "7790.00"


class TestBuildDetails:
    """Test the details breakdown."""

    def _deductions(self) -> StatutoryDeductions:
        return StatutoryDeductions(
            pension_base=Decimal("1000"),
            employee_pension=Decimal("80"),
            employer_pension=Decimal("100"),
            health_insurance=Decimal("50"),
        )

    def test_order_and_keys(self):
        details = LineItemBuilder.build_details(
            PayrollInput(basic_salary=Decimal("1000")),
            [("Commission", Decimal("12.345"))],
            self._deductions(),
            Decimal("3.333333"),
        )

        assert list(details) == [
            *GROSS_COMPONENTS,
            "Commission",
            "employee_pension",
            "employer_pension",
            "health_insurance",
            "monthly_tax",
            "employee_deductions",
            "loan_repayment",
        ]
        assert details["Commission"] == Decimal("12.35")
        assert details["monthly_tax"] == Decimal("3.33")

    def test_same_name_custom_amounts_summed(self):
        details = LineItemBuilder.build_details(
            PayrollInput(),
            [("Bonus Pool", Decimal("10")), ("Bonus Pool", Decimal("5"))],
            self._deductions(),
            Decimal("0"),
        )

        assert details["Bonus Pool"] == Decimal("15.00")

    def test_total_withheld_excludes_employer_pension(self):
        result = PayrollResult(
            gross_income=Decimal("130000.00"),
            employee_pension=Decimal("10400.00"),
            employer_pension=Decimal("13000.00"),
            health_insurance=Decimal("5000.00"),
            tax=Decimal("7790.00"),
            net_pay=Decimal("106810.00"),
        )

        assert LineItemBuilder.total_withheld(result) == Decimal("23190.00")
