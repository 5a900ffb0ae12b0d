"""Payslip line-item breakdown and boundary rounding."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from payslip_engine.calculators.types import (
    GROSS_COMPONENTS,
    ZERO,
    PayrollInput,
    PayrollResult,
    StatutoryDeductions,
)


class LineItemBuilder:
    """Builds the ``details`` breakdown of a payslip.

    Rounding:
    - Internal compute is unrounded Decimal
    - Every emitted figure is rounded to 2 decimals, half away from zero
      (ROUND_HALF_UP), exactly once
    """

    OUTPUT_PRECISION = Decimal("0.01")

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places."""
        return amount.quantize(LineItemBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def build_details(
        payroll_input: PayrollInput,
        custom_amounts: Iterable[tuple[str, Decimal]],
        deductions: StatutoryDeductions,
        monthly_tax: Decimal,
    ) -> dict[str, Decimal]:
        """Assemble every contributing component, rounded, in payslip order.

        Custom amounts are keyed by display name; two fields sharing a name
        are summed into one line.
        """
        details: dict[str, Decimal] = {}
        amounts = payroll_input.canonical_amounts()

        for name in GROSS_COMPONENTS:
            details[name] = amounts[name]

        for name, amount in custom_amounts:
            details[name] = details.get(name, ZERO) + amount

        details["employee_pension"] = deductions.employee_pension
        details["employer_pension"] = deductions.employer_pension
        details["health_insurance"] = deductions.health_insurance
        details["monthly_tax"] = monthly_tax
        details["employee_deductions"] = amounts["employee_deductions"]
        details["loan_repayment"] = amounts["loan_repayment"]

        return {k: LineItemBuilder.round_to_cents(v) for k, v in details.items()}

    @staticmethod
    def total_withheld(result: PayrollResult) -> Decimal:
        """Statutory amounts withheld from the employee: tax, pension, health.

        Employer pension is excluded (it is a liability, not a withholding).
        """
        return LineItemBuilder.round_to_cents(
            result.tax + result.employee_pension + result.health_insurance
        )
