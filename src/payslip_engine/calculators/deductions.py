"""Statutory percentage deductions: pension and health insurance."""

from __future__ import annotations

from decimal import Decimal

from payslip_engine.calculators.types import (
    PayrollInput,
    StatutoryDeductions,
    StatutoryRates,
)


class DeductionCalculator:
    """Computes pension and health insurance from compensation sub-totals.

    - pension base = basic + housing + transport
    - employee pension = employee rate * pension base (withheld)
    - employer pension = employer rate * pension base (liability only)
    - health insurance = health rate * basic salary (withheld)
    """

    def __init__(self, rates: StatutoryRates | None = None):
        self.rates = rates or StatutoryRates()

    @staticmethod
    def pension_base(basic: Decimal, housing: Decimal, transport: Decimal) -> Decimal:
        return basic + housing + transport

    def employee_pension(self, pension_base: Decimal) -> Decimal:
        return self.rates.employee_pension_rate * pension_base

    def employer_pension(self, pension_base: Decimal) -> Decimal:
        return self.rates.employer_pension_rate * pension_base

    def health_insurance(self, basic: Decimal) -> Decimal:
        return self.rates.health_insurance_rate * basic

    def compute(self, payroll_input: PayrollInput) -> StatutoryDeductions:
        base = self.pension_base(
            payroll_input.basic_salary,
            payroll_input.housing_allowance,
            payroll_input.transport_allowance,
        )
        return StatutoryDeductions(
            pension_base=base,
            employee_pension=self.employee_pension(base),
            employer_pension=self.employer_pension(base),
            health_insurance=self.health_insurance(payroll_input.basic_salary),
        )
