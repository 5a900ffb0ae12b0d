"""Payroll calculation engine - main orchestrator."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence, Union

from payslip_engine.calculators.custom_fields import resolve_custom_values
from payslip_engine.calculators.deductions import DeductionCalculator
from payslip_engine.calculators.line_builder import LineItemBuilder
from payslip_engine.calculators.tax_calculator import DEFAULT_BANDS, TaxCalculator
from payslip_engine.calculators.types import (
    GROSS_COMPONENTS,
    ZERO,
    BatchError,
    BatchItemResult,
    BatchResult,
    CustomField,
    NumberValue,
    PayrollBatchItem,
    PayrollInput,
    PayrollResult,
    PercentageValue,
    ReliefPolicy,
    StatutoryRates,
    TaxBand,
)

if TYPE_CHECKING:
    from payslip_engine.calculators.custom_fields import CustomFieldRegistry
    from payslip_engine.config import Settings

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = Decimal("12")

FieldSource = Union["CustomFieldRegistry", Iterable[CustomField]]


def snapshot_fields(custom_fields: FieldSource | None) -> tuple[CustomField, ...]:
    """Take a stable copy of the field set for the duration of a calculation."""
    if custom_fields is None:
        return ()
    snapshot = getattr(custom_fields, "snapshot", None)
    if callable(snapshot):
        return snapshot()
    return tuple(custom_fields)


class PayrollCalculator:
    """Computes one employee's monthly payslip.

    Calculation pipeline (stable order):
    1) Gross = basic + allowances + bonus + overtime
    2) Custom fields in registry order; percentage fields apply to the
       running gross, so later ones compound on earlier ones
    3) Annualize gross
    4) Consolidated relief on annual gross
    5) Annual taxable = annual gross - relief - annual pension - annual
       health insurance, floored at 0
    6) Annual PAYE over the band schedule; monthly = annual / 12
    7) Net = gross - monthly tax - pension - health insurance
       - employee deductions - loan repayment
    8) Round emitted figures to 2 decimals

    Missing amounts are 0 and negative amounts pass through unchanged;
    use InputValidator in front of this class for stricter rules.
    """

    def __init__(
        self,
        rates: StatutoryRates | None = None,
        relief: ReliefPolicy | None = None,
        bands: Sequence[TaxBand] = DEFAULT_BANDS,
    ):
        self.deductions = DeductionCalculator(rates)
        self.relief = relief or ReliefPolicy()
        self.tax_calculator = TaxCalculator(bands)

    @classmethod
    def from_settings(cls, settings: Settings) -> PayrollCalculator:
        return cls(rates=settings.statutory_rates(), relief=settings.relief_policy())

    def calculate(
        self,
        payroll_input: PayrollInput | Mapping[str, Any],
        custom_fields: FieldSource | None = None,
    ) -> PayrollResult:
        """Calculate a payslip for a single employee."""
        if not isinstance(payroll_input, PayrollInput):
            payroll_input = PayrollInput.from_mapping(payroll_input)
        fields = snapshot_fields(custom_fields)

        # 1) Fixed components
        gross = sum((payroll_input.amount(name) for name in GROSS_COMPONENTS), ZERO)

        # 2) Custom fields, in order
        custom_amounts: list[tuple[str, Decimal]] = []
        for field, value in resolve_custom_values(fields, payroll_input):
            if isinstance(value, NumberValue):
                amount = value.amount
            elif isinstance(value, PercentageValue):
                amount = gross * value.percent / 100
            else:
                continue  # Text fields are display-only
            gross += amount
            custom_amounts.append((field.name, amount))

        # Statutory deductions
        statutory = self.deductions.compute(payroll_input)

        # 3-6) PAYE
        annual_gross = gross * MONTHS_PER_YEAR
        relief = self.relief.relief_for(annual_gross)
        annual_taxable = max(
            ZERO,
            annual_gross
            - relief
            - statutory.employee_pension * MONTHS_PER_YEAR
            - statutory.health_insurance * MONTHS_PER_YEAR,
        )
        annual_tax = self.tax_calculator.compute_tax(annual_taxable)
        monthly_tax = annual_tax / MONTHS_PER_YEAR

        # 7) Net
        net = (
            gross
            - monthly_tax
            - statutory.employee_pension
            - statutory.health_insurance
            - payroll_input.employee_deductions
            - payroll_input.loan_repayment
        )

        # 8) Round at the boundary only
        round_to_cents = LineItemBuilder.round_to_cents
        return PayrollResult(
            gross_income=round_to_cents(gross),
            employee_pension=round_to_cents(statutory.employee_pension),
            employer_pension=round_to_cents(statutory.employer_pension),
            health_insurance=round_to_cents(statutory.health_insurance),
            tax=round_to_cents(monthly_tax),
            net_pay=round_to_cents(net),
            details=LineItemBuilder.build_details(
                payroll_input, custom_amounts, statutory, monthly_tax
            ),
        )


class BatchProcessor:
    """Runs the calculator over many employees.

    One employee's failure never stops the batch: the exception is logged
    and recorded against that item's position, and processing moves on.
    Successful results keep input order.
    """

    def __init__(self, calculator: PayrollCalculator | None = None):
        self.calculator = calculator or PayrollCalculator()

    def process_batch(
        self,
        items: Sequence[PayrollBatchItem | Mapping[str, Any]],
        custom_fields: FieldSource | None = None,
    ) -> BatchResult:
        """Calculate every item, collecting results and per-item errors."""
        # One snapshot for the whole batch
        fields = snapshot_fields(custom_fields)
        batch = BatchResult()

        for index, item in enumerate(items):
            name = self._employee_name(item, index)
            try:
                payroll_input = item.input if isinstance(item, PayrollBatchItem) else item
                result = self.calculator.calculate(payroll_input, fields)
            except Exception as e:
                logger.exception("Payroll calculation failed for item %d (%s)", index, name)
                batch.errors.append(BatchError(index=index, employee_name=name, message=str(e)))
                continue

            batch.results.append(BatchItemResult(index=index, employee_name=name, result=result))

        logger.info(
            "Processed payroll batch: %d succeeded, %d failed",
            batch.success_count,
            batch.failure_count,
        )
        return batch

    @staticmethod
    def _employee_name(item: PayrollBatchItem | Mapping[str, Any], index: int) -> str:
        if isinstance(item, PayrollBatchItem):
            name: Any = item.employee_name
        elif isinstance(item, Mapping):
            name = item.get("employee_name")
        else:
            name = None
        if isinstance(name, str) and name.strip():
            return name.strip()
        return f"Employee {index + 1}"
