"""Type definitions for calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Union


# Canonical input fields, in the order they appear on a payslip.
GROSS_COMPONENTS: tuple[str, ...] = (
    "basic_salary",
    "housing_allowance",
    "transport_allowance",
    "utility_allowance",
    "lunch_allowance",
    "entertainment_allowance",
    "leave_allowance",
    "other_allowances",
    "bonus",
    "overtime",
)
PASS_THROUGH_DEDUCTIONS: tuple[str, ...] = (
    "employee_deductions",
    "loan_repayment",
)
CANONICAL_FIELDS: tuple[str, ...] = GROSS_COMPONENTS + PASS_THROUGH_DEDUCTIONS

# Keys that identify an employee rather than carry compensation.
IDENTITY_FIELDS: frozenset[str] = frozenset({"employee_name"})

ZERO = Decimal("0")


class CalculationError(Exception):
    """Raised when an input value cannot take part in the arithmetic."""

    def __init__(self, field_name: str, value: Any, reason: str | None = None):
        self.field_name = field_name
        self.value = value
        self.reason = reason
        msg = f"Field '{field_name}' has non-numeric value {value!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


def to_decimal(value: Any, field_name: str) -> Decimal:
    """Read a caller-supplied value as Decimal.

    None and blank strings are 0. Floats go through str() so that 0.1
    becomes Decimal("0.1") rather than its binary expansion. Thousands
    separators in strings are tolerated ("100,000").
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise CalculationError(field_name, value, "booleans are not amounts")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            raise CalculationError(field_name, value) from None
    else:
        raise CalculationError(field_name, value, f"unsupported type {type(value).__name__}")

    if not result.is_finite():
        raise CalculationError(field_name, value, "not a finite number")
    return result


class FieldKind(str, Enum):
    """How a custom field participates in gross aggregation."""

    NUMBER = "number"
    PERCENTAGE = "percentage"
    TEXT = "text"


@dataclass(frozen=True)
class CustomField:
    """A user-defined compensation component."""

    id: str
    name: str
    kind: FieldKind = FieldKind.NUMBER
    default_value: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", FieldKind(self.kind))


# Custom field values as a tagged variant. The calculator dispatches on the
# variant type, never on the raw value.


@dataclass(frozen=True)
class NumberValue:
    amount: Decimal


@dataclass(frozen=True)
class PercentageValue:
    percent: Decimal


@dataclass(frozen=True)
class TextValue:
    text: str


CustomFieldValue = Union[NumberValue, PercentageValue, TextValue]


@dataclass
class PayrollInput:
    """Per-employee compensation input for one month.

    All canonical amounts default to 0. ``custom_values`` is keyed by custom
    field id and holds raw (unconverted) values; conversion happens when the
    value is resolved against its field definition.
    """

    basic_salary: Decimal = ZERO
    housing_allowance: Decimal = ZERO
    transport_allowance: Decimal = ZERO
    utility_allowance: Decimal = ZERO
    lunch_allowance: Decimal = ZERO
    entertainment_allowance: Decimal = ZERO
    leave_allowance: Decimal = ZERO
    other_allowances: Decimal = ZERO
    bonus: Decimal = ZERO
    overtime: Decimal = ZERO
    employee_deductions: Decimal = ZERO
    loan_repayment: Decimal = ZERO

    custom_values: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in CANONICAL_FIELDS:
            setattr(self, name, to_decimal(getattr(self, name), name))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> PayrollInput:
        """Build an input from a flat mapping.

        Canonical keys are converted to Decimal (raising CalculationError on
        non-numeric values); identity keys are ignored; every other key is
        kept as a custom value.
        """
        amounts: dict[str, Decimal] = {}
        custom: dict[str, Any] = {}
        for key, value in data.items():
            if key in CANONICAL_FIELDS:
                amounts[key] = to_decimal(value, key)
            elif key == "custom_values" and isinstance(value, Mapping):
                custom.update(value)
            elif key not in IDENTITY_FIELDS:
                custom[key] = value
        return cls(**amounts, custom_values=custom)

    def amount(self, name: str) -> Decimal:
        return getattr(self, name)

    def canonical_amounts(self) -> dict[str, Decimal]:
        return {name: getattr(self, name) for name in CANONICAL_FIELDS}


@dataclass(frozen=True)
class TaxBand:
    """One band of a progressive schedule.

    ``width`` is the size of the band (not its upper bound). None means the
    band has no upper limit.
    """

    width: Decimal | None
    rate: Decimal  # As decimal, e.g., 0.07 for 7%


@dataclass(frozen=True)
class StatutoryRates:
    """
    Percentage-based statutory deduction rates.

    Attributes:
        employee_pension_rate: Share of the pension base withheld from the
            employee. Default 0.08.
        employer_pension_rate: Share of the pension base contributed by the
            employer. Informational; never subtracted from net pay.
            Default 0.10.
        health_insurance_rate: Share of basic salary withheld for health
            insurance. Default 0.05.
    """

    employee_pension_rate: Decimal = Decimal("0.08")
    employer_pension_rate: Decimal = Decimal("0.10")
    health_insurance_rate: Decimal = Decimal("0.05")

    def __post_init__(self) -> None:
        """Validate configuration."""
        for name in ("employee_pension_rate", "employer_pension_rate", "health_insurance_rate"):
            rate = getattr(self, name)
            if not ZERO <= rate <= 1:
                raise ValueError(f"{name} must be between 0 and 1, got {rate}")


@dataclass(frozen=True)
class ReliefPolicy:
    """
    Consolidated relief allowance applied to annual gross.

    relief = max(floor, gross_fraction * annual_gross)
             + additional_fraction * annual_gross

    Attributes:
        floor: Minimum of the first relief term. Default 200000.
        gross_fraction: Fraction compared against the floor. Default 0.01.
        additional_fraction: Fraction always added on top. Default 0.20.
    """

    floor: Decimal = Decimal("200000")
    gross_fraction: Decimal = Decimal("0.01")
    additional_fraction: Decimal = Decimal("0.20")

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.floor < 0:
            raise ValueError("floor must not be negative")
        for name in ("gross_fraction", "additional_fraction"):
            fraction = getattr(self, name)
            if not ZERO <= fraction <= 1:
                raise ValueError(f"{name} must be between 0 and 1, got {fraction}")

    def relief_for(self, annual_gross: Decimal) -> Decimal:
        return (
            max(self.floor, self.gross_fraction * annual_gross)
            + self.additional_fraction * annual_gross
        )


@dataclass(frozen=True)
class StatutoryDeductions:
    """Unrounded statutory deductions for one month."""

    pension_base: Decimal
    employee_pension: Decimal
    employer_pension: Decimal
    health_insurance: Decimal


@dataclass(frozen=True)
class PayrollResult:
    """Computed payslip. Monetary fields are rounded to 2 decimal places."""

    gross_income: Decimal
    employee_pension: Decimal
    employer_pension: Decimal
    health_insurance: Decimal
    tax: Decimal  # Monthly PAYE
    net_pay: Decimal
    details: dict[str, Decimal] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly dict (amounts as strings)."""
        return {
            "gross_income": str(self.gross_income),
            "employee_pension": str(self.employee_pension),
            "employer_pension": str(self.employer_pension),
            "health_insurance": str(self.health_insurance),
            "tax": str(self.tax),
            "net_pay": str(self.net_pay),
            "details": {k: str(v) for k, v in self.details.items()},
        }


@dataclass
class PayrollBatchItem:
    """One employee's input within a batch.

    ``source_row`` is the spreadsheet row the item came from, when imported.
    """

    employee_name: str
    input: PayrollInput | Mapping[str, Any]
    source_row: int | None = None


@dataclass(frozen=True)
class BatchItemResult:
    index: int
    employee_name: str
    result: PayrollResult


@dataclass(frozen=True)
class BatchError:
    index: int
    employee_name: str
    message: str


@dataclass
class BatchResult:
    """Outcome of a batch run.

    ``results`` holds successful items in input order; failed items appear
    only in ``errors``.
    """

    results: list[BatchItemResult] = field(default_factory=list)
    errors: list[BatchError] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.results)

    @property
    def failure_count(self) -> int:
        return len(self.errors)

    @property
    def total_gross(self) -> Decimal:
        return sum((r.result.gross_income for r in self.results), ZERO)

    @property
    def total_net(self) -> Decimal:
        return sum((r.result.net_pay for r in self.results), ZERO)

    @property
    def total_tax(self) -> Decimal:
        return sum((r.result.tax for r in self.results), ZERO)

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [
                {
                    "index": r.index,
                    "employee_name": r.employee_name,
                    **r.result.to_dict(),
                }
                for r in self.results
            ],
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "errors": [
                {"index": e.index, "employee_name": e.employee_name, "message": e.message}
                for e in self.errors
            ],
            "total_gross": str(self.total_gross),
            "total_net": str(self.total_net),
            "total_tax": str(self.total_tax),
        }
