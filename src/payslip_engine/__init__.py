"""Payslip engine: monthly payroll with PAYE, pension and health insurance."""

from payslip_engine.calculators import (
    BatchProcessor,
    CalculationError,
    CustomFieldRegistry,
    DuplicateFieldError,
    InputValidator,
    PayrollCalculator,
    ValidationError,
    compute_tax,
)
from payslip_engine.calculators.types import (
    CustomField,
    FieldKind,
    PayrollBatchItem,
    PayrollInput,
    PayrollResult,
)
from payslip_engine.services import (
    ImportFormatError,
    InvalidTransitionError,
    RecordNotFoundError,
)

__version__ = "0.1.0"

__all__ = [
    "BatchProcessor",
    "CalculationError",
    "CustomField",
    "CustomFieldRegistry",
    "DuplicateFieldError",
    "FieldKind",
    "ImportFormatError",
    "InputValidator",
    "InvalidTransitionError",
    "PayrollBatchItem",
    "PayrollCalculator",
    "PayrollInput",
    "PayrollResult",
    "RecordNotFoundError",
    "ValidationError",
    "compute_tax",
]
