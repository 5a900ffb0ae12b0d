"""Payroll calculation engine."""

from payslip_engine.calculators.custom_fields import CustomFieldRegistry, DuplicateFieldError
from payslip_engine.calculators.deductions import DeductionCalculator
from payslip_engine.calculators.engine import BatchProcessor, PayrollCalculator
from payslip_engine.calculators.line_builder import LineItemBuilder
from payslip_engine.calculators.tax_calculator import DEFAULT_BANDS, TaxCalculator, compute_tax
from payslip_engine.calculators.types import CalculationError
from payslip_engine.calculators.validation import InputValidator, ValidationError

__all__ = [
    "BatchProcessor",
    "CalculationError",
    "CustomFieldRegistry",
    "DEFAULT_BANDS",
    "DeductionCalculator",
    "DuplicateFieldError",
    "InputValidator",
    "LineItemBuilder",
    "PayrollCalculator",
    "TaxCalculator",
    "ValidationError",
    "compute_tax",
]
