"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from payslip_engine.calculators.types import (
    BatchResult,
    CustomField,
    FieldKind,
    PayrollResult,
)
from payslip_engine.services.state_machine import PayrollStatus


# ============================================================================
# Custom field schemas
# ============================================================================


class CustomFieldCreate(BaseModel):
    """Schema for registering a custom field."""

    id: str | None = None
    name: str = Field(min_length=1)
    kind: FieldKind = FieldKind.NUMBER
    default_value: str | None = None


class CustomFieldUpdate(BaseModel):
    """Schema for changing a custom field; omitted attributes are kept."""

    name: str | None = Field(default=None, min_length=1)
    kind: FieldKind | None = None
    default_value: str | None = None


class CustomFieldResponse(BaseModel):
    """Schema for custom field response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    kind: FieldKind
    default_value: str | None = None

    def to_field(self) -> CustomField:
        return CustomField(
            id=self.id, name=self.name, kind=self.kind, default_value=self.default_value
        )


# ============================================================================
# Calculation schemas
# ============================================================================


class CalculateRequest(BaseModel):
    """Schema for a single payslip calculation.

    ``input`` uses canonical field names (basic_salary, housing_allowance,
    ...) plus custom field ids. When ``custom_fields`` is omitted, the
    server's registered fields apply.
    """

    input: dict[str, Any]
    custom_fields: list[CustomFieldResponse] | None = None


class PayrollResultResponse(BaseModel):
    """Schema for a computed payslip."""

    gross_income: Decimal
    employee_pension: Decimal
    employer_pension: Decimal
    health_insurance: Decimal
    tax: Decimal
    net_pay: Decimal
    details: dict[str, Decimal]

    @classmethod
    def from_result(cls, result: PayrollResult) -> "PayrollResultResponse":
        return cls(
            gross_income=result.gross_income,
            employee_pension=result.employee_pension,
            employer_pension=result.employer_pension,
            health_insurance=result.health_insurance,
            tax=result.tax,
            net_pay=result.net_pay,
            details=result.details,
        )


class BatchItemRequest(BaseModel):
    """One employee in a batch request."""

    employee_name: str = ""
    input: dict[str, Any]


class BatchRequest(BaseModel):
    """Schema for a batch calculation."""

    items: list[BatchItemRequest]
    custom_fields: list[CustomFieldResponse] | None = None


class BatchItemResponse(PayrollResultResponse):
    index: int
    employee_name: str


class BatchErrorResponse(BaseModel):
    index: int
    employee_name: str
    message: str


class BatchResultResponse(BaseModel):
    """Schema for batch results."""

    results: list[BatchItemResponse]
    errors: list[BatchErrorResponse]
    success_count: int
    failure_count: int
    total_gross: Decimal
    total_net: Decimal
    total_tax: Decimal

    @classmethod
    def from_batch(cls, batch: BatchResult) -> "BatchResultResponse":
        return cls(
            results=[
                BatchItemResponse(
                    index=item.index,
                    employee_name=item.employee_name,
                    **PayrollResultResponse.from_result(item.result).model_dump(),
                )
                for item in batch.results
            ],
            errors=[
                BatchErrorResponse(index=e.index, employee_name=e.employee_name, message=e.message)
                for e in batch.errors
            ],
            success_count=batch.success_count,
            failure_count=batch.failure_count,
            total_gross=batch.total_gross,
            total_net=batch.total_net,
            total_tax=batch.total_tax,
        )


# ============================================================================
# Payroll period schemas
# ============================================================================


class PayrollPeriodCreate(BaseModel):
    """Schema for running and saving a payroll period."""

    start_date: date
    end_date: date
    payment_date: date
    status: PayrollStatus = PayrollStatus.DRAFT
    items: list[BatchItemRequest]


class PayrollEntryResponse(BaseModel):
    """Schema for a saved payroll entry."""

    model_config = ConfigDict(from_attributes=True)

    payroll_entry_id: UUID
    employee_name: str
    base_salary: Decimal
    taxes: Decimal
    net_pay: Decimal
    additional_details: dict[str, Any] | None = None


class PayrollPeriodResponse(BaseModel):
    """Schema for a saved payroll period."""

    model_config = ConfigDict(from_attributes=True)

    payroll_period_id: UUID
    start_date: date
    end_date: date
    payment_date: date
    status: str
    total_amount: Decimal
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PayrollPeriodDetailResponse(PayrollPeriodResponse):
    """Schema for a period with its entries."""

    entries: list[PayrollEntryResponse]


class PayrollRunResponse(BaseModel):
    """Schema for the result of running a period."""

    payroll_period_id: UUID
    batch: BatchResultResponse


class StatusUpdateRequest(BaseModel):
    status: PayrollStatus


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str
    code: str | None = None
