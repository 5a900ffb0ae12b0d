"""Payroll period endpoints: run, list, fetch, status, export."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, Response, status

from payslip_engine.api.dependencies import DbSession, Processor, Registry
from payslip_engine.api.schemas import (
    BatchResultResponse,
    ErrorResponse,
    PayrollPeriodCreate,
    PayrollPeriodDetailResponse,
    PayrollPeriodResponse,
    PayrollRunResponse,
    StatusUpdateRequest,
)
from payslip_engine.calculators.types import PayrollBatchItem
from payslip_engine.services.exporter import ExportFormat, export_report, filename_for
from payslip_engine.services.payroll_service import PayrollRunService
from payslip_engine.services.record_store import PayrollRecordStore, PeriodDraft

router = APIRouter(prefix="/payroll-periods", tags=["payroll-periods"])


@router.post(
    "",
    response_model=PayrollRunResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def run_payroll_period(
    db: DbSession,
    processor: Processor,
    registry: Registry,
    payload: PayrollPeriodCreate,
) -> PayrollRunResponse:
    """Calculate every employee and save the successful payslips as a period."""
    service = PayrollRunService(db, processor)
    summary = await service.run(
        PeriodDraft(
            start_date=payload.start_date,
            end_date=payload.end_date,
            payment_date=payload.payment_date,
            status=payload.status.value,
        ),
        [
            PayrollBatchItem(employee_name=item.employee_name, input=item.input)
            for item in payload.items
        ],
        registry.snapshot(),
    )
    return PayrollRunResponse(
        payroll_period_id=summary.payroll_period_id,
        batch=BatchResultResponse.from_batch(summary.batch),
    )


@router.get("", response_model=list[PayrollPeriodResponse])
async def list_payroll_periods(db: DbSession) -> list[PayrollPeriodResponse]:
    """List saved periods, most recent payment date first."""
    periods = await PayrollRecordStore(db).list_periods()
    return [PayrollPeriodResponse.model_validate(p) for p in periods]


@router.get(
    "/{payroll_period_id}",
    response_model=PayrollPeriodDetailResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll_period(
    db: DbSession,
    payroll_period_id: Annotated[UUID, Path()],
) -> PayrollPeriodDetailResponse:
    """Get a period with its entries."""
    period = await PayrollRecordStore(db).fetch(payroll_period_id)
    return PayrollPeriodDetailResponse.model_validate(period)


@router.patch(
    "/{payroll_period_id}/status",
    response_model=PayrollPeriodResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_payroll_status(
    db: DbSession,
    payroll_period_id: Annotated[UUID, Path()],
    payload: StatusUpdateRequest,
) -> PayrollPeriodResponse:
    """Move a period to a new status."""
    period = await PayrollRecordStore(db).update_status(payroll_period_id, payload.status.value)
    return PayrollPeriodResponse.model_validate(period)


@router.get(
    "/{payroll_period_id}/export",
    responses={404: {"model": ErrorResponse}},
)
async def export_payroll_period(
    db: DbSession,
    payroll_period_id: Annotated[UUID, Path()],
    fmt: Annotated[ExportFormat, Query(alias="format")] = ExportFormat.XLSX,
) -> Response:
    """Download a period as a spreadsheet, CSV or PDF report."""
    period = await PayrollRecordStore(db).fetch(payroll_period_id)
    report = PayrollRunService.report_for(period)
    return Response(
        content=export_report(report, fmt),
        media_type=fmt.media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename_for(report, fmt)}"'},
    )
