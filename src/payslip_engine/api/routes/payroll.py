"""Payslip calculation endpoints."""

from fastapi import APIRouter, File, Response, UploadFile, status

from payslip_engine.api.dependencies import Calculator, Processor, Registry
from payslip_engine.api.schemas import (
    BatchRequest,
    BatchResultResponse,
    CalculateRequest,
    ErrorResponse,
    PayrollResultResponse,
)
from payslip_engine.calculators.types import CustomField, PayrollBatchItem
from payslip_engine.services.exporter import ExportFormat
from payslip_engine.services.importer import build_template, import_batch_items

router = APIRouter(prefix="/payroll", tags=["payroll"])


def _fields_for(request_fields, registry) -> tuple[CustomField, ...]:
    """Inline fields when the request carries them, else a registry snapshot."""
    if request_fields is None:
        return registry.snapshot()
    return tuple(f.to_field() for f in request_fields)


@router.post(
    "/calculate",
    response_model=PayrollResultResponse,
    responses={422: {"model": ErrorResponse}},
)
async def calculate_payslip(
    calculator: Calculator,
    registry: Registry,
    payload: CalculateRequest,
) -> PayrollResultResponse:
    """Calculate one employee's payslip."""
    fields = _fields_for(payload.custom_fields, registry)
    result = calculator.calculate(payload.input, fields)
    return PayrollResultResponse.from_result(result)


@router.post("/batch", response_model=BatchResultResponse)
async def calculate_batch(
    processor: Processor,
    registry: Registry,
    payload: BatchRequest,
) -> BatchResultResponse:
    """Calculate many payslips; failures are reported per employee."""
    fields = _fields_for(payload.custom_fields, registry)
    items = [
        PayrollBatchItem(employee_name=item.employee_name, input=item.input)
        for item in payload.items
    ]
    batch = processor.process_batch(items, fields)
    return BatchResultResponse.from_batch(batch)


@router.post(
    "/import",
    response_model=BatchResultResponse,
    responses={422: {"model": ErrorResponse}},
)
async def import_spreadsheet(
    processor: Processor,
    registry: Registry,
    file: UploadFile = File(...),
) -> BatchResultResponse:
    """Calculate payslips for every employee in an uploaded .xlsx or .csv file."""
    fields = registry.snapshot()
    data = await file.read()
    items = import_batch_items(data, file.filename, fields)
    batch = processor.process_batch(items, fields)
    return BatchResultResponse.from_batch(batch)


@router.get("/import/template", status_code=status.HTTP_200_OK)
async def download_template() -> Response:
    """Download the spreadsheet import template."""
    return Response(
        content=build_template(),
        media_type=ExportFormat.XLSX.media_type,
        headers={"Content-Disposition": 'attachment; filename="payroll_template.xlsx"'},
    )
