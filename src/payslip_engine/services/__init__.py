"""Collaborators around the calculation core: import, export, persistence."""

from payslip_engine.services.exporter import ExportFormat, PayrollReport, export_report
from payslip_engine.services.importer import ImportFormatError, import_batch_items
from payslip_engine.services.payroll_service import PayrollRunService, PayrollRunSummary
from payslip_engine.services.record_store import (
    EntryDraft,
    PayrollRecordStore,
    PeriodDraft,
    RecordNotFoundError,
)
from payslip_engine.services.state_machine import (
    InvalidTransitionError,
    PayrollStateMachine,
    PayrollStatus,
)

__all__ = [
    "EntryDraft",
    "ExportFormat",
    "ImportFormatError",
    "InvalidTransitionError",
    "PayrollRecordStore",
    "PayrollReport",
    "PayrollRunService",
    "PayrollRunSummary",
    "PayrollStateMachine",
    "PayrollStatus",
    "PeriodDraft",
    "RecordNotFoundError",
    "export_report",
    "import_batch_items",
]
