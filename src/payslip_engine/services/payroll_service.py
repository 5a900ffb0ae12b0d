"""Payroll run orchestration: batch calculation, persistence and reporting."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.calculators.engine import BatchProcessor, FieldSource
from payslip_engine.calculators.line_builder import LineItemBuilder
from payslip_engine.calculators.types import BatchResult, PayrollBatchItem
from payslip_engine.models import PayrollPeriod
from payslip_engine.services.exporter import PayrollReport, ReportLine, format_period_label
from payslip_engine.services.record_store import EntryDraft, PayrollRecordStore, PeriodDraft

logger = logging.getLogger(__name__)


@dataclass
class PayrollRunSummary:
    """Result of running and saving a payroll period."""

    payroll_period_id: UUID
    batch: BatchResult


class PayrollRunService:
    """Calculates a batch and stores the successful payslips as one period.

    Failed employees are reported in the batch result and left out of the
    saved period; they never block the others from being saved.
    """

    def __init__(self, session: AsyncSession, processor: BatchProcessor | None = None):
        self.store = PayrollRecordStore(session)
        self.processor = processor or BatchProcessor()

    async def run(
        self,
        period: PeriodDraft,
        items: Sequence[PayrollBatchItem | Mapping[str, Any]],
        custom_fields: FieldSource | None = None,
    ) -> PayrollRunSummary:
        batch = self.processor.process_batch(items, custom_fields)
        entries = self.build_entries(batch)

        period.total_amount = batch.total_net
        payroll_period_id = await self.store.save(period, entries)

        logger.info(
            "Payroll run saved as period %s (%d employees, %d failed)",
            payroll_period_id,
            batch.success_count,
            batch.failure_count,
        )
        return PayrollRunSummary(payroll_period_id=payroll_period_id, batch=batch)

    @staticmethod
    def build_entries(batch: BatchResult) -> list[EntryDraft]:
        """One entry per successful employee.

        ``taxes`` is everything withheld by statute (PAYE, employee pension,
        health insurance); the full breakdown goes into additional_details.
        """
        entries: list[EntryDraft] = []
        for item in batch.results:
            result = item.result
            entries.append(
                EntryDraft(
                    employee_name=item.employee_name,
                    base_salary=result.details.get("basic_salary", result.gross_income),
                    taxes=LineItemBuilder.total_withheld(result),
                    net_pay=result.net_pay,
                    additional_details={
                        **{k: str(v) for k, v in result.details.items()},
                        "gross_income": str(result.gross_income),
                        "paye": str(result.tax),
                    },
                )
            )
        return entries

    @staticmethod
    def report_for(period: PayrollPeriod) -> PayrollReport:
        """Build the exportable report for a saved period."""
        return PayrollReport(
            period_label=format_period_label(period.start_date, period.end_date),
            status=period.status,
            total=period.total_amount,
            line_items=[
                ReportLine(
                    name=entry.employee_name,
                    base_salary=entry.base_salary,
                    taxes=entry.taxes,
                    net=entry.net_pay,
                )
                for entry in period.entries
            ],
        )

    @classmethod
    def report_for_batch(
        cls, period_label: str, batch: BatchResult, status: str = "draft"
    ) -> PayrollReport:
        """Build a report straight from a batch result, without saving it."""
        entries = cls.build_entries(batch)
        return PayrollReport(
            period_label=period_label,
            status=status,
            total=batch.total_net,
            line_items=[
                ReportLine(
                    name=entry.employee_name,
                    base_salary=entry.base_salary,
                    taxes=entry.taxes,
                    net=entry.net_pay,
                )
                for entry in entries
            ],
        )
