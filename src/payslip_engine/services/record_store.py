"""Persistence of payroll periods and their entries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from payslip_engine.calculators.validation import InputValidator, ValidationError
from payslip_engine.models import PayrollEntry, PayrollPeriod
from payslip_engine.services.state_machine import PayrollStateMachine, PayrollStatus

logger = logging.getLogger(__name__)


def _to_json(details: dict[str, Any] | None) -> dict[str, Any] | None:
    """Make a details mapping JSON-safe (Decimals become strings)."""
    if details is None:
        return None
    return {k: str(v) if isinstance(v, Decimal) else v for k, v in details.items()}


class RecordNotFoundError(Exception):
    """Raised when a payroll period does not exist."""

    def __init__(self, payroll_period_id: UUID):
        self.payroll_period_id = payroll_period_id
        super().__init__(f"Payroll period {payroll_period_id} not found")


@dataclass
class PeriodDraft:
    """Payroll period fields supplied by the caller."""

    start_date: date
    end_date: date
    payment_date: date
    status: str = PayrollStatus.DRAFT.value
    total_amount: Decimal = Decimal("0")


@dataclass
class EntryDraft:
    """One employee line supplied by the caller."""

    employee_name: str
    base_salary: Decimal
    taxes: Decimal
    net_pay: Decimal
    additional_details: dict[str, Any] | None = field(default=None)


class PayrollRecordStore:
    """Saves and loads payroll periods.

    The session is owned by the caller; ``save`` flushes and commits the
    period and all its entries together.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, period: PeriodDraft, entries: Sequence[EntryDraft]) -> UUID:
        """Persist a period with its entries and return the new period id."""
        # Validate everything before the first write
        try:
            status = PayrollStatus(period.status).value
        except ValueError:
            raise ValidationError("status", f"unknown status '{period.status}'") from None
        if period.end_date < period.start_date:
            raise ValidationError("end_date", "must not be before start_date")
        names = [InputValidator.validate_employee_name(e.employee_name) for e in entries]

        record = PayrollPeriod(
            start_date=period.start_date,
            end_date=period.end_date,
            payment_date=period.payment_date,
            status=status,
            total_amount=period.total_amount,
        )
        record.entries = [
            PayrollEntry(
                line_number=i,
                employee_name=name,
                base_salary=entry.base_salary,
                taxes=entry.taxes,
                net_pay=entry.net_pay,
                additional_details=_to_json(entry.additional_details),
            )
            for i, (name, entry) in enumerate(zip(names, entries))
        ]

        self.session.add(record)
        try:
            await self.session.flush()
            payroll_period_id = record.payroll_period_id
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Saved payroll period %s with %d entries",
            payroll_period_id,
            len(entries),
        )
        return payroll_period_id

    async def fetch(self, payroll_period_id: UUID) -> PayrollPeriod:
        """Load a period with its entries, in the order they were saved."""
        result = await self.session.execute(
            select(PayrollPeriod)
            .where(PayrollPeriod.payroll_period_id == payroll_period_id)
            .options(selectinload(PayrollPeriod.entries))
            .execution_options(populate_existing=True)
        )
        period = result.scalar_one_or_none()
        if period is None:
            raise RecordNotFoundError(payroll_period_id)
        return period

    async def list_periods(self) -> list[PayrollPeriod]:
        """All periods, most recent payment date first."""
        result = await self.session.execute(
            select(PayrollPeriod).order_by(PayrollPeriod.payment_date.desc())
        )
        return list(result.scalars().all())

    async def update_status(self, payroll_period_id: UUID, status: str) -> PayrollPeriod:
        """Move a period to a new status, enforcing allowed transitions."""
        period = await self.fetch(payroll_period_id)
        PayrollStateMachine.validate_transition(period.status, status)

        previous = period.status
        period.status = PayrollStatus(status).value
        await self.session.commit()

        logger.info(
            "Payroll period %s moved from %s to %s", payroll_period_id, previous, status
        )
        return await self.fetch(payroll_period_id)
