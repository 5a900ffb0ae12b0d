"""Tests for payroll period persistence."""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.calculators.validation import ValidationError
from payslip_engine.models import PayrollEntry, PayrollPeriod
from payslip_engine.services.record_store import (
    EntryDraft,
    PayrollRecordStore,
    PeriodDraft,
    RecordNotFoundError,
)
from payslip_engine.services.state_machine import InvalidTransitionError


pytestmark = pytest.mark.asyncio


def _period(**overrides) -> PeriodDraft:
    values = {
        "start_date": date(2026, 1, 1),
        "end_date": date(2026, 1, 31),
        "payment_date": date(2026, 1, 31),
        "total_amount": Decimal("115510.00"),
    }
    values.update(overrides)
    return PeriodDraft(**values)


def _entries() -> list[EntryDraft]:
    return [
        EntryDraft(
            employee_name="Ada",
            base_salary=Decimal("100000.00"),
            taxes=Decimal("23190.00"),
            net_pay=Decimal("106810.00"),
            additional_details={"monthly_tax": Decimal("7790.00"), "note": "first"},
        ),
        EntryDraft(
            employee_name="Bola",
            base_salary=Decimal("10000.00"),
            taxes=Decimal("1300.00"),
            net_pay=Decimal("8700.00"),
        ),
    ]


async def _count(session: AsyncSession, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


class TestSaveAndFetch:
    """Round trip through the database."""

    async def test_round_trip(self, session: AsyncSession):
        store = PayrollRecordStore(session)

        payroll_period_id = await store.save(_period(), _entries())
        period = await store.fetch(payroll_period_id)

        assert period.status == "draft"
        assert period.start_date == date(2026, 1, 1)
        assert period.total_amount == Decimal("115510.00")
        assert [e.employee_name for e in period.entries] == ["Ada", "Bola"]
        assert period.entries[0].net_pay == Decimal("106810.00")
        assert period.entries[0].additional_details == {"monthly_tax": "7790.00", "note": "first"}
        assert period.entries[1].additional_details is None

    async def test_entries_keep_order(self, session: AsyncSession):
        store = PayrollRecordStore(session)
        names = ["Zainab", "Ada", "Musa", "Bola"]
        entries = [
            EntryDraft(name, Decimal("1"), Decimal("0"), Decimal("1")) for name in names
        ]

        period = await store.fetch(await store.save(_period(), entries))

        assert [e.employee_name for e in period.entries] == names

    async def test_employee_name_stripped(self, session: AsyncSession):
        store = PayrollRecordStore(session)
        entry = EntryDraft("  Ada  ", Decimal("1"), Decimal("0"), Decimal("1"))

        period = await store.fetch(await store.save(_period(), [entry]))

        assert period.entries[0].employee_name == "Ada"

    async def test_fetch_unknown(self, session: AsyncSession):
        missing = uuid4()

        with pytest.raises(RecordNotFoundError) as exc_info:
            await PayrollRecordStore(session).fetch(missing)

        assert exc_info.value.payroll_period_id == missing

    async def test_list_periods_newest_first(self, session: AsyncSession):
        store = PayrollRecordStore(session)
        await store.save(_period(payment_date=date(2026, 1, 31)), [])
        await store.save(
            _period(
                start_date=date(2026, 2, 1),
                end_date=date(2026, 2, 28),
                payment_date=date(2026, 2, 28),
            ),
            [],
        )

        periods = await store.list_periods()

        assert [p.payment_date for p in periods] == [date(2026, 2, 28), date(2026, 1, 31)]


class TestValidationBeforeWrite:
    """Nothing is written when any entry is invalid."""

    async def test_blank_employee_name(self, session: AsyncSession):
        entries = _entries() + [EntryDraft("  ", Decimal("1"), Decimal("0"), Decimal("1"))]

        with pytest.raises(ValidationError) as exc_info:
            await PayrollRecordStore(session).save(_period(), entries)

        assert exc_info.value.field_name == "employee_name"
        assert await _count(session, PayrollPeriod) == 0
        assert await _count(session, PayrollEntry) == 0

    async def test_unknown_status(self, session: AsyncSession):
        with pytest.raises(ValidationError):
            await PayrollRecordStore(session).save(_period(status="archived"), [])

    async def test_end_before_start(self, session: AsyncSession):
        with pytest.raises(ValidationError):
            await PayrollRecordStore(session).save(
                _period(start_date=date(2026, 2, 1), end_date=date(2026, 1, 1)), []
            )


class TestStatusUpdates:
    """Status changes go through the state machine."""

    async def test_draft_to_processing_to_paid(self, session: AsyncSession):
        store = PayrollRecordStore(session)
        payroll_period_id = await store.save(_period(), _entries())

        period = await store.update_status(payroll_period_id, "processing")
        assert period.status == "processing"

        period = await store.update_status(payroll_period_id, "paid")
        assert period.status == "paid"
        assert len(period.entries) == 2

    async def test_invalid_transition(self, session: AsyncSession):
        store = PayrollRecordStore(session)
        payroll_period_id = await store.save(_period(), [])

        with pytest.raises(InvalidTransitionError):
            await store.update_status(payroll_period_id, "paid")

        assert (await store.fetch(payroll_period_id)).status == "draft"

    async def test_update_unknown(self, session: AsyncSession):
        with pytest.raises(RecordNotFoundError):
            await PayrollRecordStore(session).update_status(uuid4(), "processing")
