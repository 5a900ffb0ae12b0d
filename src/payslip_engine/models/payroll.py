"""Payroll period and entry models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, CheckConstraint, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payslip_engine.models.base import Base, TimestampMixin


class PayrollPeriod(Base, TimestampMixin):
    """A saved payroll run for one pay period."""

    __tablename__ = "payroll_period"

    payroll_period_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    start_date: Mapped[date]
    end_date: Mapped[date]
    payment_date: Mapped[date]
    status: Mapped[str] = mapped_column(String(16), default="draft")
    total_amount: Mapped[Decimal] = mapped_column(default=Decimal("0"))

    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'processing', 'paid', 'cancelled')",
            name="payroll_period_status_check",
        ),
        CheckConstraint("end_date >= start_date", name="payroll_period_dates_check"),
    )

    entries: Mapped[list[PayrollEntry]] = relationship(
        back_populates="payroll_period",
        cascade="all, delete-orphan",
        order_by="PayrollEntry.line_number",
    )


class PayrollEntry(Base, TimestampMixin):
    """One employee's payslip within a period.

    ``taxes`` is the total withheld by statute (PAYE, employee pension,
    health insurance). The full payslip breakdown is kept in
    ``additional_details`` with amounts as strings.
    """

    __tablename__ = "payroll_entry"

    payroll_entry_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    payroll_period_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_period.payroll_period_id", ondelete="CASCADE"),
        index=True,
    )
    line_number: Mapped[int] = mapped_column(default=0)
    employee_name: Mapped[str] = mapped_column(String(255))
    base_salary: Mapped[Decimal]
    taxes: Mapped[Decimal]
    net_pay: Mapped[Decimal]
    additional_details: Mapped[dict[str, Any] | None] = mapped_column(JSON)

    payroll_period: Mapped[PayrollPeriod] = relationship(back_populates="entries")
