"""SQLAlchemy ORM models."""

from payslip_engine.models.base import Base, TimestampMixin
from payslip_engine.models.payroll import PayrollEntry, PayrollPeriod

__all__ = [
    "Base",
    "TimestampMixin",
    "PayrollEntry",
    "PayrollPeriod",
]
