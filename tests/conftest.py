"""Pytest fixtures for payslip engine tests."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from payslip_engine.calculators.custom_fields import CustomFieldRegistry
from payslip_engine.calculators.engine import BatchProcessor, PayrollCalculator
from payslip_engine.database import create_schema, get_engine, make_session_factory


@pytest.fixture
def calculator() -> PayrollCalculator:
    """Calculator with the default statutory rates and bands."""
    return PayrollCalculator()


@pytest.fixture
def processor(calculator: PayrollCalculator) -> BatchProcessor:
    return BatchProcessor(calculator)


@pytest.fixture
def registry() -> CustomFieldRegistry:
    return CustomFieldRegistry()


@pytest.fixture
def example_input() -> dict[str, Any]:
    """The reference employee: net pay 106810.00."""
    return {
        "basic_salary": Decimal("100000"),
        "housing_allowance": Decimal("20000"),
        "transport_allowance": Decimal("10000"),
        "utility_allowance": Decimal("0"),
        "lunch_allowance": Decimal("0"),
        "entertainment_allowance": Decimal("0"),
        "leave_allowance": Decimal("0"),
        "other_allowances": Decimal("0"),
        "bonus": Decimal("0"),
        "overtime": Decimal("0"),
        "employee_deductions": Decimal("0"),
        "loan_repayment": Decimal("0"),
    }


# SQLite file per test; an in-memory database is not shared between the
# connections of an async pool.
@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine with the schema in place."""
    engine = get_engine(f"sqlite+aiosqlite:///{tmp_path / 'payslip_test.db'}")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    session_factory = make_session_factory(engine)
    async with session_factory() as session:
        yield session
        await session.rollback()
