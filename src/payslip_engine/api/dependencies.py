"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.calculators.custom_fields import CustomFieldRegistry
from payslip_engine.calculators.engine import BatchProcessor, PayrollCalculator
from payslip_engine.database import session_scope


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with session_scope(request.app.state.session_factory) as session:
        yield session


def get_registry(request: Request) -> CustomFieldRegistry:
    """The process-wide custom field registry."""
    return request.app.state.registry


def get_calculator(request: Request) -> PayrollCalculator:
    return request.app.state.calculator


def get_batch_processor(request: Request) -> BatchProcessor:
    return BatchProcessor(request.app.state.calculator)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Registry = Annotated[CustomFieldRegistry, Depends(get_registry)]
Calculator = Annotated[PayrollCalculator, Depends(get_calculator)]
Processor = Annotated[BatchProcessor, Depends(get_batch_processor)]
