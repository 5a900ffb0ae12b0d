"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payslip_engine.api.routes import (
    custom_fields_router,
    health_router,
    payroll_router,
    periods_router,
)
from payslip_engine.calculators.custom_fields import CustomFieldRegistry, DuplicateFieldError
from payslip_engine.calculators.engine import PayrollCalculator
from payslip_engine.calculators.types import CalculationError
from payslip_engine.calculators.validation import ValidationError
from payslip_engine.config import Settings, get_settings
from payslip_engine.database import create_schema, get_engine, make_session_factory
from payslip_engine.services.importer import ImportFormatError
from payslip_engine.services.record_store import RecordNotFoundError
from payslip_engine.services.state_machine import InvalidTransitionError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    await create_schema(app.state.engine)
    yield
    # Shutdown
    await app.state.engine.dispose()


def _error(status_code: int, exc: Exception, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc), "code": code})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Payslip Engine API",
        description="Monthly payroll with PAYE, pension and health insurance",
        version=settings.engine_version,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = get_engine(settings.database_url)
    app.state.session_factory = make_session_factory(app.state.engine)
    app.state.registry = CustomFieldRegistry()
    app.state.calculator = PayrollCalculator.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, exc, "VALIDATION_ERROR")

    @app.exception_handler(CalculationError)
    async def calculation_error_handler(request: Request, exc: CalculationError) -> JSONResponse:
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, exc, "CALCULATION_ERROR")

    @app.exception_handler(ImportFormatError)
    async def import_error_handler(request: Request, exc: ImportFormatError) -> JSONResponse:
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, exc, "IMPORT_FORMAT_ERROR")

    @app.exception_handler(RecordNotFoundError)
    async def not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, exc, "NOT_FOUND")

    @app.exception_handler(InvalidTransitionError)
    async def transition_error_handler(
        request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, exc, "INVALID_TRANSITION")

    @app.exception_handler(DuplicateFieldError)
    async def duplicate_field_handler(request: Request, exc: DuplicateFieldError) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, exc, "DUPLICATE_FIELD")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(payroll_router, prefix="/api/v1")
    app.include_router(custom_fields_router, prefix="/api/v1")
    app.include_router(periods_router, prefix="/api/v1")

    return app
