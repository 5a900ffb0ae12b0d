"""API routes."""

from payslip_engine.api.routes.custom_fields import router as custom_fields_router
from payslip_engine.api.routes.health import router as health_router
from payslip_engine.api.routes.payroll import router as payroll_router
from payslip_engine.api.routes.periods import router as periods_router

__all__ = ["custom_fields_router", "health_router", "payroll_router", "periods_router"]
