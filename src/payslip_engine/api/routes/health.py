"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.api.dependencies import DbSession, Registry

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    database: str
    version: str
    custom_fields: int


async def _database_ok(db: AsyncSession) -> bool:
    try:
        await db.execute(text("SELECT 1"))
    except Exception:
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request, db: DbSession, registry: Registry) -> HealthResponse:
    """Report database reachability, engine version and registered field count."""
    db_ok = await _database_ok(db)
    return HealthResponse(
        status="healthy" if db_ok else "degraded",
        timestamp=datetime.now(timezone.utc),
        database="healthy" if db_ok else "unhealthy",
        version=request.app.state.settings.engine_version,
        custom_fields=len(registry),
    )


@router.get("/ready")
async def readiness_check(db: DbSession) -> JSONResponse:
    """Ready once the payroll database answers; 503 until then."""
    if await _database_ok(db):
        return JSONResponse({"status": "ready"})
    return JSONResponse(
        {"status": "unavailable"}, status_code=status.HTTP_503_SERVICE_UNAVAILABLE
    )


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    """Liveness check for container orchestration."""
    return {"status": "alive"}
