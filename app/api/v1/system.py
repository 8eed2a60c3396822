"""System health endpoint — checks database connectivity and the invite table."""

import logging
import time

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import Session
from app.services.invites import count_invites

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/system", tags=["system"])


class ServiceHealth(BaseModel):
    status: str  # "ok" or "error"
    detail: str | None = None
    latency_ms: int | None = None


class HealthResponse(BaseModel):
    status: str
    database: ServiceHealth
    invites: ServiceHealth


@router.get("/health", response_model=HealthResponse)
async def system_health(session: Session) -> HealthResponse:
    """Check that the database answers and the invite table is readable."""
    db = await _check_database(session)
    inv = await _check_invites(session) if db.status == "ok" else ServiceHealth(
        status="error", detail="database unavailable",
    )
    overall = "ok" if db.status == "ok" and inv.status == "ok" else "degraded"
    return HealthResponse(status=overall, database=db, invites=inv)


async def _check_database(session) -> ServiceHealth:
    try:
        t0 = time.monotonic()
        await session.execute(text("SELECT 1"))
        latency = int((time.monotonic() - t0) * 1000)
        return ServiceHealth(status="ok", latency_ms=latency)
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return ServiceHealth(status="error", detail="database unreachable")


async def _check_invites(session) -> ServiceHealth:
    try:
        count = await count_invites(session)
        return ServiceHealth(status="ok", detail=f"{count} invites")
    except SQLAlchemyError:
        logger.exception("Invite table health check failed")
        return ServiceHealth(status="error", detail="invite table unreadable")
