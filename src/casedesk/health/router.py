"""Liveness, readiness and version probes."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.config import get_settings
from casedesk.database import get_session
from casedesk.notifications.scheduler import ReminderScheduler, get_reminder_scheduler
from casedesk.redis_client import redis_ping
from casedesk.ws.presence import presence

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe: returns 200 if the process is alive."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(
    db: AsyncSession = Depends(get_session),  # noqa: B008
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),  # noqa: B008
) -> dict[str, object]:
    """Readiness probe: database and Redis reachability, plus reminder state."""
    checks: dict[str, str] = {}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except SQLAlchemyError as exc:
        checks["database"] = f"error: {exc.__class__.__name__}"

    checks["redis"] = "ok" if await redis_ping() else "unavailable"

    return {
        "status": "ready" if all(v == "ok" for v in checks.values()) else "degraded",
        "checks": checks,
        "presence": presence.get_stats(),
        "reminder_batch_running": scheduler.busy,
    }


@router.get("/version")
async def version() -> dict[str, str]:
    settings = get_settings()
    return {"version": settings.app_version, "environment": settings.environment}
