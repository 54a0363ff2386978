"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from casedesk.auth.router import router as auth_router
from casedesk.cases.router import router as cases_router
from casedesk.config import get_settings
from casedesk.database import close_db, init_db
from casedesk.health.router import router as health_router
from casedesk.middleware import setup_middleware
from casedesk.notifications.router import router as notifications_router
from casedesk.notifications.scheduler import reminder_scheduler
from casedesk.redis_client import close_redis, init_redis
from casedesk.users.router import router as users_router
from casedesk.ws.router import router as ws_router


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    # Hourly reminder batch, plus one run right after startup
    if settings.reminder_scheduler_enabled:
        reminder_scheduler.minute = settings.reminder_check_minute
        reminder_scheduler.start(run_at_startup=settings.reminder_run_at_startup)

    yield

    await reminder_scheduler.stop()
    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Casedesk API",
        description="Backend API for Casedesk, a case schedule tracker with next-day reminders",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(cases_router)
    app.include_router(notifications_router)
    app.include_router(ws_router)

    return app


app = create_app()
