"""Shared test fixtures.

Tests run against an in-memory SQLite database (aiosqlite); each test gets a
fresh schema built from the ORM metadata. Redis is left uninitialized, so the
rate limiter passes requests through.
"""

from __future__ import annotations

import os

os.environ["CASEDESK_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CASEDESK_REMINDER_SCHEDULER_ENABLED"] = "false"
os.environ["CASEDESK_LOG_FORMAT"] = "console"

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from casedesk.auth.jwt import create_access_token  # noqa: E402
from casedesk.auth.password import hash_password  # noqa: E402
from casedesk.config import get_settings  # noqa: E402
from casedesk.database import close_db, get_engine, get_session_factory, init_db  # noqa: E402
from casedesk.db.base import Base  # noqa: E402
from casedesk.db.models import ROLE_ADMIN, ROLE_USER, Case, User  # noqa: E402
from casedesk.main import create_app  # noqa: E402
from casedesk.notifications.dates import start_of_day  # noqa: E402
from casedesk.ws.presence import PresenceRegistry  # noqa: E402

get_settings.cache_clear()

TEST_PASSWORD = "secret123"  # noqa: S105


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """A fresh database with all tables, and a session on it."""
    await init_db(get_settings().database_url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with get_session_factory()() as session:
        yield session

    await close_db()


@pytest.fixture
def app() -> FastAPI:
    return create_app()


@pytest_asyncio.fixture
async def client(app: FastAPI, db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the app (lifespan not run)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def registry() -> PresenceRegistry:
    return PresenceRegistry()


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Factory creating users directly in the database."""

    async def _make(
        email: str = "user@example.com",
        *,
        username: str = "user",
        role: str = ROLE_USER,
        password: str = TEST_PASSWORD,
    ) -> User:
        user = User(username=username, email=email, password_hash=hash_password(password), role=role)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_case(db_session: AsyncSession) -> Callable[..., Awaitable[Case]]:
    """Factory creating cases directly in the database."""

    async def _make(user_id: int | None, date: datetime, *, title: str = "Sidang", **fields: object) -> Case:
        case = Case(user_id=user_id, created_by=user_id, title=title, date=date, **fields)
        db_session.add(case)
        await db_session.commit()
        await db_session.refresh(case)
        return case

    return _make


@pytest_asyncio.fixture
async def user(make_user: Callable[..., Awaitable[User]]) -> User:
    return await make_user()


@pytest_asyncio.fixture
async def admin(make_user: Callable[..., Awaitable[User]]) -> User:
    return await make_user("admin@example.com", username="admin", role=ROLE_ADMIN)


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def user_headers(user: User) -> dict[str, str]:
    return auth_headers(user)


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return auth_headers(admin)


@pytest.fixture
def tomorrow_morning() -> datetime:
    """10:00 on the calendar day after the real current day."""
    return start_of_day(datetime.now()) + timedelta(days=1, hours=10)


@pytest.fixture
def headers_for() -> Callable[[User], dict[str, str]]:
    return auth_headers
