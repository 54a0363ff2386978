"""Initial admin account seeding.

Run once after migrations::

    python -m casedesk.db.seed
"""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.auth.password import hash_password
from casedesk.config import get_settings
from casedesk.database import close_db, get_session_factory, init_db
from casedesk.db.models import ROLE_ADMIN, User

logger = logging.getLogger(__name__)


async def ensure_initial_admin(db: AsyncSession) -> User | None:
    """Create the configured admin account if no admin exists yet.

    Idempotent. Returns the created user, or None if nothing was done.
    """
    settings = get_settings()
    result = await db.execute(select(User.id).where(User.role == ROLE_ADMIN).limit(1))
    if result.scalar_one_or_none() is not None:
        return None

    admin = User(
        username=settings.initial_admin_username,
        email=settings.initial_admin_email.lower(),
        password_hash=hash_password(settings.initial_admin_password),
        role=ROLE_ADMIN,
    )
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    logger.info("Created initial admin account %s", admin.email)
    return admin


async def main() -> None:
    settings = get_settings()
    await init_db(settings.database_url)
    try:
        async with get_session_factory()() as db:
            await ensure_initial_admin(db)
    finally:
        await close_db()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
