"""Case persistence: CRUD scoped to the owning user."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from casedesk.db.models import Case, Notification

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def list_cases(db: AsyncSession, user_id: int, type_: str | None = None) -> list[Case]:
    """The user's cases, latest date first, optionally filtered by type (case-insensitive)."""
    query = select(Case).where(Case.user_id == user_id)
    if type_:
        query = query.where(func.lower(Case.type) == type_.lower())
    result = await db.execute(query.order_by(Case.date.desc(), Case.id.desc()))
    return list(result.scalars().all())


async def get_case(db: AsyncSession, case_id: int, user_id: int) -> Case | None:
    """Fetch one of the user's cases, with its creator loaded."""
    result = await db.execute(
        select(Case)
        .options(selectinload(Case.creator))
        .where(Case.id == case_id, Case.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def create_case(db: AsyncSession, user_id: int, fields: dict[str, Any]) -> Case:
    """Create a case owned and created by ``user_id``; it starts un-reminded."""
    case = Case(
        **fields,
        user_id=user_id,
        created_by=user_id,
        notification_sent=False,
    )
    db.add(case)
    await db.commit()
    await db.refresh(case)
    logger.info("case_created", case_id=case.id, user_id=user_id, date=case.date.isoformat())
    return case


async def update_case(
    db: AsyncSession,
    case_id: int,
    user_id: int,
    fields: dict[str, Any],
) -> Case | None:
    """Replace the editable fields of one of the user's cases.

    ``notification_sent`` is left untouched.
    """
    case = await get_case(db, case_id, user_id)
    if case is None:
        return None
    for name, value in fields.items():
        setattr(case, name, value)
    await db.commit()
    await db.refresh(case)
    logger.info("case_updated", case_id=case.id, user_id=user_id)
    return case


async def update_case_status(db: AsyncSession, case_id: int, user_id: int, status: str) -> Case | None:
    case = await get_case(db, case_id, user_id)
    if case is None:
        return None
    case.status = status
    await db.commit()
    await db.refresh(case)
    logger.info("case_status_updated", case_id=case.id, status=status)
    return case


async def delete_case(db: AsyncSession, case_id: int, user_id: int) -> Case | None:
    """Delete one of the user's cases together with its notifications.

    Both deletes commit or roll back together.
    """
    case = await get_case(db, case_id, user_id)
    if case is None:
        return None
    try:
        await db.execute(delete(Notification).where(Notification.case_id == case_id))
        await db.execute(delete(Case).where(Case.id == case_id))
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("case_delete_failed", case_id=case_id)
        raise
    logger.info("case_deleted", case_id=case_id, user_id=user_id)
    return case
