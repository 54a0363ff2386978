"""Reminder creation and delivery.

A reminder is created for every case scheduled for tomorrow whose owner has
not been notified yet. For each case, in one transaction:

1. insert the notification unless one already exists for the same case,
   recipient and calendar day (unique constraint, ``ON CONFLICT DO NOTHING``)
2. flip ``cases.notification_sent``

After the commit the reminder is pushed to the recipient's WebSocket if they
are connected; otherwise it waits for the pull endpoint.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from casedesk.database import get_session_factory
from casedesk.db.models import REMINDER_TYPE, Case, Notification, User
from casedesk.notifications.dates import (
    local_now,
    reminder_message,
    reminder_schedule_date,
    tomorrow_window,
)
from casedesk.notifications.exceptions import (
    CaseNotFoundError,
    PersistenceError,
    RecipientNotFoundError,
)
from casedesk.notifications.push import push_reminder

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from casedesk.ws.presence import PresenceRegistry

logger = logging.getLogger(__name__)

_DEDUP_COLUMNS = ["case_id", "user_id", "notify_date"]


@dataclass
class BatchReport:
    """Aggregate outcome of one batch run."""

    scanned: int = 0
    created: int = 0
    skipped: int = 0
    failed: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def _insert_for(db: AsyncSession) -> Any:  # noqa: ANN401
    """Pick the dialect insert construct that supports ON CONFLICT."""
    if db.bind.dialect.name == "postgresql":
        return pg_insert
    return sqlite_insert


async def send_and_save_notification(
    db: AsyncSession,
    user_id: int | None,
    message: str,
    case_id: int,
    *,
    registry: PresenceRegistry,
    now: datetime | None = None,
    mark_case_notified: bool = False,
) -> Notification | None:
    """Persist a reminder for ``case_id`` and push it to ``user_id`` if online.

    Returns the new notification, or None if one already exists for this
    case, recipient and day.

    Raises:
        CaseNotFoundError: The case was deleted since it was scanned.
        RecipientNotFoundError: The case has no (existing) owner.
        PersistenceError: The insert or the flag update failed.
    """
    now = now or local_now()

    case = await db.get(Case, case_id)
    if case is None:
        raise CaseNotFoundError(case_id)
    if user_id is None or await db.get(User, user_id) is None:
        raise RecipientNotFoundError(user_id, case_id)

    insert = _insert_for(db)
    stmt = (
        insert(Notification)
        .values(
            user_id=user_id,
            case_id=case_id,
            message=message,
            is_read=False,
            is_sent=True,
            schedule_date=reminder_schedule_date(case.date),
            type=REMINDER_TYPE,
            notify_date=now.date(),
            created_at=now,
        )
        .on_conflict_do_nothing(index_elements=_DEDUP_COLUMNS)
        .returning(Notification)
    )

    try:
        result = await db.execute(stmt)
        notification = result.scalar_one_or_none()
        if mark_case_notified:
            await db.execute(
                update(Case).where(Case.id == case_id).values(notification_sent=True)
            )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        msg = f"Failed to store reminder for case {case_id}"
        raise PersistenceError(msg) from e

    if notification is None:
        logger.info("Reminder already exists for case %s (user %s)", case_id, user_id)
        return None

    logger.info("Reminder %s created for case %s (user %s)", notification.id, case_id, user_id)
    await push_reminder(registry, notification)
    return notification


async def find_due_cases(
    db: AsyncSession,
    now: datetime,
    user_id: int | None = None,
) -> list[Any]:
    """Cases scheduled for tomorrow that have not been reminded yet."""
    start, end = tomorrow_window(now)
    query = (
        select(Case.id, Case.user_id, Case.title, Case.date)
        .where(
            Case.date >= start,
            Case.date < end,
            Case.notification_sent.is_(False),
        )
        .order_by(Case.id)
    )
    if user_id is not None:
        query = query.where(Case.user_id == user_id)
    result = await db.execute(query)
    return list(result.all())


async def check_upcoming_cases(
    *,
    registry: PresenceRegistry,
    user_id: int | None = None,
    now: datetime | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> BatchReport:
    """Send tomorrow's reminders, optionally for a single user.

    Each case is processed in its own session; a failing case is logged and
    counted, and the run continues with the next one.
    """
    now = now or local_now()
    factory = session_factory or get_session_factory()

    async with factory() as db:
        due = await find_due_cases(db, now, user_id)

    report = BatchReport(scanned=len(due))
    logger.info("Checking %d upcoming cases for reminders", len(due))

    for row in due:
        message = reminder_message(row.title, row.date)
        try:
            async with factory() as db:
                notification = await send_and_save_notification(
                    db,
                    row.user_id,
                    message,
                    row.id,
                    registry=registry,
                    now=now,
                    mark_case_notified=True,
                )
        except Exception:
            logger.exception("Failed to process reminder for case %s", row.id)
            report.failed += 1
            continue

        if notification is None:
            report.skipped += 1
        else:
            report.created += 1

    return report


async def check_pending_notifications(
    user_id: int,
    *,
    registry: PresenceRegistry,
    now: datetime | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> int:
    """Login-time variant scoped to one user. Never raises.

    Returns the number of reminders created.
    """
    try:
        report = await check_upcoming_cases(
            registry=registry,
            user_id=user_id,
            now=now,
            session_factory=session_factory,
        )
    except Exception:
        logger.exception("Failed to check pending reminders for user %s", user_id)
        return 0
    return report.created


# ---------------------------------------------------------------------------
# Pull endpoint queries
# ---------------------------------------------------------------------------


async def get_notifications(db: AsyncSession, user_id: int) -> list[Notification]:
    """All of a user's notifications, most recent first."""
    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
    )
    return list(result.scalars().all())


async def mark_as_read(db: AsyncSession, user_id: int, notification_id: int) -> Notification | None:
    """Mark one of the user's notifications read. Returns None if not found."""
    result = await db.execute(
        select(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user_id,
        )
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        return None
    notification.is_read = True
    await db.commit()
    return notification
