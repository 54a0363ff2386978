"""Notification API endpoints: pull, mark read, manual trigger."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.auth.dependencies import get_current_user
from casedesk.database import get_session
from casedesk.db.models import User
from casedesk.notifications.scheduler import ReminderScheduler, get_reminder_scheduler
from casedesk.notifications.schemas import (
    BatchReportResponse,
    CheckNotificationsResponse,
    NotificationResponse,
)
from casedesk.notifications.service import get_notifications, mark_as_read

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["Notifications"])


@router.get("/notifications", response_model=list[NotificationResponse])
async def list_notifications(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> list[NotificationResponse]:
    """List the caller's notifications, most recent first."""
    notifications = await get_notifications(db, user.id)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.put("/notifications/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> NotificationResponse:
    """Mark a notification as read."""
    notification = await mark_as_read(db, user.id, notification_id)
    if notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return NotificationResponse.model_validate(notification)


@router.post("/check-notifications", response_model=CheckNotificationsResponse)
async def trigger_notification_check(
    user: User = Depends(get_current_user),
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
) -> CheckNotificationsResponse:
    """Run the full reminder batch now."""
    logger.info("reminder_check_requested", user_id=user.id)
    try:
        report = await scheduler.run_once()
    except Exception as e:
        logger.exception("reminder_check_failed", user_id=user.id)
        raise HTTPException(status_code=500, detail="Failed to check notifications") from e

    if report is None:
        return CheckNotificationsResponse(
            message="Notification check already running",
            skipped=True,
        )
    return CheckNotificationsResponse(
        message="Notification check triggered successfully",
        report=BatchReportResponse(**report.as_dict()),
    )
