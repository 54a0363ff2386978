"""Response schemas for the notification endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    """A stored reminder as returned by the pull endpoint."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    case_id: int | None
    message: str
    is_read: bool
    is_sent: bool
    schedule_date: datetime | None
    type: str
    created_at: datetime


class BatchReportResponse(BaseModel):
    scanned: int
    created: int
    skipped: int
    failed: int


class CheckNotificationsResponse(BaseModel):
    """Outcome of a manually triggered reminder run."""

    message: str
    skipped: bool = False
    report: BatchReportResponse | None = None
