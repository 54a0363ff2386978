"""Push a persisted reminder to its recipient's live channel."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from casedesk.notifications.dates import REMINDER_TITLE

if TYPE_CHECKING:
    from casedesk.db.models import Notification
    from casedesk.ws.presence import PresenceRegistry

logger = logging.getLogger(__name__)

NOTIFICATION_EVENT = "notification"


def _iso(value: Any) -> str | None:  # noqa: ANN401
    return value.isoformat() if value is not None else None


def build_push_payload(notification: Notification) -> dict[str, Any]:
    """The full notification record, decorated with a display title."""
    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "case_id": notification.case_id,
        "message": notification.message,
        "is_read": notification.is_read,
        "is_sent": notification.is_sent,
        "schedule_date": _iso(notification.schedule_date),
        "type": notification.type,
        "title": REMINDER_TITLE,
        "created_at": _iso(notification.created_at),
    }


async def push_reminder(registry: PresenceRegistry, notification: Notification) -> bool:
    """Emit the ``notification`` event if the recipient is connected.

    Returns False when the recipient is offline or the send failed; the row
    stays available through the pull endpoint either way.
    """
    delivered = await registry.push(
        notification.user_id,
        NOTIFICATION_EVENT,
        build_push_payload(notification),
    )
    if not delivered:
        logger.debug("Recipient %s offline, reminder %s left for pull", notification.user_id, notification.id)
    return delivered
