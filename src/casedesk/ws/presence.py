"""Presence registry: which authenticated user is reachable on which socket.

One live channel per user. A newer connection replaces the older entry, and
an older socket disconnecting later never evicts its replacement.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any

import structlog
from fastapi import WebSocket

logger = structlog.get_logger()


@dataclass
class PresenceEntry:
    """A registered channel for one user."""

    channel: WebSocket
    user_id: int
    connected_at: float = field(default_factory=time.time)
    messages_sent: int = 0


class PresenceRegistry:
    """Owns the user id -> channel mapping.

    Only mutated through register/unregister; safe under asyncio because
    neither method awaits.
    """

    def __init__(self) -> None:
        self._entries: dict[int, PresenceEntry] = {}

    @property
    def connection_count(self) -> int:
        return len(self._entries)

    def register(self, user_id: int, channel: WebSocket) -> WebSocket | None:
        """Track ``channel`` for ``user_id``, returning the channel it replaced."""
        previous = self._entries.get(user_id)
        self._entries[user_id] = PresenceEntry(channel=channel, user_id=user_id)
        if previous is not None and previous.channel is not channel:
            logger.info("ws_replaced", user_id=user_id)
            return previous.channel
        logger.info("ws_connected", user_id=user_id)
        return None

    def unregister(self, user_id: int, channel: WebSocket) -> bool:
        """Forget ``user_id`` if its current channel is still ``channel``."""
        entry = self._entries.get(user_id)
        if entry is None or entry.channel is not channel:
            return False
        del self._entries[user_id]
        logger.info("ws_disconnected", user_id=user_id, messages_sent=entry.messages_sent)
        return True

    def lookup(self, user_id: int) -> WebSocket | None:
        entry = self._entries.get(user_id)
        return entry.channel if entry is not None else None

    async def push(self, user_id: int, event: str, payload: dict[str, Any]) -> bool:
        """Send ``{"type": event, "payload": payload}`` to the user's channel.

        Fire-and-forget: returns False if the user is offline or the send
        fails. A channel that fails to send is unregistered.
        """
        entry = self._entries.get(user_id)
        if entry is None:
            return False

        frame = json.dumps({"type": event, "payload": payload}, default=str)
        try:
            await entry.channel.send_text(frame)
        except Exception:
            logger.warning("ws_push_failed", user_id=user_id, push_event=event, exc_info=True)
            self.unregister(user_id, entry.channel)
            return False

        entry.messages_sent += 1
        return True

    def get_stats(self) -> dict[str, int]:
        """Get connection statistics."""
        return {
            "connected_users": len(self._entries),
            "messages_sent": sum(e.messages_sent for e in self._entries.values()),
        }


# Global singleton
presence = PresenceRegistry()
