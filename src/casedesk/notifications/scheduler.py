"""Hourly reminder scheduler.

Runs the reminder batch once at startup and then every hour at a fixed
minute. Full scans are single-flight: a run that would overlap one still in
progress is skipped, not queued.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from datetime import datetime, timedelta

import structlog

from casedesk.notifications.dates import local_now
from casedesk.notifications.service import BatchReport, check_upcoming_cases
from casedesk.ws.presence import PresenceRegistry, presence

logger = structlog.get_logger()


class ReminderScheduler:
    """Fires ``check_upcoming_cases`` on a wall-clock cadence."""

    def __init__(
        self,
        registry: PresenceRegistry,
        *,
        minute: int = 0,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self.registry = registry
        self.minute = minute
        self._clock = clock
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def seconds_until_next_run(self, now: datetime) -> float:
        """Seconds from ``now`` until the next ``HH:minute:00``."""
        candidate = now.replace(minute=self.minute, second=0, microsecond=0)
        if candidate <= now:
            candidate += timedelta(hours=1)
        return (candidate - now).total_seconds()

    async def run_once(self) -> BatchReport | None:
        """Run one full batch. Returns None if a batch is already running."""
        if self._lock.locked():
            logger.warning("reminder_batch_skipped", reason="previous run in flight")
            return None

        async with self._lock:
            started = time.monotonic()
            report = await check_upcoming_cases(registry=self.registry, now=self._clock())
            logger.info(
                "reminder_batch_finished",
                duration_ms=round((time.monotonic() - started) * 1000),
                **report.as_dict(),
            )
            return report

    async def _fire(self) -> None:
        try:
            await self.run_once()
        except Exception:
            logger.exception("reminder_batch_failed")

    async def _loop(self, run_at_startup: bool) -> None:
        if run_at_startup:
            await self._fire()
        while True:
            await asyncio.sleep(self.seconds_until_next_run(self._clock()))
            await self._fire()

    def start(self, *, run_at_startup: bool = True) -> asyncio.Task[None]:
        """Start the background loop on the running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._loop(run_at_startup))
            logger.info("reminder_scheduler_started", minute=self.minute, run_at_startup=run_at_startup)
        return self._task

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("reminder_scheduler_stopped")


def get_reminder_scheduler() -> ReminderScheduler:
    """Return the process-wide scheduler (FastAPI dependency)."""
    return reminder_scheduler


# Global singleton
reminder_scheduler = ReminderScheduler(presence)
