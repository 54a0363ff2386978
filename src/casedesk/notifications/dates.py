"""Calendar helpers for reminder scheduling.

All day boundaries use the server's local wall clock, truncated to midnight.
"""

from __future__ import annotations

from datetime import datetime, timedelta

# Indonesian month names, as rendered by the reminder messages.
MONTHS_ID = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)

REMINDER_TITLE = "Pengingat Jadwal"


def local_now() -> datetime:
    """Current server-local time as a naive datetime."""
    return datetime.now()


def start_of_day(moment: datetime) -> datetime:
    """Truncate to local midnight."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def tomorrow_window(now: datetime) -> tuple[datetime, datetime]:
    """Return ``[start, end)`` covering the calendar day after ``now``."""
    start = start_of_day(now) + timedelta(days=1)
    return start, start + timedelta(days=1)


def reminder_schedule_date(case_date: datetime) -> datetime:
    """The reminder is scheduled one calendar day before the case."""
    return case_date - timedelta(days=1)


def format_long_date(value: datetime) -> str:
    """Render a date as e.g. ``20 Oktober 2026``."""
    return f"{value.day} {MONTHS_ID[value.month - 1]} {value.year}"


def reminder_message(title: str, case_date: datetime) -> str:
    return f'Reminder: Kasus "{title}" dijadwalkan untuk besok ({format_long_date(case_date)})'
