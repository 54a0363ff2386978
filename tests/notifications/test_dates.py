"""Unit tests for reminder calendar helpers."""

from datetime import datetime

from casedesk.notifications.dates import (
    format_long_date,
    reminder_message,
    reminder_schedule_date,
    start_of_day,
    tomorrow_window,
)


class TestTomorrowWindow:
    def test_covers_next_calendar_day(self):
        start, end = tomorrow_window(datetime(2026, 10, 19, 14, 30, 5))
        assert start == datetime(2026, 10, 20)
        assert end == datetime(2026, 10, 21)

    def test_just_before_midnight(self):
        start, _ = tomorrow_window(datetime(2026, 10, 19, 23, 59, 59))
        assert start == datetime(2026, 10, 20)

    def test_month_and_year_rollover(self):
        start, end = tomorrow_window(datetime(2026, 12, 31, 8, 0))
        assert start == datetime(2027, 1, 1)
        assert end == datetime(2027, 1, 2)

    def test_start_of_day_truncates(self):
        assert start_of_day(datetime(2026, 3, 4, 5, 6, 7, 8)) == datetime(2026, 3, 4)


class TestMessages:
    def test_long_date_uses_indonesian_months(self):
        assert format_long_date(datetime(2026, 10, 20, 9, 0)) == "20 Oktober 2026"
        assert format_long_date(datetime(2027, 1, 5)) == "5 Januari 2027"

    def test_reminder_message(self):
        message = reminder_message("Hearing A", datetime(2026, 10, 20, 9, 0))
        assert message == 'Reminder: Kasus "Hearing A" dijadwalkan untuk besok (20 Oktober 2026)'

    def test_schedule_date_is_day_before(self):
        assert reminder_schedule_date(datetime(2026, 10, 20, 9, 0)) == datetime(2026, 10, 19, 9, 0)
