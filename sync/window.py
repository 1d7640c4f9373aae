# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Sync windows - Date ranges the engine and the duplicate cleanup look at
"""
import calendar
from datetime import date, datetime, time
from typing import NamedTuple, Optional

from utils.timezone import end_of_day, get_tz, localize, start_of_day


class SyncWindow(NamedTuple):
    start: datetime
    end: datetime

    def contains(self, dt: datetime) -> bool:
        return self.start <= dt <= self.end


def _shift_month(year: int, month: int, months: int):
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def last_day_of_month(day: date, months_ahead: int = 0) -> date:
    """Last calendar day of the month `months_ahead` months after `day`"""
    year, month = _shift_month(day.year, day.month, months_ahead)
    return date(year, month, calendar.monthrange(year, month)[1])


def _same_day_months_back(day: date, months_back: int) -> date:
    year, month = _shift_month(day.year, day.month, -months_back)
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def compute_sync_window(now: datetime, months_future: int, months_past: int = 0,
                        tz_name: Optional[str] = None) -> SyncWindow:
    """[start of today (minus months_past months), end of the last day of month(now + months_future)]"""
    local_now = localize(now, tz_name)
    start = start_of_day(local_now, tz_name)
    if months_past:
        start_day = _same_day_months_back(local_now.date(), months_past)
        start = get_tz(tz_name).localize(datetime.combine(start_day, time.min))

    end = end_of_day(last_day_of_month(local_now.date(), months_future), tz_name)
    return SyncWindow(start, end)


def compute_cleanup_window(now: datetime, months_future: int, months_back: int = 3,
                           tz_name: Optional[str] = None) -> SyncWindow:
    """Wider window for duplicate searches: first day of month(now - months_back) onward"""
    local_now = localize(now, tz_name)
    year, month = _shift_month(local_now.year, local_now.month, -months_back)
    start = get_tz(tz_name).localize(datetime.combine(date(year, month, 1), time.min))
    end = end_of_day(last_day_of_month(local_now.date(), months_future), tz_name)
    return SyncWindow(start, end)
