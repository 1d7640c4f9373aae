# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Timezone utilities for converting between UTC and the sync's local timezone
"""
from datetime import date, datetime, time, timedelta
from typing import Optional
import pytz

DEFAULT_TIMEZONE = 'America/Chicago'


def get_tz(tz_name: Optional[str] = None):
    return pytz.timezone(tz_name or DEFAULT_TIMEZONE)


def get_local_time(tz_name: Optional[str] = None) -> datetime:
    """Get current time in the configured timezone"""
    return datetime.now(get_tz(tz_name))


def localize(dt: datetime, tz_name: Optional[str] = None) -> datetime:
    """Attach the local timezone to a naive datetime; convert aware ones"""
    tz = get_tz(tz_name)
    if dt.tzinfo is None:
        return tz.localize(dt)
    return dt.astimezone(tz)


def start_of_day(dt: datetime, tz_name: Optional[str] = None) -> datetime:
    """Local midnight of the day containing dt"""
    local = localize(dt, tz_name)
    return get_tz(tz_name).localize(datetime.combine(local.date(), time.min))


def end_of_day(day: date, tz_name: Optional[str] = None) -> datetime:
    """Last representable instant of a local calendar day"""
    return get_tz(tz_name).localize(datetime.combine(day, time.max))


def add_calendar_days(dt: datetime, days: int, tz_name: Optional[str] = None) -> datetime:
    """Shift by whole calendar days, keeping the local wall-clock time across DST"""
    local = localize(dt, tz_name)
    shifted = local.replace(tzinfo=None) + timedelta(days=days)
    return get_tz(tz_name).localize(shifted)


def format_local_time(dt: Optional[datetime], tz_name: Optional[str] = None, include_timezone: bool = True) -> str:
    """Format datetime in local time for display"""
    if dt is None:
        return "Never"

    if isinstance(dt, datetime):
        local_dt = localize(dt, tz_name)
        if include_timezone:
            return local_dt.strftime('%b %d, %Y at %I:%M %p %Z')
        return local_dt.strftime('%b %d, %Y at %I:%M %p')

    return str(dt)


def parse_google_datetime(field: dict, tz_name: Optional[str] = None) -> Optional[datetime]:
    """Convert a Google Calendar {"dateTime"|"date", "timeZone"} field into an aware UTC datetime.

    Args:
        field: the event's 'start' or 'end' object
        tz_name: zone used for all-day dates and offset-less times
    Returns:
        datetime in UTC or None if missing.
    """
    if not field:
        return None

    dt_str = field.get('dateTime')
    if dt_str:
        try:
            parsed = datetime.fromisoformat(dt_str.replace('Z', '+00:00'))
        except ValueError:
            return None
        if parsed.tzinfo is not None:
            return parsed.astimezone(pytz.UTC)
        zone = field.get('timeZone') or tz_name
        try:
            return get_tz(zone).localize(parsed).astimezone(pytz.UTC)
        except pytz.UnknownTimeZoneError:
            return get_tz(tz_name).localize(parsed).astimezone(pytz.UTC)

    date_str = field.get('date')
    if date_str:
        try:
            day = date.fromisoformat(date_str)
        except ValueError:
            return None
        return get_tz(tz_name).localize(datetime.combine(day, time.min)).astimezone(pytz.UTC)

    return None


def to_rfc3339(dt: datetime) -> str:
    """Render an aware datetime as an RFC 3339 UTC string"""
    return dt.astimezone(pytz.UTC).strftime('%Y-%m-%dT%H:%M:%SZ')
