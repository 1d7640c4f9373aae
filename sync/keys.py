# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Event keys - Canonical identity for desired and actual events
"""
from datetime import datetime
from typing import NamedTuple
import pytz


class EventKey(NamedTuple):
    start: datetime
    end: datetime
    title: str


def _normalize_instant(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        raise ValueError(f"Event keys need timezone-aware datetimes, got naive {dt!r}")
    # Providers report whole seconds; sheet serials can carry float noise
    return dt.astimezone(pytz.UTC).replace(microsecond=0)


def event_key(start: datetime, end: datetime, title: str) -> EventKey:
    """Key an event by its UTC start/end instants and exact title"""
    return EventKey(_normalize_instant(start), _normalize_instant(end), title)


def key_for(event) -> EventKey:
    """Key any object with start/end/title attributes"""
    return event_key(event.start, event.end, event.title)


def format_event_key(key: EventKey) -> str:
    """Render a key as 'start|end|title' with ISO UTC timestamps"""
    return f"{key.start.isoformat()}|{key.end.isoformat()}|{key.title}"
