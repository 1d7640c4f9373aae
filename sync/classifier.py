# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Event Classifier - Decide which calendar events the sync owns
"""
from collections import defaultdict
from datetime import timedelta
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from config import SyncConfig
from models import TRANSPARENT, CalendarEvent
from sync.keys import EventKey, key_for


class EventKind(Enum):
    """How the sync treats a fetched event"""
    BUSY = "busy"          # Busy marker, matched by title
    FREE = "free"          # Multi-day transparent block
    FOREIGN = "foreign"    # Not ours, never touched


def classify_event(event: CalendarEvent, config: SyncConfig,
                   transparency_of: Optional[Callable[[CalendarEvent], str]] = None) -> EventKind:
    """Transparency is read through transparency_of when given, usually the provider's getter"""
    if event.title == config.busy_event_title:
        return EventKind.BUSY

    is_multi_day = event.duration >= timedelta(days=config.min_free_event_days)
    if not is_multi_day:
        return EventKind.FOREIGN

    transparency = transparency_of(event) if transparency_of else event.transparency
    if transparency == TRANSPARENT:
        return EventKind.FREE

    return EventKind.FOREIGN


def managed_events_by_key(events: Iterable[CalendarEvent], config: SyncConfig,
                          transparency_of: Optional[Callable[[CalendarEvent], str]] = None
                          ) -> Dict[EventKey, List[CalendarEvent]]:
    """Group managed events by key; duplicates on the calendar share a key"""
    managed = defaultdict(list)
    for event in events:
        if classify_event(event, config, transparency_of) is EventKind.FOREIGN:
            continue
        managed[key_for(event)].append(event)
    return dict(managed)
