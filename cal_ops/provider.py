# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Google Calendar provider - CalendarProvider backed by the reader and writer
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from cal_ops.reader import CalendarReader
from cal_ops.writer import CalendarWriter
from models import OPAQUE, TRANSPARENT, CalendarEvent, CalendarProvider
from utils.timezone import parse_google_datetime, to_rfc3339

logger = logging.getLogger(__name__)


def event_from_google(item: Dict, tz_name: Optional[str] = None) -> Optional[CalendarEvent]:
    """Convert a Calendar API event resource; None when it has no usable times"""
    start = parse_google_datetime(item.get('start'), tz_name)
    end = parse_google_datetime(item.get('end'), tz_name)
    if start is None or end is None:
        logger.warning(f"Skipping event without parseable times: {item.get('summary')} ({item.get('id')})")
        return None

    return CalendarEvent(
        id=item.get('id', ''),
        title=item.get('summary', ''),
        start=start,
        end=end,
        color_id=item.get('colorId', ''),
        transparency=TRANSPARENT if item.get('transparency') == 'transparent' else OPAQUE,
        raw=item
    )


class GoogleCalendarProvider(CalendarProvider):
    """Google Calendar API calendar provider"""

    def __init__(self, auth_manager, calendar_id: str, tz_name: Optional[str] = None):
        self.calendar_id = calendar_id
        self.tz_name = tz_name
        self.reader = CalendarReader(auth_manager)
        self.writer = CalendarWriter(auth_manager)

    def get_calendar(self, calendar_id: str) -> Dict:
        return self.reader.get_calendar(calendar_id)

    def _to_events(self, items: List[Dict]) -> List[CalendarEvent]:
        events = []
        for item in items:
            if item.get('status') == 'cancelled':
                continue
            event = event_from_google(item, self.tz_name)
            if event is not None:
                events.append(event)
        return events

    def list_events(self, start: datetime, end: datetime) -> List[CalendarEvent]:
        return self._to_events(self.reader.get_calendar_events(self.calendar_id, start, end))

    def search_events(self, start: datetime, end: datetime, title_filter: str) -> List[CalendarEvent]:
        return self._to_events(self.reader.get_calendar_events(self.calendar_id, start, end, query=title_filter))

    def create_event(self, title: str, start: datetime, end: datetime) -> CalendarEvent:
        body = {
            'summary': title,
            'start': {'dateTime': to_rfc3339(start)},
            'end': {'dateTime': to_rfc3339(end)}
        }
        created = self.writer.create_event(self.calendar_id, body)
        return event_from_google(created, self.tz_name) or CalendarEvent(
            id=created.get('id', ''), title=title, start=start, end=end, raw=created
        )

    def delete_event(self, event: CalendarEvent) -> None:
        self.writer.delete_event(self.calendar_id, event.id)

    def set_color(self, event: CalendarEvent, color_id: str) -> None:
        self.writer.patch_event(self.calendar_id, event.id, {'colorId': color_id})
        event.color_id = color_id

    def set_transparency(self, event: CalendarEvent, transparency: str) -> None:
        self.writer.patch_event(self.calendar_id, event.id, {'transparency': transparency.lower()})
        event.transparency = TRANSPARENT if transparency.upper() == TRANSPARENT else OPAQUE
