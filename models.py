# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Data models and collaborator interfaces for Sheet Calendar Sync
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

TRANSPARENT = 'TRANSPARENT'
OPAQUE = 'OPAQUE'

# =============================================================================
# EVENTS
# =============================================================================


@dataclass(frozen=True)
class DesiredEvent:
    """An event the sheet says should exist on the calendar"""
    start: datetime
    end: datetime
    title: str


@dataclass
class CalendarEvent:
    """Provider-neutral view of an event fetched from the calendar"""
    id: str
    title: str
    start: datetime
    end: datetime
    color_id: str = ''
    transparency: str = OPAQUE
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def duration(self):
        return self.end - self.start


# =============================================================================
# COLLABORATOR INTERFACES
# =============================================================================

class RowSource:
    """Abstract base class for the tabular source of truth"""

    def read_rows(self) -> List[List[Any]]:
        """Return data rows (header rows already skipped) as lists of cells"""
        raise NotImplementedError


class CalendarProvider:
    """Abstract base class for calendar providers"""

    def get_calendar(self, calendar_id: str) -> Dict:
        """Return calendar metadata; raise ConfigurationError if it does not exist"""
        raise NotImplementedError

    def list_events(self, start: datetime, end: datetime) -> List[CalendarEvent]:
        """Events overlapping [start, end]"""
        raise NotImplementedError

    def search_events(self, start: datetime, end: datetime, title_filter: str) -> List[CalendarEvent]:
        """Events overlapping [start, end] matching a free-text filter"""
        raise NotImplementedError

    def create_event(self, title: str, start: datetime, end: datetime) -> CalendarEvent:
        raise NotImplementedError

    def delete_event(self, event: CalendarEvent) -> None:
        raise NotImplementedError

    def set_color(self, event: CalendarEvent, color_id: str) -> None:
        raise NotImplementedError

    def set_transparency(self, event: CalendarEvent, transparency: str) -> None:
        raise NotImplementedError

    def get_color(self, event: CalendarEvent) -> str:
        return event.color_id or ''

    def get_transparency(self, event: CalendarEvent) -> str:
        return TRANSPARENT if event.transparency == TRANSPARENT else OPAQUE
