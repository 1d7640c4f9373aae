"""
Shared fixtures - in-memory sheet rows and calendar for sync tests
"""

import pytest
from datetime import datetime
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytz

from config import SyncConfig
from models import OPAQUE, TRANSPARENT, CalendarEvent, CalendarProvider, RowSource
from sync.errors import ConfigurationError, ProviderMutationError

CHICAGO = pytz.timezone('America/Chicago')

# Tuesday morning; the default window runs through 2025-11-30
NOW = CHICAGO.localize(datetime(2025, 5, 20, 9, 0))

MUTATIONS = ('create_event', 'delete_event', 'set_color', 'set_transparency')


def local(*args):
    """Aware America/Chicago datetime"""
    return CHICAGO.localize(datetime(*args))


class ListRowSource(RowSource):
    """Row source backed by a list, like an already-fetched sheet"""

    def __init__(self, rows=None):
        self.rows = rows or []
        self.reads = 0

    def read_rows(self):
        self.reads += 1
        return [list(row) for row in self.rows]


class FakeCalendarProvider(CalendarProvider):
    """In-memory calendar with call recording and failure injection"""

    def __init__(self):
        self.events = {}
        self.calls = []
        self.failing = set()  # (operation, title) pairs that raise ProviderMutationError
        self.fetch_error = None
        self.missing_calendar = False
        self._next_id = 1

    def add_event(self, title, start, end, color_id='', transparency=OPAQUE):
        event = CalendarEvent(id=f"evt{self._next_id}", title=title, start=start, end=end,
                              color_id=color_id, transparency=transparency)
        self._next_id += 1
        self.events[event.id] = event
        return event

    def _check(self, operation, title):
        if (operation, title) in self.failing:
            raise ProviderMutationError(f"{operation} rejected for {title}", status_code=500)

    @property
    def mutations(self):
        return [call for call in self.calls if call[0] in MUTATIONS]

    def get_calendar(self, calendar_id):
        self.calls.append(('get_calendar', calendar_id))
        if self.missing_calendar:
            raise ConfigurationError(f"Calendar '{calendar_id}' not found")
        return {'id': calendar_id, 'summary': 'Test Calendar'}

    def list_events(self, start, end):
        self.calls.append(('list_events', start, end))
        if self.fetch_error:
            raise self.fetch_error
        return [e for e in self.events.values() if e.start <= end and e.end >= start]

    def search_events(self, start, end, title_filter):
        self.calls.append(('search_events', title_filter))
        if self.fetch_error:
            raise self.fetch_error
        return [e for e in self.events.values()
                if e.start <= end and e.end >= start and title_filter.lower() in e.title.lower()]

    def create_event(self, title, start, end):
        self.calls.append(('create_event', title, start, end))
        self._check('create', title)
        return self.add_event(title, start, end)

    def delete_event(self, event):
        self.calls.append(('delete_event', event.id))
        self._check('delete', event.title)
        self.events.pop(event.id, None)

    def set_color(self, event, color_id):
        self.calls.append(('set_color', event.id, color_id))
        self._check('color', event.title)
        event.color_id = color_id

    def set_transparency(self, event, transparency):
        self.calls.append(('set_transparency', event.id, transparency))
        self._check('transparency', event.title)
        event.transparency = TRANSPARENT if transparency == TRANSPARENT else OPAQUE

    def titles(self):
        return sorted(e.title for e in self.events.values())


def busy_row(start, end, title='Meeting'):
    return [start, end, title, '', 'Busy']


def free_row(start, end, title='VAC'):
    return [start, end, title, '', 'Free']


@pytest.fixture
def sync_config():
    return SyncConfig()


@pytest.fixture
def provider():
    return FakeCalendarProvider()


@pytest.fixture
def clock():
    return lambda: NOW
