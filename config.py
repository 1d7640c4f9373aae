# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Environment-based configuration for Sheet Calendar Sync
"""
import logging
import os
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Mapping, Optional
import pytz

logger = logging.getLogger(__name__)

# Environment Detection
ENVIRONMENT = os.environ.get('ENVIRONMENT', 'production')
DEBUG = ENVIRONMENT == 'development'

# Spreadsheet Configuration
SPREADSHEET_ID = os.environ.get('SPREADSHEET_ID', '')
SHEET_NAME = os.environ.get('SHEET_NAME', '')

# Google OAuth Configuration
GOOGLE_CLIENT_ID = os.environ.get('GOOGLE_CLIENT_ID', '')
GOOGLE_CLIENT_SECRET = os.environ.get('GOOGLE_CLIENT_SECRET', '')
TOKEN_CACHE_FILE = os.environ.get('TOKEN_CACHE_FILE', '/data/token_cache.json')

# Application Settings
PORT = int(os.environ.get('PORT', 5000))

# Sync Settings
DRY_RUN_MODE = os.environ.get('DRY_RUN_MODE', 'False').lower() == 'true'
SCHEDULER_ENABLED = os.environ.get('SCHEDULER_ENABLED', 'True').lower() == 'true'

# Sync Intervals
SYNC_INTERVAL_MIN = int(os.environ.get('SYNC_INTERVAL_MIN', 15))
MIN_SYNC_INTERVAL_SECONDS = int(os.environ.get('MIN_SYNC_INTERVAL_SECONDS', 60))

# Logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
STRUCTURED_LOGGING = os.environ.get('STRUCTURED_LOGGING', 'True').lower() == 'true'

# Development Settings
if DEBUG:
    LOG_LEVEL = 'DEBUG'
    DRY_RUN_MODE = True
    SYNC_INTERVAL_MIN = 1  # Faster syncs for development

# Rows past this many data rows are never read
MAX_ROWS = 2000

DEFAULT_EXCLUDED_TITLES = frozenset({'pto', '[res]', '[dev]'})


@dataclass(frozen=True)
class SyncConfig:
    """Static settings for one reconciliation run"""

    busy_event_title: str = 'Busy'
    calendar_id: str = 'primary'
    start_column: int = 1
    end_column: int = 2
    title_column: int = 3
    availability_column: int = 5
    header_rows: int = 1
    # Google Calendar colorId 9 is "Blueberry"
    busy_event_color: str = '9'
    sync_months_past: int = 0
    sync_months_future: int = 6
    excluded_titles: FrozenSet[str] = field(default_factory=lambda: DEFAULT_EXCLUDED_TITLES)
    min_free_event_days: int = 1
    max_free_title_length: int = 5
    timezone: str = 'America/Chicago'
    max_rows: int = MAX_ROWS
    dry_run: bool = False

    def __post_init__(self):
        # Exclusions are compared case-insensitively
        object.__setattr__(
            self, 'excluded_titles',
            frozenset(t.strip().lower() for t in self.excluded_titles)
        )

    @property
    def last_column(self) -> int:
        return max(self.start_column, self.end_column, self.title_column, self.availability_column)

    def with_overrides(self, **changes) -> 'SyncConfig':
        return replace(self, **changes)

    def validate(self) -> None:
        """Raise ConfigurationError for unusable settings, warn on risky ones"""
        from sync.errors import ConfigurationError

        if not self.calendar_id:
            raise ConfigurationError("CALENDAR_ID is not configured")
        if not self.busy_event_title:
            raise ConfigurationError("BUSY_EVENT_TITLE must not be empty")
        columns = [self.start_column, self.end_column, self.title_column, self.availability_column]
        if any(c < 1 for c in columns):
            raise ConfigurationError(f"Column positions are 1-based, got {columns}")
        if len(set(columns)) != len(columns):
            raise ConfigurationError(f"Column positions must be distinct, got {columns}")
        if self.header_rows < 0 or self.max_rows < 1:
            raise ConfigurationError("HEADER_ROWS must be >= 0 and MAX_ROWS >= 1")
        if self.sync_months_past < 0 or self.sync_months_future < 0:
            raise ConfigurationError("Sync month ranges must not be negative")
        if self.timezone not in pytz.all_timezones_set:
            raise ConfigurationError(f"Unknown timezone {self.timezone!r}")

        # Free events with the busy title would share its key space
        if len(self.busy_event_title) <= self.max_free_title_length:
            logger.warning(
                f"Busy title '{self.busy_event_title}' is short enough to be a free-event title; "
                f"a free row titled '{self.busy_event_title}' would be treated as a busy marker"
            )


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    return environ.get(name, str(default)).lower() == 'true'


def _env_titles(value: Optional[str]) -> FrozenSet[str]:
    if value is None:
        return DEFAULT_EXCLUDED_TITLES
    return frozenset(t.strip() for t in value.split(',') if t.strip())


def load_sync_config(environ: Optional[Mapping[str, str]] = None) -> SyncConfig:
    """Build the run configuration from environment variables"""
    if environ is None:
        environ = os.environ

    return SyncConfig(
        busy_event_title=environ.get('BUSY_EVENT_TITLE', 'Busy'),
        calendar_id=environ.get('CALENDAR_ID', 'primary'),
        start_column=int(environ.get('START_COLUMN', 1)),
        end_column=int(environ.get('END_COLUMN', 2)),
        title_column=int(environ.get('TITLE_COLUMN', 3)),
        availability_column=int(environ.get('AVAILABILITY_COLUMN', 5)),
        header_rows=int(environ.get('HEADER_ROWS', 1)),
        busy_event_color=environ.get('BUSY_EVENT_COLOR', '9'),
        sync_months_past=int(environ.get('SYNC_MONTHS_PAST', 0)),
        sync_months_future=int(environ.get('SYNC_MONTHS_FUTURE', 6)),
        excluded_titles=_env_titles(environ.get('EXCLUDED_TITLES')),
        min_free_event_days=int(environ.get('MIN_FREE_EVENT_DAYS', 1)),
        max_free_title_length=int(environ.get('MAX_FREE_TITLE_LENGTH', 5)),
        timezone=environ.get('SYNC_TIMEZONE', 'America/Chicago'),
        max_rows=int(environ.get('MAX_ROWS', MAX_ROWS)),
        dry_run=_env_bool(environ, 'DRY_RUN_MODE', DRY_RUN_MODE)
    )
