# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Row Parser - Turns raw sheet rows into desired calendar events
"""
import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Optional, Sequence

from config import SyncConfig
from models import DesiredEvent
from sync.errors import RowParseError
from utils.logger import StructuredLogger
from utils.timezone import add_calendar_days, localize

logger = logging.getLogger(__name__)
structured_logger = StructuredLogger(__name__)

# Day zero of Google Sheets / Excel serial dates
SERIAL_EPOCH = datetime(1899, 12, 30)

STRING_FORMATS = (
    '%m/%d/%Y %H:%M:%S',
    '%m/%d/%Y %H:%M',
    '%m/%d/%Y %I:%M %p',
    '%m/%d/%Y %I:%M:%S %p',
    '%m/%d/%Y',
    '%Y-%m-%d %H:%M',
)

BUSY = 'busy'
FREE = 'free'


def cell(row: Sequence[Any], column: int) -> Any:
    """1-based cell lookup; sources trim trailing empty cells"""
    index = column - 1
    if index < len(row):
        return row[index]
    return ''


def cell_text(value: Any) -> str:
    if value is None:
        return ''
    return str(value).strip()


def is_empty_cell(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == '')


def parse_cell_datetime(value: Any, tz_name: str) -> datetime:
    """Parse a sheet cell into an aware datetime in the sync timezone.

    Accepts datetime/date objects, spreadsheet serial numbers and
    ISO or US-style strings. Raises RowParseError for anything else.
    """
    if is_empty_cell(value):
        raise RowParseError("empty date cell")

    if isinstance(value, datetime):
        return localize(value, tz_name)

    if isinstance(value, date):
        return localize(datetime.combine(value, time.min), tz_name)

    if isinstance(value, bool):
        raise RowParseError(f"not a date: {value!r}")

    if isinstance(value, (int, float)):
        if value != value or value in (float('inf'), float('-inf')):
            raise RowParseError(f"not a date: {value!r}")
        try:
            naive = SERIAL_EPOCH + timedelta(seconds=round(value * 86400))
        except OverflowError as e:
            raise RowParseError(f"serial date out of range: {value!r}") from e
        return localize(naive, tz_name)

    if isinstance(value, str):
        text = value.strip()
        try:
            return localize(datetime.fromisoformat(text.replace('Z', '+00:00')), tz_name)
        except ValueError:
            pass
        for fmt in STRING_FORMATS:
            try:
                return localize(datetime.strptime(text, fmt), tz_name)
            except ValueError:
                continue
        raise RowParseError(f"unrecognized date: {text!r}")

    raise RowParseError(f"unsupported cell type {type(value).__name__}")


def is_excluded_title(title: str, config: SyncConfig) -> bool:
    return title.lower() in config.excluded_titles


def _build_event(row: Sequence[Any], config: SyncConfig) -> Optional[DesiredEvent]:
    start = parse_cell_datetime(cell(row, config.start_column), config.timezone)
    end = parse_cell_datetime(cell(row, config.end_column), config.timezone)
    title = cell_text(cell(row, config.title_column))
    availability = cell_text(cell(row, config.availability_column)).lower()

    if is_excluded_title(title, config):
        logger.debug(f"Skipping excluded title '{title}'")
        return None

    if availability == BUSY:
        return DesiredEvent(start=start, end=end, title=config.busy_event_title)

    if availability == FREE:
        if end - start < timedelta(days=config.min_free_event_days):
            return None
        if len(title) > config.max_free_title_length:
            return None
        # Stored end is one calendar day later so the block covers the last day
        calendar_end = add_calendar_days(end, 1, config.timezone)
        return DesiredEvent(start=start, end=calendar_end, title=title)

    return None


def parse_row(row: Sequence[Any], config: SyncConfig) -> Optional[DesiredEvent]:
    """Parse one sheet row; returns None for rejected or malformed rows, never raises"""
    try:
        return _build_event(row, config)
    except RowParseError as e:
        structured_logger.log_sync_event('row_parse_failed', {
            'row': [cell_text(c) for c in row],
            'error': str(e)
        })
        return None
    except (TypeError, ValueError, OverflowError) as e:
        structured_logger.log_sync_event('row_parse_failed', {
            'row': [cell_text(c) for c in row],
            'error': f"{type(e).__name__}: {e}"
        })
        return None
