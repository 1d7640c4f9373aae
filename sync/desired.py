# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Desired Set Builder - The set of events the sheet says should exist
"""
import logging
from typing import Any, Dict, List, Sequence, Set

from config import SyncConfig
from models import DesiredEvent
from sync.errors import RowParseError
from sync.keys import EventKey, key_for
from sync.rows import FREE, cell, is_empty_cell, parse_cell_datetime, parse_row
from sync.window import SyncWindow

logger = logging.getLogger(__name__)


def non_empty_rows(rows: Sequence[Sequence[Any]], config: SyncConfig) -> List[Sequence[Any]]:
    """Rows with something in the start column; everything else is not data"""
    return [row for row in rows if not is_empty_cell(cell(row, config.start_column))]


def rows_in_window(rows: Sequence[Sequence[Any]], window: SyncWindow, config: SyncConfig) -> List[Sequence[Any]]:
    """Keep rows whose start cell falls inside the window"""
    selected = []
    for row in rows:
        try:
            start = parse_cell_datetime(cell(row, config.start_column), config.timezone)
        except RowParseError:
            # Left for parse_row to report
            selected.append(row)
            continue
        if window.contains(start):
            selected.append(row)
    return selected


def build_desired_events(rows: Sequence[Sequence[Any]], window: SyncWindow,
                         config: SyncConfig) -> Dict[EventKey, DesiredEvent]:
    """Deduplicated desired events for every parseable row in the window"""
    desired: Dict[EventKey, DesiredEvent] = {}

    for row in rows_in_window(non_empty_rows(rows, config), window, config):
        event = parse_row(row, config)
        if event is None:
            continue
        desired.setdefault(key_for(event), event)

    logger.info(f"Found {len(desired)} managed events that should exist based on the sheet")
    return desired


def collect_free_titles(rows: Sequence[Sequence[Any]], config: SyncConfig) -> Set[str]:
    """Distinct titles of free events anywhere in the sheet, ignoring the sync window"""
    titles = set()
    for row in non_empty_rows(rows, config):
        availability = str(cell(row, config.availability_column) or '').strip().lower()
        if availability != FREE:
            continue
        event = parse_row(row, config)
        if event is not None:
            titles.add(event.title)
    return titles
