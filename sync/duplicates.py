# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Duplicate Collapser - One-time remediation for repeated free-block events

For every short free-event title in the sheet, searches the calendar from
three months back through the sync horizon, groups exact title matches by
local start date and keeps only the first event of each group. Matching
ignores end time and transparency, so this is deliberately broader than the
main sync and is meant to be run by hand, not on a schedule.
"""
import logging
from collections import OrderedDict
from datetime import datetime
from typing import Callable, Dict, List, Optional

from config import SyncConfig
from models import CalendarEvent, CalendarProvider, RowSource
from sync.desired import collect_free_titles
from sync.errors import ProviderMutationError
from sync.window import compute_cleanup_window
from utils.logger import StructuredLogger
from utils.timezone import get_local_time, localize

logger = logging.getLogger(__name__)

SEARCH_MONTHS_BACK = 3


class DuplicateCollapser:
    """Removes extra copies of managed free-block events"""

    def __init__(self, config: SyncConfig, row_source: RowSource, provider: CalendarProvider,
                 clock: Optional[Callable[[], datetime]] = None, dry_run: bool = False):
        self.config = config
        self.row_source = row_source
        self.provider = provider
        self.clock = clock or (lambda: get_local_time(config.timezone))
        self.dry_run = dry_run
        self.structured_logger = StructuredLogger(__name__, config.timezone)

    def cleanup_duplicates(self) -> Dict:
        """
        Main cleanup function that removes duplicate events

        Returns:
            Dict with cleanup statistics
        """
        logger.info("🧹 Starting duplicate event cleanup...")

        titles = sorted(collect_free_titles(self.row_source.read_rows(), self.config))
        logger.info(f"Cleanup: Will check for duplicates with titles: {', '.join(titles)}")

        self.provider.get_calendar(self.config.calendar_id)
        window = compute_cleanup_window(self.clock(), self.config.sync_months_future,
                                        SEARCH_MONTHS_BACK, self.config.timezone)

        stats = {
            'titles_checked': len(titles),
            'duplicate_groups': 0,
            'deleted': 0,
            'deletion_errors': 0,
            'deleted_events': [],
            'dry_run': self.dry_run
        }

        for title in titles:
            events = self.provider.search_events(window.start, window.end, title)
            for day, group in self.group_by_start_date(events, title).items():
                if len(group) < 2:
                    continue
                stats['duplicate_groups'] += 1
                logger.info(
                    f"Cleanup: Found {len(group)} duplicates for '{title}' starting on {day}. Deleting extras."
                )
                self._delete_extras(group[1:], stats)

        verb = 'Would delete' if self.dry_run else 'Deleted'
        stats['success'] = True
        stats['message'] = f"Cleanup complete. {verb} {stats['deleted']} duplicate events."
        self.structured_logger.log_sync_event('cleanup_completed', {
            'titles_checked': stats['titles_checked'],
            'duplicate_groups': stats['duplicate_groups'],
            'deleted': stats['deleted'],
            'deletion_errors': stats['deletion_errors'],
            'dry_run': self.dry_run
        })
        logger.info(stats['message'])
        return stats

    def group_by_start_date(self, events: List[CalendarEvent], title: str) -> Dict[str, List[CalendarEvent]]:
        """Exact title matches grouped by local start date, in provider order"""
        groups = OrderedDict()
        for event in events:
            if event.title != title:
                continue
            day = localize(event.start, self.config.timezone).date().isoformat()
            groups.setdefault(day, []).append(event)
        return groups

    def _delete_extras(self, extras: List[CalendarEvent], stats: Dict):
        for event in extras:
            details = {'title': event.title, 'start': event.start.isoformat(), 'event_id': event.id}
            if self.dry_run:
                logger.info(f"   🧪 DRY RUN: Would delete event ID {event.id}")
                stats['deleted'] += 1
                stats['deleted_events'].append({**details, 'action': 'would_delete'})
                continue
            try:
                self.provider.delete_event(event)
            except ProviderMutationError as e:
                stats['deletion_errors'] += 1
                stats['deleted_events'].append({**details, 'action': 'failed', 'error': str(e)})
                self.structured_logger.log_sync_event('duplicate_delete_failed', {**details, 'error': str(e)})
                continue
            stats['deleted'] += 1
            stats['deleted_events'].append({**details, 'action': 'deleted'})
            self.structured_logger.log_sync_event('duplicate_deleted', details)
