# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Sync Engine - Mirror sheet rows onto the calendar inside the sync window
"""
import logging
import traceback
from datetime import datetime
from enum import Enum
from threading import Lock
from typing import Callable, Dict, Optional

from config import SyncConfig
from models import TRANSPARENT, CalendarProvider, RowSource
from sync.classifier import managed_events_by_key
from sync.desired import build_desired_events, non_empty_rows
from sync.diff import SyncDiff, compute_diff
from sync.errors import ProviderMutationError, SyncError
from sync.keys import format_event_key, key_for
from sync.window import compute_sync_window
from utils.logger import StructuredLogger
from utils.timezone import format_local_time, get_local_time

logger = logging.getLogger(__name__)


class SyncPhase(Enum):
    FETCH = "fetch"
    BUILD_DESIRED = "build_desired"
    FETCH_ACTUAL = "fetch_actual"
    CLASSIFY = "classify"
    DIFF = "diff"
    APPLY_DELETES = "apply_deletes"
    APPLY_UPDATES = "apply_updates"
    APPLY_CREATES = "apply_creates"
    DONE = "done"
    ABORTED = "aborted"


class SyncEngine:
    """Core engine for sheet-to-calendar reconciliation"""

    def __init__(self, config: SyncConfig, row_source: RowSource, provider: CalendarProvider,
                 clock: Optional[Callable[[], datetime]] = None):
        self.config = config
        self.row_source = row_source
        self.provider = provider
        self.clock = clock or (lambda: get_local_time(config.timezone))

        self.state_lock = Lock()
        self.last_sync_time = None
        self.last_sync_result = {"success": False, "message": "Not synced yet"}
        self.sync_state = {
            'in_progress': False,
            'phase': None,
            'progress': 0,
            'total': 0
        }

        self.structured_logger = StructuredLogger(__name__, config.timezone)

    def sync_calendars(self) -> Dict:
        """Run one reconciliation and report the outcome as a summary dict"""
        start_time = self.clock()
        try:
            result = self.run()
        except SyncError as e:
            duration = (self.clock() - start_time).total_seconds()
            result = {
                'success': False,
                'message': f'Sync failed: {e}',
                'error': str(e),
                'error_type': type(e).__name__,
                'created': 0,
                'updated': 0,
                'deleted': 0,
                'duration': duration
            }
            self.structured_logger.log_sync_event('sync_failed', {
                'error': str(e),
                'error_type': type(e).__name__,
                'duration_seconds': duration
            })
        except Exception as e:
            duration = (self.clock() - start_time).total_seconds()
            result = {
                'success': False,
                'message': f'Sync failed: {e}',
                'error': str(e),
                'error_type': type(e).__name__,
                'traceback': traceback.format_exc(),
                'created': 0,
                'updated': 0,
                'deleted': 0,
                'duration': duration
            }
            logger.exception("💥 Unexpected sync error")

        with self.state_lock:
            self.last_sync_time = self.clock()
            self.last_sync_result = result
        return result

    def run(self) -> Dict:
        """Run one reconciliation; fatal errors propagate to the caller"""
        try:
            return self._reconcile()
        finally:
            self._set_phase(None, in_progress=False)

    def _reconcile(self) -> Dict:
        start_time = self.clock()
        now = start_time
        config = self.config

        self._set_phase(SyncPhase.FETCH, in_progress=True)
        self.structured_logger.log_sync_event('sync_started', {
            'calendar_id': config.calendar_id,
            'dry_run': config.dry_run
        })

        rows = non_empty_rows(self.row_source.read_rows(), config)
        logger.info(f"Processing {len(rows)} non-empty rows")

        if not rows:
            # Nothing to mirror; skip the calendar round-trip entirely
            self._set_phase(SyncPhase.ABORTED)
            self.structured_logger.log_sync_event('sync_aborted', {'reason': 'no data rows'})
            return self._result(now, created=0, updated=0, deleted=0, failed=0,
                                message='No data to process', aborted=True)

        self._set_phase(SyncPhase.BUILD_DESIRED)
        window = compute_sync_window(now, config.sync_months_future, config.sync_months_past, config.timezone)
        logger.info(
            f"Syncing events between {format_local_time(window.start, config.timezone)} "
            f"and {format_local_time(window.end, config.timezone)}; "
            f"events starting before {format_local_time(now, config.timezone)} will not be deleted"
        )
        desired = build_desired_events(rows, window, config)

        self._set_phase(SyncPhase.FETCH_ACTUAL)
        self.provider.get_calendar(config.calendar_id)
        existing = self.provider.list_events(window.start, window.end)
        logger.info(f"Found {len(existing)} total existing events on the calendar")

        self._set_phase(SyncPhase.CLASSIFY)
        managed = managed_events_by_key(existing, config, self.provider.get_transparency)
        logger.info(f"{sum(len(v) for v in managed.values())} of them are managed by this sync")

        self._set_phase(SyncPhase.DIFF)
        diff = compute_diff(desired, managed, config, self.provider.get_color)
        if diff.is_empty:
            logger.info("✅ Calendar already in sync with the sheet")
        else:
            logger.info(f"📋 SYNC PLAN: {diff.summary()}")

        if config.dry_run:
            logger.info("🔍 DRY RUN MODE - No actual changes will be made")
            deletable = [e for e in diff.to_delete if e.start > now]
            self._set_phase(SyncPhase.DONE)
            return self._result(now, created=len(diff.to_create), updated=len(diff.to_recolor),
                                deleted=len(deletable), failed=0,
                                message='Dry run completed - no changes made', dry_run=True)

        counts = self._apply(diff, now)
        self._set_phase(SyncPhase.DONE)

        result = self._result(now, message=(
            f"Sync complete. Created: {counts['created']}, Updated: {counts['updated']}, "
            f"Deleted: {counts['deleted']}."
        ), **counts)
        self.structured_logger.log_sync_event('sync_completed', {
            'created': counts['created'],
            'updated': counts['updated'],
            'deleted': counts['deleted'],
            'failed': counts['failed'],
            'skipped_past': counts['skipped_past'],
            'duration_seconds': result['duration']
        })
        logger.info(result['message'])
        return result

    def _apply(self, diff: SyncDiff, now: datetime) -> Dict[str, int]:
        counts = {'created': 0, 'updated': 0, 'deleted': 0, 'failed': 0, 'skipped_past': 0}
        self.sync_state['total'] = len(diff.to_delete) + len(diff.to_recolor) + len(diff.to_create)
        self.sync_state['progress'] = 0

        self._set_phase(SyncPhase.APPLY_DELETES)
        for event in diff.to_delete:
            self.sync_state['progress'] += 1
            details = {'title': event.title, 'start': event.start.isoformat(), 'event_id': event.id}
            if event.start <= now:
                # History stays as it was, even if the sheet row changed
                counts['skipped_past'] += 1
                self.structured_logger.log_sync_event('past_event_skipped', details)
                continue
            try:
                self.provider.delete_event(event)
            except ProviderMutationError as e:
                counts['failed'] += 1
                self._log_mutation_failure('delete', details, e)
                continue
            counts['deleted'] += 1
            self.structured_logger.log_sync_event('event_deleted', details)

        self._set_phase(SyncPhase.APPLY_UPDATES)
        for event in diff.to_recolor:
            self.sync_state['progress'] += 1
            details = {'title': event.title, 'start': event.start.isoformat(), 'event_id': event.id,
                       'old_color': self.provider.get_color(event), 'new_color': self.config.busy_event_color}
            try:
                self.provider.set_color(event, self.config.busy_event_color)
            except ProviderMutationError as e:
                counts['failed'] += 1
                self._log_mutation_failure('recolor', details, e)
                continue
            counts['updated'] += 1
            self.structured_logger.log_sync_event('event_recolored', details)

        self._set_phase(SyncPhase.APPLY_CREATES)
        for desired in diff.to_create:
            self.sync_state['progress'] += 1
            if self._create(desired):
                counts['created'] += 1
            else:
                counts['failed'] += 1

        return counts

    def _create(self, desired) -> bool:
        details = {'title': desired.title, 'start': desired.start.isoformat(),
                   'end': desired.end.isoformat(), 'key': format_event_key(key_for(desired))}
        try:
            event = self.provider.create_event(desired.title, desired.start, desired.end)
        except ProviderMutationError as e:
            self._log_mutation_failure('create', details, e)
            return False

        details['event_id'] = event.id
        if desired.title == self.config.busy_event_title:
            try:
                self.provider.set_color(event, self.config.busy_event_color)
            except ProviderMutationError as e:
                logger.warning(f"Could not set color for new event '{desired.title}': {e}")
        else:
            try:
                self.provider.set_transparency(event, TRANSPARENT)
            except ProviderMutationError as e:
                logger.warning(
                    f"Could not set transparency for event '{desired.title}'. "
                    f"The event was still created: {e}"
                )

        self.structured_logger.log_sync_event('event_created', details)
        return True

    def _log_mutation_failure(self, operation: str, details: Dict, error: ProviderMutationError):
        self.structured_logger.log_sync_event('event_mutation_failed', {
            'operation': operation,
            'error': str(error),
            'status_code': error.status_code,
            **details
        })

    def _result(self, started: datetime, message: str, created: int, updated: int, deleted: int,
                failed: int, skipped_past: int = 0, aborted: bool = False, dry_run: bool = False) -> Dict:
        return {
            'success': True,
            'message': message,
            'created': created,
            'updated': updated,
            'deleted': deleted,
            'failed_operations': failed,
            'skipped_past': skipped_past,
            'aborted': aborted,
            'dry_run': dry_run,
            'duration': (self.clock() - started).total_seconds()
        }

    def _set_phase(self, phase: Optional[SyncPhase], in_progress: Optional[bool] = None):
        with self.state_lock:
            self.sync_state['phase'] = phase.value if phase else None
            if in_progress is not None:
                self.sync_state['in_progress'] = in_progress
                if not in_progress:
                    self.sync_state['progress'] = 0
                    self.sync_state['total'] = 0

    def get_status(self) -> Dict:
        """Get current sync status"""
        with self.state_lock:
            return {
                'last_sync_time': self.last_sync_time.isoformat() if self.last_sync_time else None,
                'last_sync_time_display': format_local_time(self.last_sync_time, self.config.timezone),
                'last_sync_result': self.last_sync_result,
                'sync_in_progress': self.sync_state['in_progress'],
                'sync_progress': dict(self.sync_state),
                'calendar_id': self.config.calendar_id,
                'dry_run': self.config.dry_run,
                'timezone': self.config.timezone
            }
