# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Background Scheduler for automatic sync, with the serialization gate for all runs
"""
import logging
import threading
import time
from datetime import datetime, timedelta
from threading import Lock
from typing import Callable, Dict, Optional
import schedule

from sync.engine import SyncEngine
from sync.history import SyncHistory
from utils.timezone import format_local_time, get_local_time

logger = logging.getLogger(__name__)


class SyncScheduler:
    """Runs the sync every few minutes and keeps runs from overlapping"""

    def __init__(self, sync_engine: SyncEngine, interval_minutes: int = 15,
                 min_interval_seconds: int = 60, history: Optional[SyncHistory] = None,
                 poll_seconds: int = 30, clock: Optional[Callable[[], datetime]] = None):
        self.sync_engine = sync_engine
        self.interval_minutes = interval_minutes
        self.min_interval = timedelta(seconds=min_interval_seconds)
        self.history = history or SyncHistory(tz_name=sync_engine.config.timezone)
        self.poll_seconds = poll_seconds
        self.clock = clock or (lambda: get_local_time(sync_engine.config.timezone))
        self.tz_name = sync_engine.config.timezone

        self.jobs = schedule.Scheduler()
        self.scheduler_lock = Lock()
        self.scheduler_running = False
        self.scheduler_thread = None

        self.run_lock = Lock()
        self.last_run_started: Optional[datetime] = None

    def run_once(self, trigger: str = 'manual') -> Dict:
        """Run a sync unless one is in progress or one started too recently"""
        if not self.run_lock.acquire(blocking=False):
            logger.info(f"⏳ Sync already in progress, skipping {trigger} sync")
            return {'success': False, 'skipped': True, 'error': 'Sync already in progress'}

        try:
            now = self.clock()
            if self.last_run_started and now - self.last_run_started < self.min_interval:
                wait = (self.min_interval - (now - self.last_run_started)).total_seconds()
                logger.info(f"Skipping {trigger} sync; last run started {format_local_time(self.last_run_started, self.tz_name)}")
                return {
                    'success': False,
                    'skipped': True,
                    'error': f'Sync ran recently. Try again in {wait:.0f} seconds.'
                }

            self.last_run_started = now
            logger.info(f"🔄 Starting {trigger} sync at {format_local_time(now, self.tz_name)}")
            result = self.sync_engine.sync_calendars()
            self.history.add_entry(result)

            if result.get('success'):
                logger.info(f"✅ {trigger.capitalize()} sync completed: {result.get('message')}")
            else:
                logger.error(f"❌ {trigger.capitalize()} sync failed: {result.get('error')}")
            return result
        finally:
            self.run_lock.release()

    def start(self):
        """Start the scheduler"""
        with self.scheduler_lock:
            if self.scheduler_thread is None or not self.scheduler_thread.is_alive():
                logger.info(f"Starting scheduler thread at {format_local_time(self.clock(), self.tz_name)}...")
                self.scheduler_running = True
                self.scheduler_thread = threading.Thread(target=self._run_scheduler, daemon=True)
                self.scheduler_thread.start()
            else:
                logger.info("Scheduler already running")

    def stop(self):
        """Stop the scheduler"""
        with self.scheduler_lock:
            self.scheduler_running = False
        self.jobs.clear()
        logger.info(f"Stopping scheduler at {format_local_time(self.clock(), self.tz_name)}...")

    def is_running(self) -> bool:
        """Check if scheduler is running"""
        with self.scheduler_lock:
            return bool(self.scheduler_running and self.scheduler_thread and self.scheduler_thread.is_alive())

    def run_forever(self):
        """Block the calling thread running scheduled syncs"""
        with self.scheduler_lock:
            self.scheduler_running = True
        self._run_scheduler()

    def _run_scheduler(self):
        """Run the scheduler loop"""
        self.jobs.every(self.interval_minutes).minutes.do(self._scheduled_sync)
        logger.info(f"Scheduler started - sync every {self.interval_minutes} minutes")

        # First run right away instead of waiting a full interval
        self._scheduled_sync()

        while True:
            with self.scheduler_lock:
                if not self.scheduler_running:
                    break

            self.jobs.run_pending()
            time.sleep(self.poll_seconds)

        logger.info(f"Scheduler stopped at {format_local_time(self.clock(), self.tz_name)}")

    def _scheduled_sync(self):
        """Function called by the scheduler; errors must not kill the loop"""
        try:
            self.run_once(trigger='scheduled')
        except Exception as e:
            logger.error(f"❌ Scheduled sync failed: {e}", exc_info=True)

    def get_status(self) -> Dict:
        return {
            'running': self.is_running(),
            'interval_minutes': self.interval_minutes,
            'min_interval_seconds': int(self.min_interval.total_seconds()),
            'sync_in_progress': self.run_lock.locked(),
            'last_run_started': self.last_run_started.isoformat() if self.last_run_started else None,
            'next_run': self.jobs.next_run.isoformat() if self.jobs.jobs else None
        }
