#!/usr/bin/env python3
# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Sheet to Calendar Sync Script

Usage:
    python run_sync.py [--dry-run] [--verbose] [--csv PATH] [--schedule]

Options:
    --dry-run    Report the planned changes without touching the calendar
    --verbose    Show detailed logging
    --csv PATH   Read rows from a CSV export instead of the Google Sheet
    --schedule   Keep running, syncing every SYNC_INTERVAL_MIN minutes
"""

import argparse
import json
import logging
import sys

import config
from components import build_engine
from sync.errors import SyncError
from sync.scheduler import SyncScheduler
from utils.logger import setup_logging

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Mirror busy/free rows from the sheet onto the calendar')
    parser.add_argument('--dry-run', action='store_true', help='Report planned changes without applying them')
    parser.add_argument('--verbose', action='store_true', help='Show detailed logging')
    parser.add_argument('--csv', metavar='PATH', help='Read rows from a CSV export instead of the Google Sheet')
    parser.add_argument('--schedule', action='store_true',
                        help=f'Sync every {config.SYNC_INTERVAL_MIN} minutes until interrupted')

    args = parser.parse_args(argv)

    sync_config = config.load_sync_config()
    if args.dry_run:
        sync_config = sync_config.with_overrides(dry_run=True)
    setup_logging('DEBUG' if args.verbose else config.LOG_LEVEL, config.STRUCTURED_LOGGING, sync_config.timezone)

    try:
        engine = build_engine(sync_config, csv_path=args.csv)
    except SyncError as e:
        logger.error(f"❌ Could not start sync: {type(e).__name__}: {e}")
        return 1

    if args.schedule:
        scheduler = SyncScheduler(engine, config.SYNC_INTERVAL_MIN, config.MIN_SYNC_INTERVAL_SECONDS)
        try:
            scheduler.run_forever()
        except KeyboardInterrupt:
            scheduler.stop()
        return 0

    result = engine.sync_calendars()
    print(json.dumps({k: result.get(k) for k in ('success', 'created', 'updated', 'deleted', 'message')}))
    return 0 if result.get('success') else 1


if __name__ == "__main__":
    sys.exit(main())
