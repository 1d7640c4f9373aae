#!/usr/bin/env python3
# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Duplicate Event Cleanup Script

Removes duplicate free-block events left behind on the calendar. For every
short free-event title in the sheet it groups same-titled events by start
date and keeps the first one.

Usage:
    python cleanup_duplicates.py [--dry-run] [--verbose] [--csv PATH]

Options:
    --dry-run    Show what would be deleted without actually deleting
    --verbose    Show detailed logging
    --csv PATH   Read rows from a CSV export instead of the Google Sheet
"""

import argparse
import logging
import sys

import config
from components import build_collapser
from sync.errors import SyncError
from utils.logger import setup_logging

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main function"""
    parser = argparse.ArgumentParser(description='Clean up duplicate free-block events on the synced calendar')
    parser.add_argument('--dry-run', action='store_true', help='Show what would be deleted without actually deleting')
    parser.add_argument('--verbose', action='store_true', help='Show detailed logging')
    parser.add_argument('--csv', metavar='PATH', help='Read rows from a CSV export instead of the Google Sheet')

    args = parser.parse_args(argv)

    sync_config = config.load_sync_config()
    setup_logging('DEBUG' if args.verbose else config.LOG_LEVEL, config.STRUCTURED_LOGGING, sync_config.timezone)

    if args.dry_run:
        logger.info("🧪 DRY RUN MODE - No events will actually be deleted")

    try:
        cleanup = build_collapser(sync_config, csv_path=args.csv, dry_run=args.dry_run)
        result = cleanup.cleanup_duplicates()
    except SyncError as e:
        logger.error(f"❌ Cleanup failed: {type(e).__name__}: {e}")
        return 1

    logger.info(f"✅ {result['message']}")
    return 0 if result['deletion_errors'] == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
