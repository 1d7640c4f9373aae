# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Wiring shared by the CLI scripts and the web app
"""
import logging
from typing import Optional

import config
from auth import GoogleAuth
from cal_ops import GoogleCalendarProvider
from config import SyncConfig
from models import RowSource
from sheet_ops import CsvSheetReader, SheetReader
from sync import DuplicateCollapser, SyncEngine

logger = logging.getLogger(__name__)


def build_row_source(sync_config: SyncConfig, auth_manager: GoogleAuth,
                     csv_path: Optional[str] = None) -> RowSource:
    if csv_path:
        logger.info(f"Reading rows from CSV export {csv_path}")
        return CsvSheetReader(csv_path, sync_config)
    return SheetReader(auth_manager, config.SPREADSHEET_ID, sync_config, config.SHEET_NAME or None)


def build_engine(sync_config: SyncConfig, csv_path: Optional[str] = None,
                 auth_manager: Optional[GoogleAuth] = None) -> SyncEngine:
    sync_config.validate()
    auth_manager = auth_manager or GoogleAuth()
    provider = GoogleCalendarProvider(auth_manager, sync_config.calendar_id, sync_config.timezone)
    return SyncEngine(sync_config, build_row_source(sync_config, auth_manager, csv_path), provider)


def build_collapser(sync_config: SyncConfig, csv_path: Optional[str] = None, dry_run: bool = False,
                    auth_manager: Optional[GoogleAuth] = None) -> DuplicateCollapser:
    sync_config.validate()
    auth_manager = auth_manager or GoogleAuth()
    provider = GoogleCalendarProvider(auth_manager, sync_config.calendar_id, sync_config.timezone)
    return DuplicateCollapser(sync_config, build_row_source(sync_config, auth_manager, csv_path),
                              provider, dry_run=dry_run)
