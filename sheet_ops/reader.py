# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Sheet Reader - Reads the source-of-truth rows from Google Sheets or a CSV export
"""
import csv
import logging
import urllib.parse
import requests
from typing import Any, List, Optional

from config import SyncConfig
from models import RowSource
from sync.errors import ConfigurationError, ProviderFetchError

logger = logging.getLogger(__name__)

SHEETS_API = 'https://sheets.googleapis.com/v4/spreadsheets'


def column_letter(index: int) -> str:
    """1 -> A, 26 -> Z, 27 -> AA"""
    letters = ''
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord('A') + remainder) + letters
    return letters


def data_range(config: SyncConfig, sheet_name: Optional[str] = None) -> str:
    """A1 range covering every data row below the header, e.g. 'A2:E2001'"""
    first_row = config.header_rows + 1
    last_row = config.header_rows + config.max_rows
    cells = f"A{first_row}:{column_letter(config.last_column)}{last_row}"
    if sheet_name:
        return f"'{sheet_name}'!{cells}"
    return cells


class SheetReader(RowSource):
    """Reads rows through the Sheets v4 values API"""

    def __init__(self, auth_manager, spreadsheet_id: str, config: SyncConfig, sheet_name: Optional[str] = None):
        if not spreadsheet_id:
            raise ConfigurationError("SPREADSHEET_ID is not configured")
        self.auth = auth_manager
        self.spreadsheet_id = spreadsheet_id
        self.config = config
        self.sheet_name = sheet_name

    def read_rows(self) -> List[List[Any]]:
        cell_range = data_range(self.config, self.sheet_name)
        url = f"{SHEETS_API}/{urllib.parse.quote(self.spreadsheet_id, safe='')}/values/{urllib.parse.quote(cell_range, safe='')}"
        params = {
            # Dates come back as serial numbers, independent of display format
            'valueRenderOption': 'UNFORMATTED_VALUE',
            'dateTimeRenderOption': 'SERIAL_NUMBER',
            'majorDimension': 'ROWS'
        }

        headers = self.auth.get_headers()
        if not headers:
            raise ProviderFetchError("No valid authentication headers")

        try:
            response = requests.get(url, headers=headers, params=params, timeout=30)
            if response.status_code == 401:
                if not self.auth.refresh_access_token():
                    raise ProviderFetchError("Authentication failed", status_code=401)
                response = requests.get(url, headers=self.auth.get_headers(), params=params, timeout=30)
        except requests.exceptions.RequestException as e:
            logger.error(f"Error reading sheet rows: {e}")
            raise ProviderFetchError(f"Failed to read sheet: {e}") from e

        if response.status_code == 404:
            raise ConfigurationError(f"Spreadsheet '{self.spreadsheet_id}' or range {cell_range} not found")
        if response.status_code != 200:
            logger.error(f"Failed to read sheet: {response.status_code}")
            logger.error(f"Response: {response.text}")
            raise ProviderFetchError("Failed to read sheet rows", status_code=response.status_code)

        rows = response.json().get('values', [])
        logger.info(f"Fetched range {cell_range}: {len(rows)} rows")
        return rows[:self.config.max_rows]


class CsvSheetReader(RowSource):
    """Reads the same column layout from a CSV export of the sheet"""

    def __init__(self, path: str, config: SyncConfig):
        self.path = path
        self.config = config

    def read_rows(self) -> List[List[Any]]:
        try:
            with open(self.path, newline='', encoding='utf-8-sig') as f:
                rows = list(csv.reader(f))
        except OSError as e:
            raise ProviderFetchError(f"Failed to read {self.path}: {e}") from e

        data = rows[self.config.header_rows:self.config.header_rows + self.config.max_rows]
        logger.info(f"Read {len(data)} rows from {self.path}")
        return data
