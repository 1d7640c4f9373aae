"""
Row parsing tests - sheet cells to desired events
"""

import pytest
from datetime import date, datetime, timedelta
import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from conftest import busy_row, free_row, local
from sync.errors import RowParseError
from sync.rows import cell, is_empty_cell, parse_cell_datetime, parse_row

TZ = 'America/Chicago'


class TestParseCellDatetime:
    """Test the accepted date cell formats"""

    @pytest.mark.unit
    def test_serial_number(self):
        """Sheets serial 45809.5 is noon on 2025-06-01"""
        assert parse_cell_datetime(45809.5, TZ) == local(2025, 6, 1, 12, 0)

    @pytest.mark.unit
    def test_serial_float_noise_rounds_to_seconds(self):
        """Serials rarely land exactly on the second"""
        parsed = parse_cell_datetime(45809 + 10 / 24 - 1e-9, TZ)
        assert parsed == local(2025, 6, 1, 10, 0)
        assert parsed.microsecond == 0

    @pytest.mark.unit
    def test_integer_serial_is_midnight(self):
        assert parse_cell_datetime(45809, TZ) == local(2025, 6, 1)

    @pytest.mark.unit
    def test_naive_datetime_is_local(self):
        assert parse_cell_datetime(datetime(2025, 6, 1, 10, 0), TZ) == local(2025, 6, 1, 10, 0)

    @pytest.mark.unit
    def test_date_object(self):
        assert parse_cell_datetime(date(2025, 6, 1), TZ) == local(2025, 6, 1)

    @pytest.mark.unit
    @pytest.mark.parametrize("text", [
        '06/01/2025 10:00',
        '6/1/2025 10:00:00',
        '06/01/2025 10:00 AM',
        '2025-06-01T10:00:00',
        '2025-06-01 10:00',
    ])
    def test_string_formats(self, text):
        assert parse_cell_datetime(text, TZ) == local(2025, 6, 1, 10, 0)

    @pytest.mark.unit
    def test_offset_string_converted_to_local(self):
        assert parse_cell_datetime('2025-06-01T15:00:00Z', TZ) == local(2025, 6, 1, 10, 0)

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ['', '   ', None, 'next tuesday', True, float('nan'), ['x']])
    def test_rejects_non_dates(self, value):
        with pytest.raises(RowParseError):
            parse_cell_datetime(value, TZ)


class TestCells:
    """Test 1-based cell access on ragged rows"""

    @pytest.mark.unit
    def test_cell_past_row_end_is_empty(self):
        row = ['a', 'b']
        assert cell(row, 1) == 'a'
        assert cell(row, 5) == ''

    @pytest.mark.unit
    def test_is_empty_cell(self):
        assert is_empty_cell('')
        assert is_empty_cell('  ')
        assert is_empty_cell(None)
        assert not is_empty_cell(0)
        assert not is_empty_cell('x')


class TestParseRow:
    """Test how rows become busy markers or free blocks"""

    @pytest.mark.unit
    def test_busy_row_uses_busy_title(self, sync_config):
        event = parse_row(busy_row(datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 11), 'Dentist'), sync_config)
        assert event.title == 'Busy'
        assert event.start == local(2025, 6, 1, 10)
        assert event.end == local(2025, 6, 1, 11)

    @pytest.mark.unit
    def test_availability_is_case_insensitive(self, sync_config):
        row = [datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 11), 'Dentist', '', '  BUSY ']
        assert parse_row(row, sync_config).title == 'Busy'

    @pytest.mark.unit
    def test_free_row_end_extended_one_day(self, sync_config):
        event = parse_row(free_row(datetime(2025, 7, 1), datetime(2025, 7, 5)), sync_config)
        assert event.title == 'VAC'
        assert event.start == local(2025, 7, 1)
        assert event.end == local(2025, 7, 6)

    @pytest.mark.unit
    def test_free_row_across_dst_keeps_midnight(self, sync_config):
        """DST ends 2025-11-02; the extra day is a calendar day, not 24 hours"""
        event = parse_row(free_row(datetime(2025, 10, 30), datetime(2025, 11, 2)), sync_config)
        assert event.end == local(2025, 11, 3)
        assert event.end.hour == 0
        assert event.end.utcoffset() == timedelta(hours=-6)

    @pytest.mark.unit
    def test_short_free_row_rejected(self, sync_config):
        row = free_row(datetime(2025, 7, 1, 9), datetime(2025, 7, 1, 17))
        assert parse_row(row, sync_config) is None

    @pytest.mark.unit
    def test_exactly_one_day_free_row_accepted(self, sync_config):
        row = free_row(datetime(2025, 7, 1), datetime(2025, 7, 2))
        assert parse_row(row, sync_config) is not None

    @pytest.mark.unit
    def test_long_free_title_rejected(self, sync_config):
        row = free_row(datetime(2025, 7, 1), datetime(2025, 7, 5), 'VACATION')
        assert parse_row(row, sync_config) is None

    @pytest.mark.unit
    @pytest.mark.parametrize("title", ['PTO', 'pto', '[RES]', '[dev]'])
    def test_excluded_titles_rejected(self, sync_config, title):
        row = busy_row(datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 11), title)
        assert parse_row(row, sync_config) is None

    @pytest.mark.unit
    @pytest.mark.parametrize("availability", ['', 'Tentative', 'maybe'])
    def test_unknown_availability_rejected(self, sync_config, availability):
        row = [datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 11), 'Dentist', '', availability]
        assert parse_row(row, sync_config) is None

    @pytest.mark.unit
    def test_short_row_rejected(self, sync_config):
        assert parse_row([datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 11), 'Dentist'], sync_config) is None

    @pytest.mark.unit
    def test_zero_length_busy_row_accepted(self, sync_config):
        row = busy_row(datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 10))
        assert parse_row(row, sync_config) is not None

    @pytest.mark.unit
    def test_unparseable_row_logged_not_raised(self, sync_config, caplog):
        caplog.set_level(logging.ERROR, logger='sync.rows')
        row = busy_row('not a date', datetime(2025, 6, 1, 11))

        assert parse_row(row, sync_config) is None
        assert any('row_parse_failed' in record.getMessage() for record in caplog.records)

    @pytest.mark.unit
    def test_custom_columns(self, sync_config):
        config = sync_config.with_overrides(start_column=2, end_column=3, title_column=1, availability_column=4)
        row = ['Dentist', datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 11), 'busy']
        assert parse_row(row, config).start == local(2025, 6, 1, 10)
