"""
Desired set tests - which rows become events inside the sync window
"""

import pytest
from datetime import datetime
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from conftest import NOW, busy_row, free_row
from sync.desired import build_desired_events, collect_free_titles, non_empty_rows, rows_in_window
from sync.window import compute_sync_window


@pytest.fixture
def window(sync_config):
    return compute_sync_window(NOW, sync_config.sync_months_future, tz_name=sync_config.timezone)


class TestNonEmptyRows:

    @pytest.mark.unit
    def test_blank_start_cells_dropped(self, sync_config):
        rows = [
            busy_row(datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 11)),
            ['', '', '', '', ''],
            [],
            ['   ', datetime(2025, 6, 1, 11), 'x', '', 'Busy'],
        ]
        assert len(non_empty_rows(rows, sync_config)) == 1


class TestRowsInWindow:

    @pytest.mark.unit
    def test_rows_outside_window_dropped(self, sync_config, window):
        inside = busy_row(datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 11))
        before = busy_row(datetime(2025, 5, 19, 10), datetime(2025, 5, 19, 11))
        after = busy_row(datetime(2025, 12, 1, 10), datetime(2025, 12, 1, 11))

        assert rows_in_window([inside, before, after], window, sync_config) == [inside]

    @pytest.mark.unit
    def test_earlier_today_is_inside(self, sync_config, window):
        row = busy_row(datetime(2025, 5, 20, 7), datetime(2025, 5, 20, 8))
        assert rows_in_window([row], window, sync_config) == [row]

    @pytest.mark.unit
    def test_unparseable_start_passed_through(self, sync_config, window):
        row = busy_row('garbage', datetime(2025, 6, 1, 11))
        assert rows_in_window([row], window, sync_config) == [row]


class TestBuildDesiredEvents:
    """Test the desired set the diff works from"""

    @pytest.mark.unit
    def test_builds_busy_and_free(self, sync_config, window):
        rows = [
            busy_row(datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 11)),
            free_row(datetime(2025, 7, 1), datetime(2025, 7, 5)),
        ]
        desired = build_desired_events(rows, window, sync_config)
        assert sorted(e.title for e in desired.values()) == ['Busy', 'VAC']

    @pytest.mark.unit
    def test_identical_busy_rows_collapse(self, sync_config, window):
        """Two overlapping appointments at the same time make one busy marker"""
        rows = [
            busy_row(datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 11), 'Dentist'),
            busy_row(datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 11), 'Lunch'),
        ]
        assert len(build_desired_events(rows, window, sync_config)) == 1

    @pytest.mark.unit
    def test_bad_rows_skipped(self, sync_config, window):
        rows = [
            busy_row('garbage', datetime(2025, 6, 1, 11)),
            busy_row(datetime(2025, 6, 2, 10), datetime(2025, 6, 2, 11)),
        ]
        assert len(build_desired_events(rows, window, sync_config)) == 1

    @pytest.mark.unit
    def test_empty_sheet(self, sync_config, window):
        assert build_desired_events([], window, sync_config) == {}


class TestCollectFreeTitles:
    """Titles the duplicate cleanup searches for"""

    @pytest.mark.duplicate
    def test_ignores_window(self, sync_config):
        rows = [
            free_row(datetime(2024, 1, 1), datetime(2024, 1, 5), 'OLD'),
            free_row(datetime(2027, 1, 1), datetime(2027, 1, 5), 'NEW'),
        ]
        assert collect_free_titles(rows, sync_config) == {'OLD', 'NEW'}

    @pytest.mark.duplicate
    def test_only_valid_free_rows(self, sync_config):
        rows = [
            busy_row(datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 11), 'DOC'),
            free_row(datetime(2025, 7, 1), datetime(2025, 7, 5), 'VACATION'),
            free_row(datetime(2025, 7, 1, 9), datetime(2025, 7, 1, 17), 'HALF'),
            free_row(datetime(2025, 7, 1), datetime(2025, 7, 5), 'VAC'),
            free_row(datetime(2025, 8, 1), datetime(2025, 8, 5), 'VAC'),
        ]
        assert collect_free_titles(rows, sync_config) == {'VAC'}
