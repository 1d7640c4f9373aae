"""
Configuration tests
"""

import pytest
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import SyncConfig, load_sync_config
from sync.errors import ConfigurationError


class TestLoadSyncConfig:

    @pytest.mark.unit
    def test_defaults(self):
        config = load_sync_config({})
        assert config.busy_event_title == 'Busy'
        assert config.busy_event_color == '9'
        assert config.sync_months_future == 6
        assert config.excluded_titles == frozenset({'pto', '[res]', '[dev]'})
        assert config.timezone == 'America/Chicago'
        assert config.dry_run is False

    @pytest.mark.unit
    def test_environment_overrides(self):
        config = load_sync_config({
            'BUSY_EVENT_TITLE': 'Unavailable',
            'CALENDAR_ID': 'team@example.com',
            'AVAILABILITY_COLUMN': '4',
            'SYNC_MONTHS_FUTURE': '3',
            'EXCLUDED_TITLES': 'PTO, Sick ,',
            'DRY_RUN_MODE': 'true'
        })
        assert config.busy_event_title == 'Unavailable'
        assert config.calendar_id == 'team@example.com'
        assert config.availability_column == 4
        assert config.sync_months_future == 3
        assert config.excluded_titles == frozenset({'pto', 'sick'})
        assert config.dry_run is True


class TestValidate:

    @pytest.mark.unit
    def test_defaults_are_valid(self):
        SyncConfig().validate()

    @pytest.mark.unit
    @pytest.mark.parametrize("changes", [
        {'calendar_id': ''},
        {'busy_event_title': ''},
        {'start_column': 0},
        {'title_column': 1},
        {'max_rows': 0},
        {'sync_months_future': -1},
    ])
    def test_unusable_settings_rejected(self, changes):
        with pytest.raises(ConfigurationError):
            SyncConfig().with_overrides(**changes).validate()

    @pytest.mark.unit
    def test_last_column(self):
        assert SyncConfig().last_column == 5

    @pytest.mark.unit
    def test_unknown_timezone_rejected(self):
        with pytest.raises(ConfigurationError):
            SyncConfig(timezone='Mars/Olympus_Mons').validate()
