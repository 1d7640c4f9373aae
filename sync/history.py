# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Sync History - Track sync runs over time
"""
from datetime import timedelta
from typing import Dict, List, Optional
import statistics
from utils.timezone import get_local_time


class SyncHistory:
    """Keeps the most recent run summaries in memory"""

    def __init__(self, max_entries: int = 100, tz_name: Optional[str] = None):
        self.history: List[Dict] = []
        self.max_entries = max_entries
        self.tz_name = tz_name

    def add_entry(self, sync_result: Dict):
        """Add a sync result to history"""
        entry = {
            'timestamp': get_local_time(self.tz_name),
            'duration': sync_result.get('duration', 0),
            'success': sync_result.get('success', False),
            'operations': {
                'created': sync_result.get('created', 0),
                'updated': sync_result.get('updated', 0),
                'deleted': sync_result.get('deleted', 0),
                'failed': sync_result.get('failed_operations', 0)
            },
            'dry_run': sync_result.get('dry_run', False),
            'aborted': sync_result.get('aborted', False),
            'error': sync_result.get('error')
        }

        self.history.append(entry)

        # Trim history if it exceeds max entries
        if len(self.history) > self.max_entries:
            self.history.pop(0)

    def get_recent(self, limit: int = 10) -> List[Dict]:
        entries = self.history[-limit:]
        return [
            {**entry, 'timestamp': entry['timestamp'].isoformat()}
            for entry in reversed(entries)
        ]

    def get_statistics(self, hours: int = 24) -> Dict:
        """Calculate statistics for the given time period"""
        cutoff_time = get_local_time(self.tz_name) - timedelta(hours=hours)
        recent_entries = [e for e in self.history if e['timestamp'] > cutoff_time]

        totals = {'created': 0, 'updated': 0, 'deleted': 0, 'failed': 0}
        for entry in recent_entries:
            for name in totals:
                totals[name] += entry['operations'][name]

        successful = [e for e in recent_entries if e['success']]
        durations = [e['duration'] for e in successful if e['duration']]

        return {
            'period_hours': hours,
            'total_syncs': len(recent_entries),
            'successful_syncs': len(successful),
            'failed_syncs': len(recent_entries) - len(successful),
            'success_rate': round(len(successful) / len(recent_entries) * 100, 1) if recent_entries else 0,
            'average_duration': statistics.mean(durations) if durations else 0,
            'total_operations': totals,
            'last_sync': recent_entries[-1]['timestamp'].isoformat() if recent_entries else None
        }
