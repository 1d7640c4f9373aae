"""
Structured Logger - JSON log lines for every sync mutation and parse failure
"""
import json
import logging
from typing import Dict, Any, Optional
from utils.timezone import get_local_time, DEFAULT_TIMEZONE

SERVICE_NAME = "sheet-calendar-sync"


class StructuredLogger:
    """Provides structured logging in JSON format for better parsing and analysis"""

    def __init__(self, name: str, tz_name: Optional[str] = None):
        self.logger = logging.getLogger(name)
        self.name = name
        self.tz_name = tz_name or DEFAULT_TIMEZONE

    def _base_entry(self, event_type: str) -> Dict[str, Any]:
        return {
            "timestamp": get_local_time(self.tz_name).isoformat(),
            "timezone": self.tz_name,
            "event_type": event_type,
            "service": SERVICE_NAME,
            "logger": self.name
        }

    def log_sync_event(self, event_type: str, details: Dict[str, Any]):
        """Log a sync-related event with structured data"""
        log_entry = {**self._base_entry(event_type), **details}
        message = json.dumps(log_entry, default=str)

        # Choose log level based on event type
        lowered = event_type.lower()
        if "error" in lowered or "failed" in lowered:
            self.logger.error(message)
        elif "warning" in lowered or "skipped" in lowered or "aborted" in lowered:
            self.logger.warning(message)
        else:
            self.logger.info(message)


class JsonFormatter(logging.Formatter):
    """Custom formatter that outputs JSON"""

    def __init__(self, tz_name: Optional[str] = None):
        super().__init__()
        self.tz_name = tz_name or DEFAULT_TIMEZONE

    def format(self, record):
        # If the message is already JSON, return it as-is
        try:
            json.loads(record.getMessage())
            return record.getMessage()
        except (json.JSONDecodeError, TypeError):
            log_entry = {
                "timestamp": get_local_time(self.tz_name).isoformat(),
                "timezone": self.tz_name,
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage()
            }

            if record.exc_info:
                log_entry["exception"] = self.formatException(record.exc_info)

            return json.dumps(log_entry)


def setup_logging(level: str = 'INFO', structured: bool = True, tz_name: Optional[str] = None):
    """Configure the root logger once for scripts and the web app"""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Leave handlers installed by gunicorn or a test runner alone
    if root.handlers:
        return

    handler = logging.StreamHandler()
    if structured:
        handler.setFormatter(JsonFormatter(tz_name))
    else:
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
    root.addHandler(handler)
