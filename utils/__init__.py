"""Shared helpers: structured logging and timezone handling"""
from utils.logger import StructuredLogger, setup_logging
from utils.timezone import DEFAULT_TIMEZONE, get_local_time

__all__ = ['StructuredLogger', 'setup_logging', 'DEFAULT_TIMEZONE', 'get_local_time']
