# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

from cal_ops.reader import CalendarReader
from cal_ops.writer import CalendarWriter
from cal_ops.provider import GoogleCalendarProvider, event_from_google

__all__ = ['CalendarReader', 'CalendarWriter', 'GoogleCalendarProvider', 'event_from_google']
