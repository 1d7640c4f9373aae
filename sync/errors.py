# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Sync Errors - Failure taxonomy shared by the engine and the provider adapters
"""


class SyncError(Exception):
    """Base class for all sync failures"""
    pass


class RowParseError(SyncError):
    """A sheet row could not be turned into an event (recovered per row)"""
    pass


class ProviderMutationError(SyncError):
    """A create/update/delete call was rejected (recovered per event)"""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class ProviderFetchError(SyncError):
    """Listing rows or events failed; the run must not continue"""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(SyncError):
    """Settings are unusable, e.g. the calendar does not exist"""
    pass
