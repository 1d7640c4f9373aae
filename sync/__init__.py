# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Sheet-to-calendar reconciliation
"""
from sync.engine import SyncEngine, SyncPhase
from sync.duplicates import DuplicateCollapser

__all__ = ['SyncEngine', 'SyncPhase', 'DuplicateCollapser']
