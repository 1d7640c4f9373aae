# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

from sheet_ops.reader import CsvSheetReader, SheetReader

__all__ = ['CsvSheetReader', 'SheetReader']
