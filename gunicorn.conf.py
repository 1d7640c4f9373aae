# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

import os

# One worker so only one scheduler thread exists
workers = 1
worker_class = 'sync'
timeout = 300  # Full syncs against a large sheet can be slow
keepalive = 2

bind = f"0.0.0.0:{os.environ.get('PORT', '5000')}"

# Logging
loglevel = os.environ.get('LOG_LEVEL', 'info').lower()
accesslog = '-'
errorlog = '-'

preload_app = False

# Process naming
proc_name = 'sheet-calendar-sync'

max_requests = 0
max_requests_jitter = 0
