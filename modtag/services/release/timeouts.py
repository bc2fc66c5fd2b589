from __future__ import annotations

# GH / API operations
GH_TIMEOUT_SECONDS = 60.0

# Linear backoff between retries of a single external call
GH_RETRY_DELAY_SECONDS = 1.0
