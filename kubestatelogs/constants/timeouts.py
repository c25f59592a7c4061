"""Timeout constants for kube-state-logs.

All timeout and interval values for cache sync, watch streams and shutdown.
"""

from typing import Final

# ============================================================================
# Watch cache timeouts (seconds)
# ============================================================================

CACHE_SYNC_TIMEOUT: Final = 60.0

# Server-side timeout of a single watch request; the stream is reopened after it.
WATCH_TIMEOUT_SECONDS: Final = 300
WATCH_RECONNECT_DELAY: Final = 2.0

# ============================================================================
# Process lifecycle timeouts (seconds)
# ============================================================================

SHUTDOWN_TIMEOUT: Final = 10.0

__all__ = [
    "CACHE_SYNC_TIMEOUT",
    "SHUTDOWN_TIMEOUT",
    "WATCH_RECONNECT_DELAY",
    "WATCH_TIMEOUT_SECONDS",
]
