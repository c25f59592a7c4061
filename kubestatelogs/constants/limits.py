"""Limit and threshold constants for kube-state-logs.

All limit values and validation ranges.
"""

from typing import Final

# ============================================================================
# Validation limits
# ============================================================================

LOG_INTERVAL_MIN: Final = 1.0
PARALLELISM_MIN: Final = 1
PARALLELISM_MAX: Final = 16

# ============================================================================
# Quantity limits
# ============================================================================

# Quantities are rounded up to nano precision, like the API server does.
QUANTITY_MIN_EXPONENT: Final = -9

__all__ = [
    "LOG_INTERVAL_MIN",
    "PARALLELISM_MAX",
    "PARALLELISM_MIN",
    "QUANTITY_MIN_EXPONENT",
]
