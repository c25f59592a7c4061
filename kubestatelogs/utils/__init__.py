"""Utility functions for kube-state-logs."""

from kubestatelogs.utils.quantity import (
    Quantity,
    QuantityParseError,
    format_quantity,
)
from kubestatelogs.utils.record_writer import RecordWriter

__all__ = [
    # Quantities
    "Quantity",
    "QuantityParseError",
    # Output
    "RecordWriter",
    "format_quantity",
]
