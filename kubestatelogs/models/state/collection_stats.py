"""Per-kind diagnostic counters for a collection pass."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CollectionStats:
    """Counters describing what a single kind's collection did.

    Nothing here affects the emitted records; the counters only make skipped
    objects and degraded values visible.
    """

    listed: int = 0
    emitted: int = 0
    skipped_type_mismatch: int = 0
    skipped_missing_name: int = 0
    filtered_namespace: int = 0
    filtered_not_current: int = 0
    filtered_zero_desired: int = 0
    aggregation_fallbacks: int = 0
    duration_ms: float = 0.0

    @property
    def skipped(self) -> int:
        """Objects dropped because they could not be transformed."""
        return self.skipped_type_mismatch + self.skipped_missing_name
