"""Init file for snapshot module."""

from kubestatelogs.controllers.snapshot.controller import CollectionResult, SnapshotController

__all__ = ["CollectionResult", "SnapshotController"]
