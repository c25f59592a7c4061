"""Controllers module for kube-state-logs.

This module provides the collection engine that turns cached Kubernetes
objects into log records.
"""

from __future__ import annotations

# Base classes
from kubestatelogs.controllers.base import BaseController

# Snapshot domain
from kubestatelogs.controllers.snapshot import (
    CollectionResult,
    SnapshotController,
)

__all__ = [
    # Base
    "BaseController",
    "CollectionResult",
    # Domain Controllers
    "SnapshotController",
]
