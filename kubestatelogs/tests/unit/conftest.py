"""Shared fixtures for unit tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest


@pytest.fixture
def capture_time() -> datetime:
    """Fixed capture timestamp for a collection pass."""
    return datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
