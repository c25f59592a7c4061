"""Base controller for kube-state-logs collectors.

This module provides the foundation for controllers that read cluster state
from a data source and hand back structured results to the run loop.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


class BaseController(ABC):
    """Base controller class.

    Subclasses implement the abstract methods to provide specific data
    fetching functionality.
    """

    def __init__(self) -> None:
        self._load_start_time: float | None = None

    def _start_timer(self) -> None:
        self._load_start_time = time.monotonic()

    def _elapsed_ms(self) -> float:
        if self._load_start_time is None:
            return 0.0
        return (time.monotonic() - self._load_start_time) * 1000

    @abstractmethod
    async def check_connection(self) -> bool:
        """Check if the data source is available.

        Returns:
            True if connection is available, False otherwise
        """
        ...

    @abstractmethod
    async def fetch_all(self) -> dict[str, Any]:
        """Fetch all data from the source.

        Returns:
            Dictionary containing all fetched data
        """
        ...
