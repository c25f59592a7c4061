"""Record writer - emits records as one JSON document per line."""

from __future__ import annotations

import json
import logging
import sys
import threading
from collections.abc import Iterable
from typing import TextIO

from kubestatelogs.models.records import Record

logger = logging.getLogger(__name__)


class RecordWriter:
    """Writes records to a text stream (stdout by default) as JSON lines.

    Writes are serialized with a lock so lines of concurrent passes never
    interleave.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()
        self.written = 0

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    @staticmethod
    def format_record(record: Record) -> str:
        return json.dumps(record.to_log_dict(), separators=(",", ":"), default=str)

    def write(self, records: Iterable[Record]) -> int:
        """Write records and flush; returns how many were written."""
        lines = [self.format_record(record) for record in records]
        if not lines:
            return 0
        with self._lock:
            self.stream.write("\n".join(lines) + "\n")
            self.stream.flush()
            self.written += len(lines)
        logger.debug("Wrote %d records", len(lines))
        return len(lines)
