"""Object store interface consumed by the collection engine."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from kubestatelogs.utils.field_extraction import extract_name, extract_namespace


class StoreSyncError(RuntimeError):
    """Raised when a store does not finish its initial sync in time."""


@runtime_checkable
class ObjectStore(Protocol):
    """Read-only view of a locally cached set of cluster objects.

    ``list`` must be cheap and must not block once ``has_synced`` is True.
    Callers must treat returned objects as read-only.
    """

    def list(self) -> list[Any]: ...

    def has_synced(self) -> bool: ...


def object_key(obj: Any) -> str:
    """Cache key of an object, ``namespace/name`` or ``name`` when cluster-scoped."""
    namespace = extract_namespace(obj)
    name = extract_name(obj)
    return f"{namespace}/{name}" if namespace else name


class InMemoryStore:
    """Thread-safe store holding objects in insertion order.

    Used for offline snapshot files and as the backing cache of
    ``ListWatchStore``.
    """

    def __init__(self, objects: Iterable[Any] = (), synced: bool = True) -> None:
        self._lock = threading.Lock()
        self._objects: dict[str, Any] = {}
        self._synced = synced
        # Objects without a name cannot be keyed; they are kept apart so the
        # engine still sees (and counts) them.
        self._unkeyed: list[Any] = []
        for obj in objects:
            self.upsert(obj)

    def list(self) -> list[Any]:
        with self._lock:
            return [*self._objects.values(), *self._unkeyed]

    def has_synced(self) -> bool:
        with self._lock:
            return self._synced

    def mark_synced(self, synced: bool = True) -> None:
        with self._lock:
            self._synced = synced

    def upsert(self, obj: Any) -> None:
        if not isinstance(obj, Mapping) or not extract_name(obj):
            with self._lock:
                self._unkeyed.append(obj)
            return
        key = object_key(obj)
        with self._lock:
            self._objects[key] = obj

    def delete(self, obj: Any) -> None:
        with self._lock:
            self._objects.pop(object_key(obj), None)

    def replace(self, objects: Iterable[Any]) -> None:
        """Swap the whole content, as after a relist."""
        fresh = InMemoryStore(objects)
        with self._lock:
            self._objects = fresh._objects
            self._unkeyed = fresh._unkeyed

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects) + len(self._unkeyed)
