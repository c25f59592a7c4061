"""Object stores feeding the collection engine."""

from kubestatelogs.controllers.snapshot.fetchers.store import (
    InMemoryStore,
    ObjectStore,
    StoreSyncError,
)

__all__ = ["InMemoryStore", "ObjectStore", "StoreSyncError"]
