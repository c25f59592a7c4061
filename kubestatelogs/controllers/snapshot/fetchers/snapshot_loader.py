"""Offline snapshot loader.

Reads objects dumped with ``kubectl get -o yaml`` / ``-o json`` and serves
them through in-memory stores, so a collection can run without a cluster.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from kubestatelogs.controllers.snapshot.fetchers.store import InMemoryStore
from kubestatelogs.controllers.snapshot.registry import KIND_SPECS
from kubestatelogs.models.state.app_settings import ConfigLoadError

logger = logging.getLogger(__name__)

_LIST_KIND_SUFFIX = "List"


def _flatten(document: Any) -> Iterable[Any]:
    """Yield objects from a document that is an object, a list or a ``*List``."""
    if document is None:
        return
    if isinstance(document, list):
        for item in document:
            yield from _flatten(item)
        return
    if isinstance(document, Mapping):
        kind = str(document.get("kind") or "")
        if kind.endswith(_LIST_KIND_SUFFIX) and isinstance(document.get("items"), list):
            for item in document["items"]:
                yield from _flatten(item)
            return
    yield document


def load_snapshot_objects(path: str | Path) -> list[Any]:
    """Read every object from a YAML or JSON snapshot file (multi-document aware).

    Raises:
        ConfigLoadError: if the file cannot be read or parsed.
    """
    snapshot_path = Path(path)
    try:
        with snapshot_path.open(encoding="utf-8") as handle:
            documents = list(yaml.safe_load_all(handle))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigLoadError(f"Cannot load snapshot {snapshot_path}: {exc}") from exc
    objects = [obj for document in documents for obj in _flatten(document)]
    logger.info("Loaded %d objects from %s", len(objects), snapshot_path)
    return objects


def build_snapshot_stores(objects: Iterable[Any]) -> dict[str, InMemoryStore]:
    """Distribute objects into one synced store per store key by their ``kind``.

    Objects of kinds nobody collects are dropped.
    """
    store_by_kind = {spec.kind: spec.store_key for spec in KIND_SPECS}
    grouped: dict[str, list[Any]] = {key: [] for key in store_by_kind.values()}
    ignored = 0
    for obj in objects:
        kind = obj.get("kind") if isinstance(obj, Mapping) else None
        store_key = store_by_kind.get(str(kind)) if kind else None
        if store_key is None:
            ignored += 1
            continue
        grouped[store_key].append(obj)
    if ignored:
        logger.debug("Ignored %d snapshot objects of uncollected kinds", ignored)
    return {key: InMemoryStore(items) for key, items in grouped.items()}
