"""Snapshot controller - the collection engine.

For each resource kind the controller reads the cached objects from the
kind's store, applies the namespace allow-list, runs replicaset currency
selection where the kind needs it, and transforms every remaining object into
records. A collection pass does this for several kinds under one capture
timestamp.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from kubestatelogs.constants.defaults import PARALLELISM_DEFAULT
from kubestatelogs.constants.enums import ReplicaSetPolicy
from kubestatelogs.controllers.base.base_controller import BaseController
from kubestatelogs.controllers.snapshot.fetchers.store import ObjectStore
from kubestatelogs.controllers.snapshot.registry import (
    KIND_SPECS,
    ResourceKindSpec,
    get_kind_spec,
)
from kubestatelogs.controllers.snapshot.selectors.currency import (
    CurrencyTable,
    ReplicaSetCurrencySelector,
)
from kubestatelogs.models.records import Record
from kubestatelogs.models.state.collection_stats import CollectionStats
from kubestatelogs.utils.field_extraction import extract_name, extract_namespace
from kubestatelogs.utils.namespace_filter import should_include_namespace

logger = logging.getLogger(__name__)


@dataclass
class CollectionResult:
    """Output of one collection pass."""

    capture_time: datetime
    records: dict[str, list[Record]] = field(default_factory=dict)
    stats: dict[str, CollectionStats] = field(default_factory=dict)

    def all_records(self) -> list[Record]:
        """Records of every kind, kinds in collection order."""
        return [record for records in self.records.values() for record in records]


class SnapshotController(BaseController):
    """Collects records from object stores.

    Args:
        stores: Object stores keyed by store key (see ``ResourceKindSpec.store_key``)
        namespaces: Namespace allow-list; empty means every namespace
        replicaset_policy: Which replicasets are emitted
        parallelism: Number of kinds collected concurrently in a pass
    """

    def __init__(
        self,
        stores: Mapping[str, ObjectStore],
        namespaces: Collection[str] = (),
        replicaset_policy: ReplicaSetPolicy = ReplicaSetPolicy.CURRENT,
        parallelism: int = PARALLELISM_DEFAULT,
    ) -> None:
        super().__init__()
        self._stores = dict(stores)
        self._namespaces = frozenset(namespaces)
        self._replicaset_policy = ReplicaSetPolicy(replicaset_policy)
        self._parallelism = max(1, parallelism)
        self._selector = ReplicaSetCurrencySelector()

    @property
    def available_kinds(self) -> list[ResourceKindSpec]:
        """Kinds whose store is present."""
        return [spec for spec in KIND_SPECS if spec.store_key in self._stores]

    async def check_connection(self) -> bool:
        """True when every store has completed its initial sync."""
        return all(store.has_synced() for store in self._stores.values())

    async def fetch_all(self) -> dict[str, Any]:
        """Run a pass over every available kind and return records by resource name."""
        result = await self.collect_pass()
        return dict(result.records)

    # =========================================================================
    # Single kind
    # =========================================================================

    def collect_kind(
        self,
        kind: str | ResourceKindSpec,
        capture_time: datetime | None = None,
        stats: CollectionStats | None = None,
    ) -> list[Record]:
        """Collect the records of one kind.

        Synchronous and bounded by the number of cached objects. Store errors
        propagate unchanged.

        Args:
            kind: Kind spec or resource name (``"pods"``, ``"pod"``, ...)
            capture_time: Timestamp stamped on every record; now if omitted
            stats: Counters to update; a fresh instance is used if omitted

        Returns:
            Records in the store's listing order.

        Raises:
            UnknownResourceError: if ``kind`` names no supported kind.
            KeyError: if no store is configured for the kind.
        """
        spec = kind if isinstance(kind, ResourceKindSpec) else get_kind_spec(kind)
        if capture_time is None:
            capture_time = datetime.now(timezone.utc)
        if stats is None:
            stats = CollectionStats()
        started = time.monotonic()

        store = self._stores[spec.store_key]
        objects = store.list()
        stats.listed += len(objects)

        in_scope = [obj for obj in objects if self._accept(spec, obj, stats)]

        table: CurrencyTable | None = None
        if spec.uses_currency:
            table = self._selector.select(in_scope)

        records: list[Record] = []
        for obj in in_scope:
            if table is not None:
                if not self._selector.should_emit(obj, table, self._replicaset_policy):
                    if self._replicaset_policy is ReplicaSetPolicy.NONZERO_DESIRED:
                        stats.filtered_zero_desired += 1
                    else:
                        stats.filtered_not_current += 1
                    continue
                records.append(
                    spec.transform(obj, capture_time, stats, is_current=table.is_current(obj))
                )
            elif spec.many:
                records.extend(spec.transform(obj, capture_time, stats))
            else:
                records.append(spec.transform(obj, capture_time, stats))

        stats.emitted += len(records)
        stats.duration_ms = (time.monotonic() - started) * 1000
        if stats.skipped or stats.aggregation_fallbacks:
            logger.info(
                "%s: skipped %d malformed objects, %d aggregation fallbacks",
                spec.name,
                stats.skipped,
                stats.aggregation_fallbacks,
            )
        return records

    def _accept(self, spec: ResourceKindSpec, obj: Any, stats: CollectionStats) -> bool:
        """Type check, name check and namespace filter for one cached object."""
        if not isinstance(obj, Mapping):
            stats.skipped_type_mismatch += 1
            logger.debug("%s: skipping %s object", spec.name, type(obj).__name__)
            return False
        kind = obj.get("kind")
        if kind and kind != spec.kind:
            stats.skipped_type_mismatch += 1
            logger.debug("%s: skipping object of kind %s", spec.name, kind)
            return False
        if not extract_name(obj):
            stats.skipped_missing_name += 1
            logger.debug("%s: skipping object without a name", spec.name)
            return False
        if spec.namespaced and not should_include_namespace(
            self._namespaces, extract_namespace(obj)
        ):
            stats.filtered_namespace += 1
            return False
        return True

    # =========================================================================
    # Collection pass
    # =========================================================================

    async def collect_pass(
        self, kinds: Iterable[str | ResourceKindSpec] | None = None
    ) -> CollectionResult:
        """Collect several kinds under a single capture timestamp.

        Kinds run one after another with a cancellation point between them, or
        in worker threads when ``parallelism`` > 1. Cancelling the calling task
        (or an enclosing ``asyncio.timeout``) stops the pass between kinds.

        Args:
            kinds: Kinds to collect; every available kind if omitted

        Returns:
            CollectionResult with records and stats keyed by resource name.
        """
        specs = (
            self.available_kinds
            if kinds is None
            else [k if isinstance(k, ResourceKindSpec) else get_kind_spec(k) for k in kinds]
        )
        result = CollectionResult(capture_time=datetime.now(timezone.utc))
        self._start_timer()

        if self._parallelism == 1 or len(specs) <= 1:
            for spec in specs:
                # Checkpoint: a pending cancellation is raised here.
                await asyncio.sleep(0)
                stats = CollectionStats()
                result.records[spec.name] = self.collect_kind(spec, result.capture_time, stats)
                result.stats[spec.name] = stats
        else:
            semaphore = asyncio.Semaphore(self._parallelism)

            async def run(spec: ResourceKindSpec) -> tuple[list[Record], CollectionStats]:
                async with semaphore:
                    stats = CollectionStats()
                    records = await asyncio.to_thread(
                        self.collect_kind, spec, result.capture_time, stats
                    )
                    return records, stats

            outcomes = await asyncio.gather(*(run(spec) for spec in specs))
            for spec, (records, stats) in zip(specs, outcomes):
                result.records[spec.name] = records
                result.stats[spec.name] = stats

        logger.debug(
            "Collected %d records across %d kinds in %.1fms",
            sum(len(records) for records in result.records.values()),
            len(specs),
            self._elapsed_ms(),
        )
        return result
