"""Currency selection for replicasets.

A Deployment keeps old replicasets around for rollback. Among the replicasets
that share an owner, only the newest one describes the live rollout; this
module decides which one that is without touching the cached objects.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from kubestatelogs.constants.defaults import DESIRED_REPLICAS_DEFAULT
from kubestatelogs.constants.enums import ReplicaSetPolicy
from kubestatelogs.utils.field_extraction import (
    as_mapping,
    coerce_int,
    coerce_str,
    extract_creation_time,
    extract_generation,
    extract_namespace,
    extract_owner_references,
    object_identity,
)

logger = logging.getLogger(__name__)

ObjectKey = tuple[str, str, str]
OwnerKey = tuple[str, str, str]


def desired_replicas(obj: Mapping[str, Any]) -> int:
    """``spec.replicas``, or the Kubernetes default of 1 when unset."""
    replicas = as_mapping(obj.get("spec")).get("replicas")
    if replicas is None:
        return DESIRED_REPLICAS_DEFAULT
    return coerce_int(replicas, DESIRED_REPLICAS_DEFAULT)


def group_by_owner(replicasets: Iterable[Mapping[str, Any]]) -> dict[OwnerKey, list[Mapping[str, Any]]]:
    """Group replicasets by (namespace, owner kind, owner name).

    Every owner reference contributes a key, so an object with several owners
    lands in several groups. Objects without owners belong to no group.
    """
    groups: dict[OwnerKey, list[Mapping[str, Any]]] = {}
    for rs in replicasets:
        namespace = extract_namespace(rs)
        for owner in extract_owner_references(rs):
            key = (namespace, coerce_str(owner.get("kind")), coerce_str(owner.get("name")))
            groups.setdefault(key, []).append(rs)
    return groups


def _recency_key(rs: Mapping[str, Any]) -> tuple[float, int]:
    created = extract_creation_time(rs)
    return (created.timestamp() if created else float("-inf"), extract_generation(rs))


class CurrencyTable:
    """Pass-local record of which replicasets are current.

    Keys are ``object_identity`` tuples; cached objects are never marked.
    """

    def __init__(self) -> None:
        self._current: dict[ObjectKey, bool] = {}

    def mark(self, obj: Mapping[str, Any], current: bool) -> None:
        key = object_identity(obj)
        # Current in any group means current.
        self._current[key] = self._current.get(key, False) or current

    def is_current(self, obj: Mapping[str, Any]) -> bool:
        return self._current.get(object_identity(obj), False)

    def __len__(self) -> int:
        return sum(1 for current in self._current.values() if current)


class ReplicaSetCurrencySelector:
    """Selects the current replicaset of every owner group."""

    def select(self, replicasets: Iterable[Mapping[str, Any]]) -> CurrencyTable:
        """Build the currency table for the given (already filtered) replicasets.

        Each group is ordered by creation time, newest first, with the higher
        generation winning a tie. The sort is stable, so full ties keep cache
        order. The first member of each group is current.
        """
        table = CurrencyTable()
        groups = group_by_owner(replicasets)
        for key, members in groups.items():
            ordered = sorted(members, key=_recency_key, reverse=True)
            for index, rs in enumerate(ordered):
                table.mark(rs, index == 0)
            logger.debug("Owner group %s/%s/%s: %d replicasets", *key, len(members))
        return table

    @staticmethod
    def should_emit(
        rs: Mapping[str, Any],
        table: CurrencyTable,
        policy: ReplicaSetPolicy,
    ) -> bool:
        """Whether a replicaset is emitted under ``policy``."""
        if policy is ReplicaSetPolicy.NONZERO_DESIRED:
            return desired_replicas(rs) > 0
        return table.is_current(rs)
