"""ReplicaSet parser."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from kubestatelogs.constants.values import (
    WORKLOAD_CONDITION_AVAILABLE,
    WORKLOAD_CONDITION_PROGRESSING,
    WORKLOAD_CONDITION_REPLICA_FAILURE,
)
from kubestatelogs.controllers.snapshot.selectors.currency import desired_replicas
from kubestatelogs.models.records import ReplicaSetRecord
from kubestatelogs.models.state.collection_stats import CollectionStats
from kubestatelogs.utils.conditions import condition_is_true, condition_status_map
from kubestatelogs.utils.field_extraction import as_mapping, coerce_int, extract_envelope_fields


class ReplicaSetParser:
    """Parses replicaset objects into records."""

    def parse_replicaset(
        self,
        rs: Mapping[str, Any],
        capture_time: datetime,
        stats: CollectionStats | None = None,
        *,
        is_current: bool = False,
    ) -> ReplicaSetRecord:
        """Parse a single replicaset.

        ``is_current`` comes from the currency table of the running pass.
        """
        status = as_mapping(rs.get("status"))
        conditions = status.get("conditions")
        return ReplicaSetRecord(
            **extract_envelope_fields(rs),
            timestamp=capture_time,
            desired_replicas=desired_replicas(rs),
            current_replicas=coerce_int(status.get("replicas")),
            ready_replicas=coerce_int(status.get("readyReplicas")),
            available_replicas=coerce_int(status.get("availableReplicas")),
            fully_labeled_replicas=coerce_int(status.get("fullyLabeledReplicas")),
            observed_generation=coerce_int(status.get("observedGeneration")),
            conditions=condition_status_map(conditions),
            condition_available=condition_is_true(conditions, WORKLOAD_CONDITION_AVAILABLE),
            condition_progressing=condition_is_true(conditions, WORKLOAD_CONDITION_PROGRESSING),
            condition_replica_failure=condition_is_true(
                conditions, WORKLOAD_CONDITION_REPLICA_FAILURE
            ),
            is_current=is_current,
        )
