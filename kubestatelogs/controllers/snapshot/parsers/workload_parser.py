"""Workload parser - deployments, replication controllers and autoscalers."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from kubestatelogs.constants.defaults import HPA_MIN_REPLICAS_DEFAULT
from kubestatelogs.constants.values import (
    HPA_CONDITION_ABLE_TO_SCALE,
    HPA_CONDITION_SCALING_ACTIVE,
    HPA_CONDITION_SCALING_LIMITED,
    WORKLOAD_CONDITION_AVAILABLE,
    WORKLOAD_CONDITION_PROGRESSING,
    WORKLOAD_CONDITION_REPLICA_FAILURE,
)
from kubestatelogs.controllers.snapshot.selectors.currency import desired_replicas
from kubestatelogs.models.records import (
    DeploymentRecord,
    HorizontalPodAutoscalerRecord,
    ReplicationControllerRecord,
)
from kubestatelogs.models.state.collection_stats import CollectionStats
from kubestatelogs.utils.conditions import condition_is_true
from kubestatelogs.utils.field_extraction import (
    as_list,
    as_mapping,
    coerce_int,
    coerce_str,
    extract_envelope_fields,
    extract_generation,
)

# Metric source type and target type for resource utilization (autoscaling/v2).
_METRIC_TYPE_RESOURCE = "Resource"
_TARGET_TYPE_UTILIZATION = "Utilization"


class WorkloadParser:
    """Parses replicated workload objects into records."""

    def parse_deployment(
        self,
        deployment: Mapping[str, Any],
        capture_time: datetime,
        stats: CollectionStats | None = None,
    ) -> DeploymentRecord:
        spec = as_mapping(deployment.get("spec"))
        status = as_mapping(deployment.get("status"))
        strategy = as_mapping(spec.get("strategy"))
        rolling_update = as_mapping(strategy.get("rollingUpdate"))
        conditions = status.get("conditions")

        return DeploymentRecord(
            **extract_envelope_fields(deployment),
            timestamp=capture_time,
            desired_replicas=desired_replicas(deployment),
            current_replicas=coerce_int(status.get("replicas")),
            ready_replicas=coerce_int(status.get("readyReplicas")),
            available_replicas=coerce_int(status.get("availableReplicas")),
            unavailable_replicas=coerce_int(status.get("unavailableReplicas")),
            updated_replicas=coerce_int(status.get("updatedReplicas")),
            observed_generation=coerce_int(status.get("observedGeneration")),
            strategy_type=coerce_str(strategy.get("type")),
            strategy_rolling_update_max_surge=self._int_or_string(rolling_update.get("maxSurge")),
            strategy_rolling_update_max_unavailable=self._int_or_string(
                rolling_update.get("maxUnavailable")
            ),
            condition_available=condition_is_true(conditions, WORKLOAD_CONDITION_AVAILABLE),
            condition_progressing=condition_is_true(conditions, WORKLOAD_CONDITION_PROGRESSING),
            condition_replica_failure=condition_is_true(
                conditions, WORKLOAD_CONDITION_REPLICA_FAILURE
            ),
            paused=spec.get("paused") is True,
            metadata_generation=extract_generation(deployment),
        )

    def parse_replication_controller(
        self,
        rc: Mapping[str, Any],
        capture_time: datetime,
        stats: CollectionStats | None = None,
    ) -> ReplicationControllerRecord:
        status = as_mapping(rc.get("status"))
        return ReplicationControllerRecord(
            **extract_envelope_fields(rc),
            timestamp=capture_time,
            desired_replicas=desired_replicas(rc),
            current_replicas=coerce_int(status.get("replicas")),
            ready_replicas=coerce_int(status.get("readyReplicas")),
            available_replicas=coerce_int(status.get("availableReplicas")),
            fully_labeled_replicas=coerce_int(status.get("fullyLabeledReplicas")),
            observed_generation=coerce_int(status.get("observedGeneration")),
        )

    def parse_horizontal_pod_autoscaler(
        self,
        hpa: Mapping[str, Any],
        capture_time: datetime,
        stats: CollectionStats | None = None,
    ) -> HorizontalPodAutoscalerRecord:
        """Parse an autoscaling/v2 HorizontalPodAutoscaler.

        Target utilizations come from ``spec.metrics`` entries of type Resource
        with a Utilization target; current utilizations from
        ``status.currentMetrics``. Unset ``spec.minReplicas`` defaults to 1.
        """
        spec = as_mapping(hpa.get("spec"))
        status = as_mapping(hpa.get("status"))
        conditions = status.get("conditions")
        scale_target = as_mapping(spec.get("scaleTargetRef"))

        targets = self._resource_utilizations(spec.get("metrics"), "target")
        current = self._resource_utilizations(status.get("currentMetrics"), "current")

        min_replicas = spec.get("minReplicas")
        return HorizontalPodAutoscalerRecord(
            **extract_envelope_fields(hpa),
            timestamp=capture_time,
            min_replicas=(
                HPA_MIN_REPLICAS_DEFAULT
                if min_replicas is None
                else coerce_int(min_replicas, HPA_MIN_REPLICAS_DEFAULT)
            ),
            max_replicas=coerce_int(spec.get("maxReplicas")),
            target_cpu_utilization_percentage=targets.get("cpu"),
            target_memory_utilization_percentage=targets.get("memory"),
            current_replicas=coerce_int(status.get("currentReplicas")),
            desired_replicas=coerce_int(status.get("desiredReplicas")),
            current_cpu_utilization_percentage=current.get("cpu"),
            current_memory_utilization_percentage=current.get("memory"),
            condition_able_to_scale=condition_is_true(conditions, HPA_CONDITION_ABLE_TO_SCALE),
            condition_scaling_active=condition_is_true(conditions, HPA_CONDITION_SCALING_ACTIVE),
            condition_scaling_limited=condition_is_true(conditions, HPA_CONDITION_SCALING_LIMITED),
            scale_target_ref=coerce_str(scale_target.get("name")),
            scale_target_kind=coerce_str(scale_target.get("kind")),
        )

    @staticmethod
    def _resource_utilizations(metrics: Any, value_key: str) -> dict[str, int]:
        """Average utilization per resource name from a list of metric specs or statuses.

        For spec targets only Utilization-type targets count. Later entries
        for the same resource override earlier ones.
        """
        utilizations: dict[str, int] = {}
        for metric in as_list(metrics):
            metric = as_mapping(metric)
            if metric.get("type") != _METRIC_TYPE_RESOURCE:
                continue
            resource = as_mapping(metric.get("resource"))
            value = as_mapping(resource.get(value_key))
            if value_key == "target" and value.get("type") != _TARGET_TYPE_UTILIZATION:
                continue
            utilization = value.get("averageUtilization")
            if utilization is None:
                continue
            utilizations[coerce_str(resource.get("name"))] = coerce_int(utilization)
        return utilizations

    @staticmethod
    def _int_or_string(value: Any) -> int | str:
        """IntOrString field: ints stay ints, percentages stay strings, unset is 0."""
        if value is None:
            return 0
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return coerce_str(value)
