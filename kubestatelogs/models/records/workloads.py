"""Replicated workload record models."""

from __future__ import annotations

from pydantic import Field

from kubestatelogs.constants.enums import ResourceType
from kubestatelogs.models.records.envelope import RecordEnvelope


class ReplicaSetRecord(RecordEnvelope):
    """State of one replicaset.

    ``conditions`` maps every condition type to True, False or None (Unknown);
    the three ``condition_*`` fields promote the well-known types.
    """

    resource_type: ResourceType = ResourceType.REPLICASET

    desired_replicas: int = 1
    current_replicas: int = 0
    ready_replicas: int = 0
    available_replicas: int = 0
    fully_labeled_replicas: int = 0
    observed_generation: int = 0

    conditions: dict[str, bool | None] = Field(default_factory=dict)
    condition_available: bool = False
    condition_progressing: bool = False
    condition_replica_failure: bool = False

    is_current: bool = False


class DeploymentRecord(RecordEnvelope):
    """State of one deployment."""

    resource_type: ResourceType = ResourceType.DEPLOYMENT

    desired_replicas: int = 1
    current_replicas: int = 0
    ready_replicas: int = 0
    available_replicas: int = 0
    unavailable_replicas: int = 0
    updated_replicas: int = 0
    observed_generation: int = 0

    strategy_type: str = ""
    # IntOrString in the API: an absolute count or a percentage such as "25%".
    strategy_rolling_update_max_surge: int | str = 0
    strategy_rolling_update_max_unavailable: int | str = 0

    condition_available: bool = False
    condition_progressing: bool = False
    condition_replica_failure: bool = False

    paused: bool = False
    metadata_generation: int = 0


class ReplicationControllerRecord(RecordEnvelope):
    """State of one replication controller."""

    resource_type: ResourceType = ResourceType.REPLICATION_CONTROLLER

    desired_replicas: int = 1
    current_replicas: int = 0
    ready_replicas: int = 0
    available_replicas: int = 0
    fully_labeled_replicas: int = 0
    observed_generation: int = 0


class HorizontalPodAutoscalerRecord(RecordEnvelope):
    """State of one horizontal pod autoscaler (autoscaling/v2 shape)."""

    resource_type: ResourceType = ResourceType.HORIZONTAL_POD_AUTOSCALER

    min_replicas: int = 1
    max_replicas: int = 0
    target_cpu_utilization_percentage: int | None = Field(
        default=None, alias="targetCPUUtilizationPercentage"
    )
    target_memory_utilization_percentage: int | None = None

    current_replicas: int = 0
    desired_replicas: int = 0
    current_cpu_utilization_percentage: int | None = Field(
        default=None, alias="currentCPUUtilizationPercentage"
    )
    current_memory_utilization_percentage: int | None = None

    condition_able_to_scale: bool = False
    condition_scaling_active: bool = False
    condition_scaling_limited: bool = False

    scale_target_ref: str = ""
    scale_target_kind: str = ""
