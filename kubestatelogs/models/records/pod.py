"""Pod and container record models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from kubestatelogs.constants.enums import ContainerState, ResourceType
from kubestatelogs.models.records.envelope import RecordEnvelope, RecordModel


class Toleration(RecordModel):
    """A pod toleration."""

    key: str = ""
    value: str = ""
    effect: str = ""
    operator: str = ""
    toleration_seconds: str = ""


class PersistentVolumeClaimRef(RecordModel):
    """A PVC referenced by a pod volume."""

    claim_name: str
    read_only: bool = False


class PodRecord(RecordEnvelope):
    """State of one pod."""

    resource_type: ResourceType = ResourceType.POD

    node_name: str = ""
    host_ip: str = Field(default="", alias="hostIP")
    pod_ip: str = Field(default="", alias="podIP")
    pod_ips: list[str] = Field(default_factory=list, alias="podIPs")
    phase: str = ""
    qos_class: str = ""
    priority_class: str = ""

    ready: bool = False
    initialized: bool = False
    scheduled: bool = False
    containers_ready: bool = False
    pod_scheduled: bool = False

    restart_count: int = 0

    deletion_timestamp: datetime | None = None
    start_time: datetime | None = None
    initialized_time: datetime | None = None
    ready_time: datetime | None = None
    scheduled_time: datetime | None = None
    completion_time: datetime | None = None

    status_reason: str = ""
    unschedulable: bool = False
    restart_policy: str = ""
    service_account: str = ""
    scheduler_name: str = ""
    overhead_cpu_cores: str = Field(default="", alias="overheadCPUCores")
    overhead_memory_bytes: str = ""
    runtime_class_name: str = ""

    tolerations: list[Toleration] = Field(default_factory=list)
    node_selectors: dict[str, str] = Field(default_factory=dict)
    persistent_volume_claims: list[PersistentVolumeClaimRef] = Field(default_factory=list)

    # Summed across spec.containers; a value may be "<a> + <b>" when a sum failed.
    resource_requests: dict[str, str] = Field(default_factory=dict)
    resource_limits: dict[str, str] = Field(default_factory=dict)


class ContainerRecord(RecordEnvelope):
    """State of one container (or init container) of a pod."""

    resource_type: ResourceType = ResourceType.CONTAINER

    image: str = ""
    image_id: str = Field(default="", alias="imageID")
    pod_name: str = ""

    ready: bool = False
    restart_count: int = 0
    state: ContainerState = ContainerState.UNKNOWN
    state_running: bool = False
    state_waiting: bool = False
    state_terminated: bool = False

    waiting_reason: str = ""
    waiting_message: str = ""
    started_at: datetime | None = None

    exit_code: int = 0
    reason: str = ""
    message: str = ""
    finished_at: datetime | None = None
    started_at_term: datetime | None = None

    resource_requests: dict[str, str] = Field(default_factory=dict)
    resource_limits: dict[str, str] = Field(default_factory=dict)

    last_terminated_reason: str = ""
    last_terminated_exit_code: int = 0
    last_terminated_timestamp: datetime | None = None
    state_started: datetime | None = None
