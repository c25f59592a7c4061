"""Record models emitted by the collection engine."""

from kubestatelogs.models.records.envelope import RecordEnvelope, RecordModel
from kubestatelogs.models.records.pod import (
    ContainerRecord,
    PersistentVolumeClaimRef,
    PodRecord,
    Toleration,
)
from kubestatelogs.models.records.policy import (
    LimitRangeItem,
    LimitRangeRecord,
    ResourceQuotaRecord,
)
from kubestatelogs.models.records.rbac import (
    ClusterRoleBindingRecord,
    ClusterRoleRecord,
    PolicyRule,
    RoleBindingRecord,
    RoleRecord,
    RoleRef,
    Subject,
)
from kubestatelogs.models.records.workloads import (
    DeploymentRecord,
    HorizontalPodAutoscalerRecord,
    ReplicaSetRecord,
    ReplicationControllerRecord,
)

# Any record produced by a transformer.
Record = RecordEnvelope

__all__ = [
    "ClusterRoleBindingRecord",
    "ClusterRoleRecord",
    "ContainerRecord",
    "DeploymentRecord",
    "HorizontalPodAutoscalerRecord",
    "LimitRangeItem",
    "LimitRangeRecord",
    "PersistentVolumeClaimRef",
    "PodRecord",
    "PolicyRule",
    "Record",
    "RecordEnvelope",
    "RecordModel",
    "ReplicaSetRecord",
    "ReplicationControllerRecord",
    "ResourceQuotaRecord",
    "RoleBindingRecord",
    "RoleRecord",
    "RoleRef",
    "Subject",
    "Toleration",
]
