"""Default values for settings and record fields.

All default values used in AppSettings model, transformers and validation fallback values.
"""

from typing import Final

from kubestatelogs.constants.enums import QoSClass, ReplicaSetPolicy

# ============================================================================
# Collection defaults
# ============================================================================

LOG_INTERVAL_SECONDS_DEFAULT: Final = 60.0
LOG_LEVEL_DEFAULT: Final = "info"
PARALLELISM_DEFAULT: Final = 1
REPLICASET_POLICY_DEFAULT: Final = ReplicaSetPolicy.CURRENT.value

RESOURCES_DEFAULT: Final = (
    "pods",
    "containers",
    "replicasets",
    "deployments",
    "replicationcontrollers",
    "horizontalpodautoscalers",
    "limitranges",
    "resourcequotas",
    "roles",
    "clusterroles",
    "rolebindings",
    "clusterrolebindings",
)

# ============================================================================
# Record field defaults (Kubernetes API documented defaults)
# ============================================================================

# spec.replicas is optional on every replicated workload and defaults to 1.
# See: https://kubernetes.io/docs/concepts/workloads/controllers/replicaset/
DESIRED_REPLICAS_DEFAULT: Final = 1

# spec.minReplicas on HorizontalPodAutoscaler defaults to 1.
# See: https://kubernetes.io/docs/tasks/run-application/horizontal-pod-autoscale/
HPA_MIN_REPLICAS_DEFAULT: Final = 1

# status.qosClass is absent until the kubelet fills it in.
# See: https://kubernetes.io/docs/concepts/workloads/pods/pod-qos/#qos-classes
QOS_CLASS_DEFAULT: Final = QoSClass.BEST_EFFORT.value

__all__ = [
    "DESIRED_REPLICAS_DEFAULT",
    "HPA_MIN_REPLICAS_DEFAULT",
    "LOG_INTERVAL_SECONDS_DEFAULT",
    "LOG_LEVEL_DEFAULT",
    "PARALLELISM_DEFAULT",
    "QOS_CLASS_DEFAULT",
    "REPLICASET_POLICY_DEFAULT",
    "RESOURCES_DEFAULT",
]
