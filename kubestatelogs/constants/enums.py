"""All enum definitions for kube-state-logs.

This module consolidates all enumerations used throughout the application.
"""

from enum import Enum

# =============================================================================
# Record Enums
# =============================================================================

class ResourceType(str, Enum):
    """Resource type tag carried by every emitted record."""

    POD = "pod"
    CONTAINER = "container"
    INIT_CONTAINER = "init_container"
    REPLICASET = "replicaset"
    DEPLOYMENT = "deployment"
    REPLICATION_CONTROLLER = "replicationcontroller"
    HORIZONTAL_POD_AUTOSCALER = "horizontalpodautoscaler"
    LIMIT_RANGE = "limitrange"
    RESOURCE_QUOTA = "resourcequota"
    ROLE = "role"
    CLUSTER_ROLE = "clusterrole"
    ROLE_BINDING = "rolebinding"
    CLUSTER_ROLE_BINDING = "clusterrolebinding"


class QoSClass(Enum):
    """Kubernetes QoS class values."""

    GUARANTEED = "Guaranteed"
    BURSTABLE = "Burstable"
    BEST_EFFORT = "BestEffort"


class ContainerState(Enum):
    """Container state names as reported in container records."""

    RUNNING = "running"
    WAITING = "waiting"
    TERMINATED = "terminated"
    UNKNOWN = "unknown"


# =============================================================================
# Selection Enums
# =============================================================================

class ReplicaSetPolicy(str, Enum):
    """Which replicasets a collection emits.

    CURRENT keeps only the newest replicaset of each owner group.
    NONZERO_DESIRED keeps every replicaset whose desired replica count is > 0.
    """

    CURRENT = "current"
    NONZERO_DESIRED = "nonzero-desired"


# =============================================================================
# Quantity Enums
# =============================================================================

class QuantityFormat(Enum):
    """Serialization format of a resource quantity, chosen by its suffix."""

    DECIMAL_SI = "DecimalSI"
    BINARY_SI = "BinarySI"
    DECIMAL_EXPONENT = "DecimalExponent"


__all__ = [
    # Records
    "ResourceType",
    "QoSClass",
    "ContainerState",
    # Selection
    "ReplicaSetPolicy",
    # Quantities
    "QuantityFormat",
]
