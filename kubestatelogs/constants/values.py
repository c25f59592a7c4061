"""Scalar constants for kube-state-logs.

All application-level constants with proper type hints using Final.
"""

from typing import Final

# ============================================================================
# Application
# ============================================================================

APP_TITLE: Final = "kube-state-logs"
LOG_LEVELS: Final = ("debug", "info", "warn", "error")

# ============================================================================
# Condition types
# ============================================================================

CONDITION_TRUE: Final = "True"
CONDITION_FALSE: Final = "False"

POD_CONDITION_READY: Final = "Ready"
POD_CONDITION_INITIALIZED: Final = "Initialized"
POD_CONDITION_SCHEDULED: Final = "PodScheduled"
POD_CONDITION_CONTAINERS_READY: Final = "ContainersReady"

WORKLOAD_CONDITION_AVAILABLE: Final = "Available"
WORKLOAD_CONDITION_PROGRESSING: Final = "Progressing"
WORKLOAD_CONDITION_REPLICA_FAILURE: Final = "ReplicaFailure"

HPA_CONDITION_ABLE_TO_SCALE: Final = "AbleToScale"
HPA_CONDITION_SCALING_ACTIVE: Final = "ScalingActive"
HPA_CONDITION_SCALING_LIMITED: Final = "ScalingLimited"

# ============================================================================
# Pod phases
# ============================================================================

POD_PHASE_SUCCEEDED: Final = "Succeeded"

# ============================================================================
# Quantity aggregation
# ============================================================================

# Joins a running total and a new value when the total can no longer be parsed.
AGGREGATION_FALLBACK_SEPARATOR: Final = " + "

__all__ = [
    "AGGREGATION_FALLBACK_SEPARATOR",
    "APP_TITLE",
    "CONDITION_FALSE",
    "CONDITION_TRUE",
    "HPA_CONDITION_ABLE_TO_SCALE",
    "HPA_CONDITION_SCALING_ACTIVE",
    "HPA_CONDITION_SCALING_LIMITED",
    "LOG_LEVELS",
    "POD_CONDITION_CONTAINERS_READY",
    "POD_CONDITION_INITIALIZED",
    "POD_CONDITION_READY",
    "POD_CONDITION_SCHEDULED",
    "POD_PHASE_SUCCEEDED",
    "WORKLOAD_CONDITION_AVAILABLE",
    "WORKLOAD_CONDITION_PROGRESSING",
    "WORKLOAD_CONDITION_REPLICA_FAILURE",
]
