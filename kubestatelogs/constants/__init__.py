"""Constants module for kube-state-logs.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (strings, condition names with Final)
- timeouts.py: Timeout values (seconds)
- limits.py: Limit values (max/min)
- defaults.py: Default values for settings and record fields
"""

from kubestatelogs.constants.defaults import (
    DESIRED_REPLICAS_DEFAULT,
    HPA_MIN_REPLICAS_DEFAULT,
    LOG_INTERVAL_SECONDS_DEFAULT,
    LOG_LEVEL_DEFAULT,
    PARALLELISM_DEFAULT,
    QOS_CLASS_DEFAULT,
    REPLICASET_POLICY_DEFAULT,
    RESOURCES_DEFAULT,
)
from kubestatelogs.constants.enums import (
    ContainerState,
    QoSClass,
    QuantityFormat,
    ReplicaSetPolicy,
    ResourceType,
)
from kubestatelogs.constants.limits import (
    LOG_INTERVAL_MIN,
    PARALLELISM_MAX,
    PARALLELISM_MIN,
)
from kubestatelogs.constants.timeouts import (
    CACHE_SYNC_TIMEOUT,
    SHUTDOWN_TIMEOUT,
)
from kubestatelogs.constants.values import (
    APP_TITLE,
    LOG_LEVELS,
)

__all__ = [
    # Application
    "APP_TITLE",
    # Timeouts
    "CACHE_SYNC_TIMEOUT",
    # Defaults
    "DESIRED_REPLICAS_DEFAULT",
    "HPA_MIN_REPLICAS_DEFAULT",
    "LOG_INTERVAL_MIN",
    "LOG_INTERVAL_SECONDS_DEFAULT",
    "LOG_LEVELS",
    "LOG_LEVEL_DEFAULT",
    "PARALLELISM_DEFAULT",
    # Limits
    "PARALLELISM_MAX",
    "PARALLELISM_MIN",
    "QOS_CLASS_DEFAULT",
    "REPLICASET_POLICY_DEFAULT",
    "RESOURCES_DEFAULT",
    "SHUTDOWN_TIMEOUT",
    # Enums
    "ContainerState",
    "QoSClass",
    "QuantityFormat",
    "ReplicaSetPolicy",
    "ResourceType",
]
