"""Resource parsers - one method per resource kind."""

from kubestatelogs.controllers.snapshot.parsers.pod_parser import PodParser
from kubestatelogs.controllers.snapshot.parsers.policy_parser import PolicyParser
from kubestatelogs.controllers.snapshot.parsers.rbac_parser import RbacParser
from kubestatelogs.controllers.snapshot.parsers.replicaset_parser import ReplicaSetParser
from kubestatelogs.controllers.snapshot.parsers.workload_parser import WorkloadParser

__all__ = ["PodParser", "PolicyParser", "RbacParser", "ReplicaSetParser", "WorkloadParser"]
