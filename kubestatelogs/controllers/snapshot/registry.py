"""Transformer table: resource kind -> how it is listed, checked and parsed.

Every supported kind is one ``ResourceKindSpec`` row. Adding a kind means
adding a row and a parser method; the collection engine never branches on
kind names.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from kubestatelogs.constants.enums import ResourceType
from kubestatelogs.controllers.snapshot.parsers.policy_parser import PolicyParser
from kubestatelogs.controllers.snapshot.parsers.pod_parser import PodParser
from kubestatelogs.controllers.snapshot.parsers.rbac_parser import RbacParser
from kubestatelogs.controllers.snapshot.parsers.replicaset_parser import ReplicaSetParser
from kubestatelogs.controllers.snapshot.parsers.workload_parser import WorkloadParser
from kubestatelogs.models.state.collection_stats import CollectionStats

Transform = Callable[[Mapping[str, Any], datetime, CollectionStats], Any]


class UnknownResourceError(KeyError):
    """Raised when a resource name matches no supported kind."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"unknown resource {self.name!r}; supported: {', '.join(kind_names())}"


@dataclass(frozen=True)
class ResourceKindSpec:
    """How one resource kind is collected.

    Attributes:
        name: Plural resource name used in settings and on the command line
        resource_type: Tag carried by the emitted records
        kind: API ``kind`` the cached objects must have
        api_version: API group/version the kind is listed from
        namespaced: False for cluster-scoped kinds, which ignore namespace filters
        store_key: Name of the store the objects are read from
        transform: Parser callable ``(raw, capture_time, stats)``
        many: True when the transform returns a list of records per object
        uses_currency: True when emission goes through replicaset currency selection
        api_class: ``kubernetes.client`` API class that lists the kind
        list_method: Cluster-wide list method on ``api_class``
        aliases: Other accepted spellings of ``name``
    """

    name: str
    resource_type: ResourceType
    kind: str
    api_version: str
    namespaced: bool
    store_key: str
    transform: Transform
    api_class: str
    list_method: str
    many: bool = False
    uses_currency: bool = False
    aliases: tuple[str, ...] = field(default_factory=tuple)


_pod_parser = PodParser()
_replicaset_parser = ReplicaSetParser()
_workload_parser = WorkloadParser()
_policy_parser = PolicyParser()
_rbac_parser = RbacParser()

KIND_SPECS: tuple[ResourceKindSpec, ...] = (
    ResourceKindSpec(
        name="pods",
        resource_type=ResourceType.POD,
        kind="Pod",
        api_version="v1",
        namespaced=True,
        store_key="pods",
        transform=_pod_parser.parse_pod,
        api_class="CoreV1Api",
        list_method="list_pod_for_all_namespaces",
        aliases=("pod",),
    ),
    ResourceKindSpec(
        name="containers",
        resource_type=ResourceType.CONTAINER,
        kind="Pod",
        api_version="v1",
        namespaced=True,
        store_key="pods",
        transform=_pod_parser.parse_containers,
        api_class="CoreV1Api",
        list_method="list_pod_for_all_namespaces",
        many=True,
        aliases=("container",),
    ),
    ResourceKindSpec(
        name="replicasets",
        resource_type=ResourceType.REPLICASET,
        kind="ReplicaSet",
        api_version="apps/v1",
        namespaced=True,
        store_key="replicasets",
        transform=_replicaset_parser.parse_replicaset,
        api_class="AppsV1Api",
        list_method="list_replica_set_for_all_namespaces",
        uses_currency=True,
        aliases=("replicaset",),
    ),
    ResourceKindSpec(
        name="deployments",
        resource_type=ResourceType.DEPLOYMENT,
        kind="Deployment",
        api_version="apps/v1",
        namespaced=True,
        store_key="deployments",
        transform=_workload_parser.parse_deployment,
        api_class="AppsV1Api",
        list_method="list_deployment_for_all_namespaces",
        aliases=("deployment",),
    ),
    ResourceKindSpec(
        name="replicationcontrollers",
        resource_type=ResourceType.REPLICATION_CONTROLLER,
        kind="ReplicationController",
        api_version="v1",
        namespaced=True,
        store_key="replicationcontrollers",
        transform=_workload_parser.parse_replication_controller,
        api_class="CoreV1Api",
        list_method="list_replication_controller_for_all_namespaces",
        aliases=("replicationcontroller",),
    ),
    ResourceKindSpec(
        name="horizontalpodautoscalers",
        resource_type=ResourceType.HORIZONTAL_POD_AUTOSCALER,
        kind="HorizontalPodAutoscaler",
        api_version="autoscaling/v2",
        namespaced=True,
        store_key="horizontalpodautoscalers",
        transform=_workload_parser.parse_horizontal_pod_autoscaler,
        api_class="AutoscalingV2Api",
        list_method="list_horizontal_pod_autoscaler_for_all_namespaces",
        aliases=("horizontalpodautoscaler", "hpa", "hpas"),
    ),
    ResourceKindSpec(
        name="limitranges",
        resource_type=ResourceType.LIMIT_RANGE,
        kind="LimitRange",
        api_version="v1",
        namespaced=True,
        store_key="limitranges",
        transform=_policy_parser.parse_limit_range,
        api_class="CoreV1Api",
        list_method="list_limit_range_for_all_namespaces",
        aliases=("limitrange",),
    ),
    ResourceKindSpec(
        name="resourcequotas",
        resource_type=ResourceType.RESOURCE_QUOTA,
        kind="ResourceQuota",
        api_version="v1",
        namespaced=True,
        store_key="resourcequotas",
        transform=_policy_parser.parse_resource_quota,
        api_class="CoreV1Api",
        list_method="list_resource_quota_for_all_namespaces",
        aliases=("resourcequota",),
    ),
    ResourceKindSpec(
        name="roles",
        resource_type=ResourceType.ROLE,
        kind="Role",
        api_version="rbac.authorization.k8s.io/v1",
        namespaced=True,
        store_key="roles",
        transform=_rbac_parser.parse_role,
        api_class="RbacAuthorizationV1Api",
        list_method="list_role_for_all_namespaces",
        aliases=("role",),
    ),
    ResourceKindSpec(
        name="clusterroles",
        resource_type=ResourceType.CLUSTER_ROLE,
        kind="ClusterRole",
        api_version="rbac.authorization.k8s.io/v1",
        namespaced=False,
        store_key="clusterroles",
        transform=_rbac_parser.parse_cluster_role,
        api_class="RbacAuthorizationV1Api",
        list_method="list_cluster_role",
        aliases=("clusterrole",),
    ),
    ResourceKindSpec(
        name="rolebindings",
        resource_type=ResourceType.ROLE_BINDING,
        kind="RoleBinding",
        api_version="rbac.authorization.k8s.io/v1",
        namespaced=True,
        store_key="rolebindings",
        transform=_rbac_parser.parse_role_binding,
        api_class="RbacAuthorizationV1Api",
        list_method="list_role_binding_for_all_namespaces",
        aliases=("rolebinding",),
    ),
    ResourceKindSpec(
        name="clusterrolebindings",
        resource_type=ResourceType.CLUSTER_ROLE_BINDING,
        kind="ClusterRoleBinding",
        api_version="rbac.authorization.k8s.io/v1",
        namespaced=False,
        store_key="clusterrolebindings",
        transform=_rbac_parser.parse_cluster_role_binding,
        api_class="RbacAuthorizationV1Api",
        list_method="list_cluster_role_binding",
        aliases=("clusterrolebinding",),
    ),
)

_SPECS_BY_NAME: dict[str, ResourceKindSpec] = {}
for _spec in KIND_SPECS:
    for _alias in (_spec.name, *_spec.aliases):
        _SPECS_BY_NAME[_alias] = _spec


def kind_names() -> list[str]:
    """Plural names of every supported kind, in table order."""
    return [spec.name for spec in KIND_SPECS]


def get_kind_spec(name: str) -> ResourceKindSpec:
    """Look up a kind by its plural name or an alias (case-insensitive).

    Raises:
        UnknownResourceError: if no kind matches.
    """
    spec = _SPECS_BY_NAME.get(name.strip().lower())
    if spec is None:
        raise UnknownResourceError(name)
    return spec


def resolve_kinds(names: Iterable[str]) -> list[ResourceKindSpec]:
    """Resolve names to kinds, dropping duplicates and keeping first-seen order."""
    resolved: list[ResourceKindSpec] = []
    for name in names:
        spec = get_kind_spec(name)
        if spec not in resolved:
            resolved.append(spec)
    return resolved


def store_keys(specs: Iterable[ResourceKindSpec]) -> dict[str, ResourceKindSpec]:
    """One kind per distinct store, so each store is built once."""
    stores: dict[str, ResourceKindSpec] = {}
    for spec in specs:
        stores.setdefault(spec.store_key, spec)
    return stores
