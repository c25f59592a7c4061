"""Pod parser - turns raw pod objects into pod and container records."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from kubestatelogs.constants.defaults import QOS_CLASS_DEFAULT
from kubestatelogs.constants.enums import ContainerState, ResourceType
from kubestatelogs.constants.values import (
    POD_CONDITION_CONTAINERS_READY,
    POD_CONDITION_INITIALIZED,
    POD_CONDITION_READY,
    POD_CONDITION_SCHEDULED,
    POD_PHASE_SUCCEEDED,
)
from kubestatelogs.models.records import (
    ContainerRecord,
    PersistentVolumeClaimRef,
    PodRecord,
    Toleration,
)
from kubestatelogs.models.state.collection_stats import CollectionStats
from kubestatelogs.utils.conditions import (
    any_condition_false,
    condition_is_true,
    first_false_condition_reason,
    true_condition_transition_time,
)
from kubestatelogs.utils.field_extraction import (
    as_list,
    as_mapping,
    coerce_int,
    coerce_str,
    extract_creation_timestamp,
    extract_deletion_timestamp,
    extract_envelope_fields,
    extract_name,
    extract_namespace,
    parse_timestamp,
    string_map,
)
from kubestatelogs.utils.quantity import (
    Quantity,
    QuantityParseError,
    aggregate_resource_maps,
    format_resource_map,
)


class PodParser:
    """Parses pod objects into records."""

    def parse_pod(
        self,
        pod: Mapping[str, Any],
        capture_time: datetime,
        stats: CollectionStats | None = None,
    ) -> PodRecord:
        """Parse a single pod into a PodRecord.

        Args:
            pod: Raw pod dictionary from the API
            capture_time: Capture timestamp of the collection pass
            stats: Counters of the running collection, updated in place

        Returns:
            PodRecord object.
        """
        spec = as_mapping(pod.get("spec"))
        status = as_mapping(pod.get("status"))
        conditions = status.get("conditions")
        containers = [as_mapping(c) for c in as_list(spec.get("containers"))]

        requests, request_fallbacks = aggregate_resource_maps(
            as_mapping(c.get("resources")).get("requests") for c in containers
        )
        limits, limit_fallbacks = aggregate_resource_maps(
            as_mapping(c.get("resources")).get("limits") for c in containers
        )
        if stats is not None:
            stats.aggregation_fallbacks += request_fallbacks + limit_fallbacks

        phase = coerce_str(status.get("phase"))
        start_time = parse_timestamp(status.get("startTime"))
        overhead = as_mapping(spec.get("overhead"))

        return PodRecord(
            **extract_envelope_fields(pod),
            timestamp=capture_time,
            node_name=coerce_str(spec.get("nodeName")),
            host_ip=coerce_str(status.get("hostIP")),
            pod_ip=coerce_str(status.get("podIP")),
            pod_ips=self._pod_ips(status),
            phase=phase,
            qos_class=coerce_str(status.get("qosClass")) or QOS_CLASS_DEFAULT,
            priority_class=coerce_str(spec.get("priorityClassName")),
            ready=condition_is_true(conditions, POD_CONDITION_READY),
            initialized=condition_is_true(conditions, POD_CONDITION_INITIALIZED),
            scheduled=condition_is_true(conditions, POD_CONDITION_SCHEDULED),
            containers_ready=condition_is_true(conditions, POD_CONDITION_CONTAINERS_READY),
            pod_scheduled=condition_is_true(conditions, POD_CONDITION_SCHEDULED),
            restart_count=self._restart_count(status),
            deletion_timestamp=extract_deletion_timestamp(pod),
            start_time=start_time,
            initialized_time=true_condition_transition_time(conditions, POD_CONDITION_INITIALIZED),
            ready_time=true_condition_transition_time(conditions, POD_CONDITION_READY),
            scheduled_time=true_condition_transition_time(conditions, POD_CONDITION_SCHEDULED),
            completion_time=start_time if phase == POD_PHASE_SUCCEEDED else None,
            status_reason=self.resolve_status_reason(status),
            unschedulable=any_condition_false(conditions, POD_CONDITION_SCHEDULED),
            restart_policy=coerce_str(spec.get("restartPolicy")),
            service_account=coerce_str(spec.get("serviceAccountName")),
            scheduler_name=coerce_str(spec.get("schedulerName")),
            overhead_cpu_cores=self._nonzero_quantity(overhead.get("cpu")),
            overhead_memory_bytes=self._nonzero_quantity(overhead.get("memory")),
            runtime_class_name=coerce_str(spec.get("runtimeClassName")),
            tolerations=self._tolerations(spec),
            node_selectors=string_map(spec.get("nodeSelector")),
            persistent_volume_claims=self._persistent_volume_claims(spec, containers),
            resource_requests=requests,
            resource_limits=limits,
        )

    def parse_containers(
        self,
        pod: Mapping[str, Any],
        capture_time: datetime,
        stats: CollectionStats | None = None,
    ) -> list[ContainerRecord]:
        """Parse every container and init container of a pod.

        Containers come first, then init containers, each in spec order. A
        container without a reported status is emitted in the unknown state.
        """
        spec = as_mapping(pod.get("spec"))
        status = as_mapping(pod.get("status"))
        records: list[ContainerRecord] = []
        for spec_key, status_key, resource_type in (
            ("containers", "containerStatuses", ResourceType.CONTAINER),
            ("initContainers", "initContainerStatuses", ResourceType.INIT_CONTAINER),
        ):
            statuses = {
                coerce_str(as_mapping(s).get("name")): as_mapping(s)
                for s in reversed(as_list(status.get(status_key)))
            }
            for container in as_list(spec.get(spec_key)):
                container = as_mapping(container)
                name = coerce_str(container.get("name"))
                if not name:
                    continue
                records.append(
                    self._container_record(
                        pod, container, statuses.get(name), resource_type, capture_time
                    )
                )
        return records

    @staticmethod
    def resolve_status_reason(status: Mapping[str, Any]) -> str:
        """Resolve the reason a pod is in its current state.

        First match wins: the pod's own reason, the reason of the first False
        condition, then the reason of the first terminated container. Entries
        are taken in the order the object lists them.
        """
        reason = coerce_str(status.get("reason"))
        if reason:
            return reason
        reason = first_false_condition_reason(status.get("conditions"))
        if reason:
            return reason
        for container_status in as_list(status.get("containerStatuses")):
            terminated = as_mapping(as_mapping(as_mapping(container_status).get("state")).get("terminated"))
            reason = coerce_str(terminated.get("reason"))
            if reason:
                return reason
        return ""

    def _restart_count(self, status: Mapping[str, Any]) -> int:
        return sum(
            coerce_int(as_mapping(s).get("restartCount"))
            for s in as_list(status.get("containerStatuses"))
        )

    def _pod_ips(self, status: Mapping[str, Any]) -> list[str]:
        # status.podIPs normally repeats status.podIP as its first entry; both are kept.
        ips: list[str] = []
        pod_ip = coerce_str(status.get("podIP"))
        if pod_ip:
            ips.append(pod_ip)
        for entry in as_list(status.get("podIPs")):
            ip = coerce_str(as_mapping(entry).get("ip"))
            if ip:
                ips.append(ip)
        return ips

    def _tolerations(self, spec: Mapping[str, Any]) -> list[Toleration]:
        tolerations = []
        for entry in as_list(spec.get("tolerations")):
            entry = as_mapping(entry)
            seconds = entry.get("tolerationSeconds")
            tolerations.append(
                Toleration(
                    key=coerce_str(entry.get("key")),
                    value=coerce_str(entry.get("value")),
                    effect=coerce_str(entry.get("effect")),
                    operator=coerce_str(entry.get("operator")),
                    toleration_seconds="" if seconds is None else str(coerce_int(seconds)),
                )
            )
        return tolerations

    def _persistent_volume_claims(
        self, spec: Mapping[str, Any], containers: list[Mapping[str, Any]]
    ) -> list[PersistentVolumeClaimRef]:
        """Claims referenced by the pod's volumes.

        A claim is read-only when any container mounts its volume read-only.
        """
        read_only_volumes = {
            coerce_str(as_mapping(mount).get("name"))
            for container in containers
            for mount in as_list(container.get("volumeMounts"))
            if as_mapping(mount).get("readOnly") is True
        }
        claims = []
        for volume in as_list(spec.get("volumes")):
            volume = as_mapping(volume)
            claim = volume.get("persistentVolumeClaim")
            if not isinstance(claim, Mapping):
                continue
            claims.append(
                PersistentVolumeClaimRef(
                    claim_name=coerce_str(claim.get("claimName")),
                    read_only=coerce_str(volume.get("name")) in read_only_volumes,
                )
            )
        return claims

    @staticmethod
    def _nonzero_quantity(raw: Any) -> str:
        """Canonical quantity string, or "" when absent, zero or unparseable."""
        if raw is None:
            return ""
        try:
            quantity = Quantity.parse(raw)
        except QuantityParseError:
            return ""
        return "" if quantity.is_zero() else quantity.canonical()

    def _container_record(
        self,
        pod: Mapping[str, Any],
        container: Mapping[str, Any],
        container_status: Mapping[str, Any] | None,
        resource_type: ResourceType,
        capture_time: datetime,
    ) -> ContainerRecord:
        resources = as_mapping(container.get("resources"))
        pod_name = extract_name(pod)
        fields: dict[str, Any] = {
            "resource_type": resource_type,
            "name": coerce_str(container.get("name")),
            "namespace": extract_namespace(pod),
            "timestamp": capture_time,
            "created_timestamp": extract_creation_timestamp(pod),
            "created_by_kind": "Pod",
            "created_by_name": pod_name,
            "image": coerce_str(container.get("image")),
            "pod_name": pod_name,
            "resource_requests": format_resource_map(resources.get("requests")),
            "resource_limits": format_resource_map(resources.get("limits")),
        }
        if container_status is None:
            return ContainerRecord(**fields)

        fields.update(
            image_id=coerce_str(container_status.get("imageID")),
            ready=container_status.get("ready") is True,
            restart_count=coerce_int(container_status.get("restartCount")),
        )

        state = as_mapping(container_status.get("state"))
        running = state.get("running")
        waiting = state.get("waiting")
        terminated = state.get("terminated")
        if isinstance(running, Mapping):
            started_at = parse_timestamp(running.get("startedAt"))
            fields.update(
                state=ContainerState.RUNNING,
                state_running=True,
                started_at=started_at,
                state_started=started_at,
            )
        elif isinstance(waiting, Mapping):
            fields.update(
                state=ContainerState.WAITING,
                state_waiting=True,
                waiting_reason=coerce_str(waiting.get("reason")),
                waiting_message=coerce_str(waiting.get("message")),
            )
        elif isinstance(terminated, Mapping):
            fields.update(
                state=ContainerState.TERMINATED,
                state_terminated=True,
                exit_code=coerce_int(terminated.get("exitCode")),
                reason=coerce_str(terminated.get("reason")),
                message=coerce_str(terminated.get("message")),
                finished_at=parse_timestamp(terminated.get("finishedAt")),
                started_at_term=parse_timestamp(terminated.get("startedAt")),
            )

        last_terminated = as_mapping(
            as_mapping(container_status.get("lastState")).get("terminated")
        )
        if last_terminated:
            fields.update(
                last_terminated_reason=coerce_str(last_terminated.get("reason")),
                last_terminated_exit_code=coerce_int(last_terminated.get("exitCode")),
                last_terminated_timestamp=parse_timestamp(last_terminated.get("finishedAt")),
            )
        return ContainerRecord(**fields)
