"""Tests for SnapshotController."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any
from unittest.mock import MagicMock

import pytest

from kubestatelogs.constants.enums import ReplicaSetPolicy, ResourceType
from kubestatelogs.controllers.snapshot.controller import SnapshotController
from kubestatelogs.controllers.snapshot.fetchers.store import InMemoryStore
from kubestatelogs.controllers.snapshot.registry import UnknownResourceError
from kubestatelogs.models.state.collection_stats import CollectionStats


def obj(kind: str, name: str, namespace: str = "", **extra: Any) -> dict:
    metadata = {"name": name, "uid": f"uid-{namespace}-{name}"}
    if namespace:
        metadata["namespace"] = namespace
    metadata.update(extra.pop("metadata", {}))
    return {"kind": kind, "metadata": metadata, **extra}


def replicaset(name: str, created: str, replicas: int = 1) -> dict:
    return obj(
        "ReplicaSet",
        name,
        "default",
        metadata={
            "creationTimestamp": created,
            "ownerReferences": [{"kind": "Deployment", "name": "web"}],
        },
        spec={"replicas": replicas},
    )


@pytest.fixture
def stores() -> dict[str, InMemoryStore]:
    """Create stores keyed by store key."""
    return {
        "pods": InMemoryStore([
            obj("Pod", "a", "default", spec={"containers": [{"name": "app"}]}),
            obj("Pod", "b", "kube-system", spec={"containers": [{"name": "app"}, {"name": "proxy"}]}),
        ]),
        "replicasets": InMemoryStore([
            replicaset("web-old", "2024-01-01T00:00:00Z", replicas=0),
            replicaset("web-new", "2024-02-01T00:00:00Z", replicas=3),
        ]),
        "clusterroles": InMemoryStore([obj("ClusterRole", "admin")]),
        "deployments": InMemoryStore([obj("Deployment", "web", "default")]),
    }


class TestCollectKind:
    """Tests for SnapshotController.collect_kind."""

    def test_collects_every_object(
        self, stores: dict[str, InMemoryStore], capture_time: datetime
    ) -> None:
        """Test collect_kind emits a record per cached object."""
        records = SnapshotController(stores).collect_kind("pods", capture_time)
        assert [record.name for record in records] == ["a", "b"]
        assert all(record.timestamp == capture_time for record in records)

    def test_containers_flatten(
        self, stores: dict[str, InMemoryStore], capture_time: datetime
    ) -> None:
        """Test containers are flattened out of their pods."""
        records = SnapshotController(stores).collect_kind("containers", capture_time)
        assert [(r.pod_name, r.name) for r in records] == [("a", "app"), ("b", "app"), ("b", "proxy")]
        assert {r.resource_type for r in records} == {ResourceType.CONTAINER}

    def test_namespace_filter(self, stores: dict[str, InMemoryStore], capture_time: datetime) -> None:
        """Test collect_kind drops objects outside the namespace filter."""
        controller = SnapshotController(stores, namespaces=["default"])
        stats = CollectionStats()
        records = controller.collect_kind("pods", capture_time, stats)
        assert [record.name for record in records] == ["a"]
        assert stats.filtered_namespace == 1
        assert stats.listed == 2
        assert stats.emitted == 1

    def test_cluster_scoped_kinds_ignore_namespace_filter(
        self, stores: dict[str, InMemoryStore], capture_time: datetime
    ) -> None:
        """Test cluster-scoped kinds ignore the namespace filter."""
        controller = SnapshotController(stores, namespaces=["default"])
        records = controller.collect_kind("clusterroles", capture_time)
        assert [record.name for record in records] == ["admin"]

    def test_type_mismatch_is_counted_and_skipped(self, capture_time: datetime) -> None:
        """Test objects of the wrong kind are counted and skipped."""
        stores = {"pods": InMemoryStore([obj("Pod", "a", "ns"), obj("Deployment", "d", "ns"), "junk"])}
        stats = CollectionStats()
        records = SnapshotController(stores).collect_kind("pods", capture_time, stats)
        assert [record.name for record in records] == ["a"]
        assert stats.skipped_type_mismatch == 2
        assert stats.skipped == 2

    def test_missing_name_is_counted_and_skipped(self, capture_time: datetime) -> None:
        """Test objects without a name are counted and skipped."""
        stores = {"pods": InMemoryStore([{"kind": "Pod", "metadata": {"namespace": "ns"}}])}
        stats = CollectionStats()
        assert SnapshotController(stores).collect_kind("pods", capture_time, stats) == []
        assert stats.skipped_missing_name == 1

    def test_replicasets_current_only(
        self, stores: dict[str, InMemoryStore], capture_time: datetime
    ) -> None:
        """Test the current policy emits only current replicasets."""
        stats = CollectionStats()
        records = SnapshotController(stores).collect_kind("replicasets", capture_time, stats)
        assert [(record.name, record.is_current) for record in records] == [("web-new", True)]
        assert stats.filtered_not_current == 1

    def test_replicasets_nonzero_desired_policy(
        self, stores: dict[str, InMemoryStore], capture_time: datetime
    ) -> None:
        """Test the nonzero-desired policy emits replicasets with desired replicas."""
        stores["replicasets"].upsert(replicaset("web-mid", "2024-01-15T00:00:00Z", replicas=2))
        controller = SnapshotController(stores, replicaset_policy=ReplicaSetPolicy.NONZERO_DESIRED)
        stats = CollectionStats()
        records = controller.collect_kind("replicasets", capture_time, stats)
        assert [(record.name, record.is_current) for record in records] == [
            ("web-new", True),
            ("web-mid", False),
        ]
        assert stats.filtered_zero_desired == 1

    def test_policy_accepts_string(self, stores: dict[str, InMemoryStore]) -> None:
        """Test collect_kind accepts the policy as a string."""
        controller = SnapshotController(stores, replicaset_policy="nonzero-desired")
        assert len(controller.collect_kind("replicasets")) == 1

    def test_currency_does_not_touch_cached_objects(
        self, stores: dict[str, InMemoryStore], capture_time: datetime
    ) -> None:
        """Test currency selection leaves cached objects untouched."""
        before = repr(stores["replicasets"].list())
        SnapshotController(stores).collect_kind("replicasets", capture_time)
        assert repr(stores["replicasets"].list()) == before

    def test_unknown_kind(self, stores: dict[str, InMemoryStore]) -> None:
        """Test collect_kind raises for an unknown kind."""
        with pytest.raises(UnknownResourceError):
            SnapshotController(stores).collect_kind("widgets")

    def test_missing_store(self, stores: dict[str, InMemoryStore]) -> None:
        """Test collect_kind raises when the kind has no store."""
        with pytest.raises(KeyError):
            SnapshotController(stores).collect_kind("roles")

    def test_store_errors_propagate(self) -> None:
        """Test store errors propagate out of collect_kind."""
        broken = MagicMock()
        broken.list.side_effect = RuntimeError("cache gone")
        with pytest.raises(RuntimeError, match="cache gone"):
            SnapshotController({"pods": broken}).collect_kind("pods")


class TestCollectPass:
    """Tests for SnapshotController.collect_pass."""

    @pytest.mark.asyncio
    async def test_single_capture_time(self, stores: dict[str, InMemoryStore]) -> None:
        """Test a pass stamps every record with one capture time."""
        result = await SnapshotController(stores).collect_pass()
        records = result.all_records()
        assert records
        assert {record.timestamp for record in records} == {result.capture_time}

    @pytest.mark.asyncio
    async def test_available_kinds_follow_stores(self, stores: dict[str, InMemoryStore]) -> None:
        """Test available kinds are those with a backing store."""
        result = await SnapshotController(stores).collect_pass()
        assert list(result.records) == ["pods", "containers", "replicasets", "deployments", "clusterroles"]
        assert result.stats["pods"].emitted == 2

    @pytest.mark.asyncio
    async def test_explicit_kinds(self, stores: dict[str, InMemoryStore]) -> None:
        """Test collect_pass limits itself to the requested kinds."""
        result = await SnapshotController(stores).collect_pass(["deployment", "clusterroles"])
        assert list(result.records) == ["deployments", "clusterroles"]

    @pytest.mark.asyncio
    async def test_parallel_pass_matches_sequential(self, stores: dict[str, InMemoryStore]) -> None:
        """Test a parallel pass yields the same records as a sequential one."""
        sequential = await SnapshotController(stores).collect_pass()
        parallel = await SnapshotController(stores, parallelism=4).collect_pass()
        assert list(parallel.records) == list(sequential.records)
        for kind, records in sequential.records.items():
            assert [r.name for r in parallel.records[kind]] == [r.name for r in records]
        assert {r.timestamp for r in parallel.all_records()} == {parallel.capture_time}

    @pytest.mark.asyncio
    async def test_cancellation_stops_between_kinds(self) -> None:
        """Test cancellation stops a pass between kinds."""
        class CancellingStore(InMemoryStore):
            def list(self) -> list[Any]:
                task = asyncio.current_task()
                assert task is not None
                task.cancel()
                return super().list()

        deployments = MagicMock()
        deployments.list.return_value = []
        controller = SnapshotController({
            "pods": CancellingStore([obj("Pod", "a", "ns")]),
            "deployments": deployments,
        })
        task = asyncio.create_task(controller.collect_pass(["pods", "deployments"]))
        with pytest.raises(asyncio.CancelledError):
            await task
        deployments.list.assert_not_called()

    @pytest.mark.asyncio
    async def test_store_error_fails_pass(self) -> None:
        """Test a store error fails the whole pass."""
        broken = MagicMock()
        broken.list.side_effect = RuntimeError("cache gone")
        with pytest.raises(RuntimeError):
            await SnapshotController({"pods": broken}).collect_pass()

    @pytest.mark.asyncio
    async def test_fetch_all_and_check_connection(self, stores: dict[str, InMemoryStore]) -> None:
        """Test fetch_all and check_connection over the stores."""
        controller = SnapshotController(stores)
        assert await controller.check_connection() is True
        data = await controller.fetch_all()
        assert set(data) == {"pods", "containers", "replicasets", "deployments", "clusterroles"}

        stores["pods"].mark_synced(False)
        assert await controller.check_connection() is False
