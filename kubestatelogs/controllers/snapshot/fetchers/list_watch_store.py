"""List/watch backed object store using the Kubernetes Python client."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

from kubernetes import client, config, watch
from kubernetes.client.exceptions import ApiException

from kubestatelogs.constants.timeouts import (
    CACHE_SYNC_TIMEOUT,
    WATCH_RECONNECT_DELAY,
    WATCH_TIMEOUT_SECONDS,
)
from kubestatelogs.controllers.snapshot.fetchers.store import InMemoryStore, StoreSyncError
from kubestatelogs.controllers.snapshot.registry import ResourceKindSpec
from kubestatelogs.models.state.app_settings import ConfigLoadError

logger = logging.getLogger(__name__)

# HTTP status the API server returns when a watch's resourceVersion is too old.
_GONE = 410


def load_api_client(kubeconfig: str | None = None) -> client.ApiClient:
    """Build an API client from in-cluster config, falling back to kubeconfig.

    An explicit ``kubeconfig`` path skips the in-cluster attempt.

    Raises:
        ConfigLoadError: if no usable cluster configuration is found.
    """
    try:
        if kubeconfig:
            config.load_kube_config(config_file=kubeconfig)
            logger.info("Loaded kubeconfig from %s", kubeconfig)
            return client.ApiClient()
        try:
            config.load_incluster_config()
            logger.info("Loaded in-cluster configuration")
        except config.ConfigException:
            config.load_kube_config()
            logger.info("Loaded local kubeconfig")
    except (config.ConfigException, OSError) as exc:
        raise ConfigLoadError(f"Cannot load cluster configuration: {exc}") from exc
    return client.ApiClient()


class ListWatchStore:
    """Keeps a local copy of one resource kind in sync with the cluster.

    A background thread lists every object, then watches from the returned
    resource version. Events update an ``InMemoryStore``; the engine only ever
    reads that cache. The watch reconnects after errors and relists when the
    server reports the resource version as expired.
    """

    def __init__(self, spec: ResourceKindSpec, api_client: client.ApiClient) -> None:
        self._spec = spec
        self._api_client = api_client
        api = getattr(client, spec.api_class)(api_client)
        self._list_func = getattr(api, spec.list_method)
        self._cache = InMemoryStore(synced=False)
        self._synced = threading.Event()
        self._stop = threading.Event()
        self._watch: watch.Watch | None = None
        self._thread: threading.Thread | None = None

    @property
    def name(self) -> str:
        return self._spec.store_key

    def list(self) -> list[Any]:
        return self._cache.list()

    def has_synced(self) -> bool:
        return self._synced.is_set()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run, name=f"watch-{self.name}", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._watch is not None:
            self._watch.stop()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def wait_for_sync(self, timeout: float = CACHE_SYNC_TIMEOUT) -> None:
        """Block until the initial list has been loaded.

        Raises:
            StoreSyncError: if the store is not synced within ``timeout`` seconds.
        """
        if not self._synced.wait(timeout):
            raise StoreSyncError(f"{self.name} cache did not sync within {timeout:.0f}s")

    def _to_raw(self, item: Any) -> dict[str, Any]:
        raw = self._api_client.sanitize_for_serialization(item)
        # List items carry no kind; fill it in so the engine's kind check holds.
        raw.setdefault("kind", self._spec.kind)
        raw.setdefault("apiVersion", self._spec.api_version)
        return raw

    def _relist(self) -> str:
        response = self._list_func()
        self._cache.replace(self._to_raw(item) for item in response.items)
        self._synced.set()
        logger.debug("Listed %d %s", len(response.items), self.name)
        return response.metadata.resource_version

    def _run(self) -> None:
        resource_version: str | None = None
        while not self._stop.is_set():
            try:
                if resource_version is None:
                    resource_version = self._relist()
                resource_version = self._watch_from(resource_version)
            except ApiException as exc:
                if exc.status == _GONE:
                    logger.info("%s watch expired, relisting", self.name)
                    resource_version = None
                    continue
                logger.warning(
                    "%s watch failed (%s), reconnecting in %.0fs",
                    self.name,
                    exc.reason,
                    WATCH_RECONNECT_DELAY,
                )
                self._stop.wait(WATCH_RECONNECT_DELAY)
            except Exception as exc:
                logger.warning(
                    "%s watch closed (%s), reconnecting in %.0fs",
                    self.name,
                    exc,
                    WATCH_RECONNECT_DELAY,
                )
                resource_version = None
                self._stop.wait(WATCH_RECONNECT_DELAY)

    def _watch_from(self, resource_version: str) -> str | None:
        self._watch = watch.Watch()
        try:
            for event in self._watch.stream(
                self._list_func,
                resource_version=resource_version,
                timeout_seconds=WATCH_TIMEOUT_SECONDS,
                allow_watch_bookmarks=True,
            ):
                if self._stop.is_set():
                    break
                event_type = event.get("type")
                raw = event.get("raw_object")
                if not isinstance(raw, dict):
                    continue
                metadata = raw.get("metadata") or {}
                if event_type == "ERROR":
                    if raw.get("code") == _GONE:
                        return None
                    logger.warning("%s watch error: %s", self.name, raw.get("message"))
                    continue
                resource_version = metadata.get("resourceVersion") or resource_version
                if event_type == "BOOKMARK":
                    continue
                if event_type in ("ADDED", "MODIFIED"):
                    self._cache.upsert(raw)
                elif event_type == "DELETED":
                    self._cache.delete(raw)
        finally:
            self._watch.stop()
        return resource_version


def build_list_watch_stores(
    specs: list[ResourceKindSpec], api_client: client.ApiClient
) -> dict[str, ListWatchStore]:
    """One store per distinct store key of ``specs``."""
    stores: dict[str, ListWatchStore] = {}
    for spec in specs:
        if spec.store_key not in stores:
            stores[spec.store_key] = ListWatchStore(spec, api_client)
    return stores


def stop_stores(stores: dict[str, ListWatchStore], timeout: float) -> None:
    """Stop every store and wait for its watch thread, sharing one deadline."""
    for store in stores.values():
        store.stop()
    deadline = time.monotonic() + timeout
    for store in stores.values():
        store.join(max(0.0, deadline - time.monotonic()))


def wait_for_stores(stores: dict[str, ListWatchStore], timeout: float = CACHE_SYNC_TIMEOUT) -> None:
    """Wait for every store to sync, sharing one deadline."""
    deadline = time.monotonic() + timeout
    for store in stores.values():
        store.wait_for_sync(max(0.0, deadline - time.monotonic()))
