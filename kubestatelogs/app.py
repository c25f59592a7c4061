"""Command line entry point and run loop for kube-state-logs."""

from __future__ import annotations

import argparse
import asyncio
import logging
import re
import signal
import sys
import time
from collections.abc import Mapping, Sequence
from contextlib import suppress

from rich.console import Console
from rich.logging import RichHandler

from kubestatelogs.constants import APP_TITLE, CACHE_SYNC_TIMEOUT, LOG_LEVELS, SHUTDOWN_TIMEOUT
from kubestatelogs.constants.enums import ReplicaSetPolicy
from kubestatelogs.controllers.snapshot.controller import SnapshotController
from kubestatelogs.controllers.snapshot.fetchers.list_watch_store import (
    build_list_watch_stores,
    load_api_client,
    stop_stores,
    wait_for_stores,
)
from kubestatelogs.controllers.snapshot.fetchers.snapshot_loader import (
    build_snapshot_stores,
    load_snapshot_objects,
)
from kubestatelogs.controllers.snapshot.fetchers.store import ObjectStore, StoreSyncError
from kubestatelogs.controllers.snapshot.registry import (
    ResourceKindSpec,
    UnknownResourceError,
    get_kind_spec,
    kind_names,
    resolve_kinds,
)
from kubestatelogs.models.state.app_settings import AppSettings, ConfigError
from kubestatelogs.utils.record_writer import RecordWriter

logger = logging.getLogger(__name__)

_DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([smh]?)\s*$")
_DURATION_UNITS = {"": 1.0, "s": 1.0, "m": 60.0, "h": 3600.0}

_LOG_LEVEL_MAP = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

EXIT_OK = 0
EXIT_RUNTIME_ERROR = 1
EXIT_CONFIG_ERROR = 2


# =============================================================================
# Argument parsing
# =============================================================================


def parse_duration(value: str) -> float:
    """Parse ``"30"``, ``"30s"``, ``"5m"`` or ``"1h"`` into seconds.

    Raises:
        ValueError: if the value is not a duration.
    """
    match = _DURATION_PATTERN.match(value)
    if match is None:
        raise ValueError(f"invalid duration {value!r}")
    amount, unit = match.groups()
    return float(amount) * _DURATION_UNITS[unit]


def parse_resource_configs(value: str) -> dict[str, float]:
    """Parse ``"pods:30s,replicasets:2m"`` into interval seconds per resource name.

    Names are resolved to their plural form.

    Raises:
        ValueError: on a malformed entry or bad duration.
        UnknownResourceError: if a name matches no supported kind.
    """
    intervals: dict[str, float] = {}
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, sep, interval = entry.partition(":")
        if not sep or not name.strip():
            raise ValueError(f"expected name:interval, got {entry!r}")
        intervals[get_kind_spec(name).name] = parse_duration(interval)
    return intervals


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_TITLE,
        description="Periodically log the state of Kubernetes resources as JSON lines.",
    )
    parser.add_argument("--config", help="YAML settings file; flags override its values")
    parser.add_argument("--kubeconfig", help="Path to a kubeconfig (default: in-cluster, then ~/.kube/config)")
    parser.add_argument(
        "--log-interval",
        help="Interval between collections, e.g. 60, 30s, 5m (default: 60s)",
    )
    parser.add_argument(
        "--resources",
        help=f"Comma-separated resources to collect (supported: {', '.join(kind_names())})",
    )
    parser.add_argument(
        "--resource-configs",
        help="Per-resource intervals, e.g. pods:30s,replicasets:5m",
    )
    parser.add_argument("--namespaces", help="Comma-separated namespaces to include (default: all)")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Diagnostic log level")
    parser.add_argument(
        "--replicaset-policy",
        choices=[policy.value for policy in ReplicaSetPolicy],
        help="Which replicasets to log (default: current)",
    )
    parser.add_argument("--parallelism", type=int, help="Resource kinds collected concurrently")
    parser.add_argument(
        "--snapshot-file",
        help="Collect once from a YAML/JSON dump instead of the cluster",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        default=None,
        help="Collect once and exit",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> AppSettings:
    """Build settings from an optional config file plus command line overrides.

    Raises:
        ConfigError: if the file or any flag is invalid.
    """
    base = AppSettings.from_yaml(args.config) if args.config else AppSettings()
    try:
        overrides = {
            "kubeconfig": args.kubeconfig,
            "snapshot_file": args.snapshot_file,
            "log_interval": parse_duration(args.log_interval) if args.log_interval else None,
            "resources": args.resources,
            "resource_intervals": (
                parse_resource_configs(args.resource_configs) if args.resource_configs else None
            ),
            "namespaces": args.namespaces,
            "log_level": args.log_level,
            "replicaset_policy": args.replicaset_policy,
            "parallelism": args.parallelism,
            "once": args.once,
        }
    except (ValueError, UnknownResourceError) as exc:
        raise ConfigError(str(exc)) from exc
    return base.with_overrides(overrides)


def configure_logging(level: str, console: Console | None = None) -> None:
    """Send diagnostics to stderr; stdout is reserved for records."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(_LOG_LEVEL_MAP[level])
    # The kubernetes client logs every request at debug level.
    logging.getLogger("kubernetes").setLevel(max(logging.INFO, _LOG_LEVEL_MAP[level]))


# =============================================================================
# Run loop
# =============================================================================


def resolve_intervals(settings: AppSettings) -> dict[str, float]:
    """Per-resource interval overrides keyed by plural resource name.

    Raises:
        UnknownResourceError: if an override names no supported kind.
    """
    return {
        get_kind_spec(name).name: interval
        for name, interval in settings.resource_intervals.items()
    }


def group_by_interval(
    specs: Sequence[ResourceKindSpec], settings: AppSettings
) -> dict[float, list[ResourceKindSpec]]:
    """Group kinds that share a collection interval, so each group is one pass."""
    intervals = resolve_intervals(settings)
    groups: dict[float, list[ResourceKindSpec]] = {}
    for spec in specs:
        groups.setdefault(intervals.get(spec.name, settings.log_interval), []).append(spec)
    return groups


class CollectorApp:
    """Runs collection passes on a schedule and writes their records."""

    def __init__(
        self,
        settings: AppSettings,
        stores: Mapping[str, ObjectStore],
        writer: RecordWriter | None = None,
    ) -> None:
        self.settings = settings
        self.specs = resolve_kinds(settings.resources)
        self.controller = SnapshotController(
            stores,
            namespaces=settings.namespaces,
            replicaset_policy=settings.replicaset_policy,
            parallelism=settings.parallelism,
        )
        self.writer = writer or RecordWriter()
        self._stop = asyncio.Event()

    def stop(self) -> None:
        self._stop.set()

    async def run_once(self, specs: Sequence[ResourceKindSpec] | None = None) -> int:
        """Run one pass and write its records; returns the number written."""
        result = await self.controller.collect_pass(specs if specs is not None else self.specs)
        written = self.writer.write(result.all_records())
        for name, stats in result.stats.items():
            logger.debug(
                "%s: listed=%d emitted=%d skipped=%d filtered_namespace=%d in %.1fms",
                name,
                stats.listed,
                stats.emitted,
                stats.skipped,
                stats.filtered_namespace,
                stats.duration_ms,
            )
        return written

    async def run(self) -> None:
        """Collect every interval group when due until ``stop`` is called.

        A failed pass is logged and retried at the group's next tick.
        """
        groups = group_by_interval(self.specs, self.settings)
        next_due = {interval: time.monotonic() for interval in groups}
        logger.info(
            "Collecting %s",
            ", ".join(
                f"{'/'.join(s.name for s in specs)} every {interval:g}s"
                for interval, specs in groups.items()
            ),
        )
        while not self._stop.is_set():
            now = time.monotonic()
            for interval, specs in groups.items():
                if next_due[interval] > now:
                    continue
                next_due[interval] = now + interval
                try:
                    await self.run_once(specs)
                except asyncio.CancelledError:
                    raise
                except Exception:
                    logger.exception("Collection of %s failed", ", ".join(s.name for s in specs))
            delay = max(0.0, min(next_due.values()) - time.monotonic())
            with suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self._stop.wait(), timeout=delay)


async def _run_live(settings: AppSettings) -> int:
    specs = resolve_kinds(settings.resources)
    api_client = load_api_client(settings.kubeconfig or None)
    stores = build_list_watch_stores(specs, api_client)
    for store in stores.values():
        store.start()
    try:
        await asyncio.to_thread(wait_for_stores, stores, CACHE_SYNC_TIMEOUT)
        logger.info("Caches synced for %s", ", ".join(stores))

        app = CollectorApp(settings, stores)
        if settings.once:
            await app.run_once()
            return EXIT_OK

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            with suppress(NotImplementedError):
                loop.add_signal_handler(sig, app.stop)
        await app.run()
        return EXIT_OK
    finally:
        await asyncio.to_thread(stop_stores, stores, SHUTDOWN_TIMEOUT)
        api_client.close()


async def _run_snapshot(settings: AppSettings) -> int:
    stores = build_snapshot_stores(load_snapshot_objects(settings.snapshot_file))
    app = CollectorApp(settings, stores)
    await app.run_once()
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = settings_from_args(args)
        resolve_kinds(settings.resources)
        resolve_intervals(settings)
    except (ConfigError, UnknownResourceError) as exc:
        print(f"{APP_TITLE}: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    configure_logging(settings.log_level)
    try:
        if settings.snapshot_file:
            return asyncio.run(_run_snapshot(settings))
        return asyncio.run(_run_live(settings))
    except ConfigError as exc:
        logger.error("%s", exc)
        return EXIT_CONFIG_ERROR
    except StoreSyncError as exc:
        logger.error("%s", exc)
        return EXIT_RUNTIME_ERROR
    except KeyboardInterrupt:
        return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
