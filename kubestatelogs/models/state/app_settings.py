"""Application settings models."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from kubestatelogs.constants.defaults import (
    LOG_INTERVAL_SECONDS_DEFAULT,
    LOG_LEVEL_DEFAULT,
    PARALLELISM_DEFAULT,
    REPLICASET_POLICY_DEFAULT,
    RESOURCES_DEFAULT,
)
from kubestatelogs.constants.enums import ReplicaSetPolicy
from kubestatelogs.constants.limits import LOG_INTERVAL_MIN, PARALLELISM_MAX, PARALLELISM_MIN
from kubestatelogs.constants.values import LOG_LEVELS

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""


def _split_csv(value: Any) -> Any:
    """Accept ``"a, b"`` as well as ``["a", "b"]`` for list settings."""
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class AppSettings(BaseModel):
    """Application settings model with validation."""

    model_config = ConfigDict(populate_by_name=True)

    # Cluster access
    kubeconfig: str = ""
    snapshot_file: str = ""

    # Collection
    log_interval: float = Field(default=LOG_INTERVAL_SECONDS_DEFAULT, ge=LOG_INTERVAL_MIN)
    resources: list[str] = Field(default_factory=lambda: list(RESOURCES_DEFAULT))
    # Per-resource interval overrides in seconds, keyed by resource name
    resource_intervals: dict[str, float] = Field(default_factory=dict)
    namespaces: list[str] = Field(default_factory=list)
    replicaset_policy: ReplicaSetPolicy = ReplicaSetPolicy(REPLICASET_POLICY_DEFAULT)
    parallelism: int = Field(default=PARALLELISM_DEFAULT, ge=PARALLELISM_MIN, le=PARALLELISM_MAX)

    # Output
    log_level: str = LOG_LEVEL_DEFAULT
    once: bool = False

    @field_validator("resources", "namespaces", mode="before")
    @classmethod
    def _split_lists(cls, value: Any) -> Any:
        return _split_csv(value)

    @field_validator("resources")
    @classmethod
    def _normalize_resources(cls, value: list[str]) -> list[str]:
        return [name.strip().lower() for name in value if name.strip()]

    @field_validator("resource_intervals")
    @classmethod
    def _check_intervals(cls, value: dict[str, float]) -> dict[str, float]:
        for name, interval in value.items():
            if interval < LOG_INTERVAL_MIN:
                raise ValueError(
                    f"interval for {name} must be at least {LOG_INTERVAL_MIN}s, got {interval}"
                )
        return {name.strip().lower(): interval for name, interval in value.items()}

    @field_validator("log_level", mode="before")
    @classmethod
    def _check_log_level(cls, value: Any) -> str:
        level = str(value).strip().lower()
        if level == "warning":
            level = "warn"
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level

    def interval_for(self, resource: str) -> float:
        """Collection interval of a resource, falling back to ``log_interval``."""
        return self.resource_intervals.get(resource, self.log_interval)

    @classmethod
    def from_yaml(cls, path: str | Path) -> AppSettings:
        """Load settings from a YAML file.

        Raises:
            ConfigLoadError: if the file is unreadable, not a mapping, or invalid.
        """
        settings_path = Path(path)
        try:
            with settings_path.open(encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigLoadError(f"Cannot read settings file {settings_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigLoadError(f"Settings file {settings_path} must contain a mapping")
        try:
            settings = cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigLoadError(f"Invalid settings in {settings_path}: {exc}") from exc
        logger.debug("Loaded settings from %s", settings_path)
        return settings

    def with_overrides(self, overrides: dict[str, Any]) -> AppSettings:
        """Return a copy with ``overrides`` applied and validated (None values are ignored).

        Raises:
            ConfigError: if an override is invalid.
        """
        merged = self.model_dump()
        merged.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return type(self).model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc
