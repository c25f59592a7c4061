"""Tests for AppSettings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from kubestatelogs.constants.defaults import REPLICASET_POLICY_DEFAULT, RESOURCES_DEFAULT
from kubestatelogs.constants.enums import ReplicaSetPolicy
from kubestatelogs.models.state.app_settings import AppSettings, ConfigError, ConfigLoadError


class TestDefaults:
    """Tests for default settings."""

    def test_defaults(self) -> None:
        """Test AppSettings defaults."""
        settings = AppSettings()
        assert settings.log_interval == 60.0
        assert settings.resources == list(RESOURCES_DEFAULT)
        assert settings.namespaces == []
        assert settings.replicaset_policy is ReplicaSetPolicy.CURRENT
        assert settings.parallelism == 1
        assert settings.log_level == "info"
        assert settings.once is False

    def test_policy_default_follows_constant(self) -> None:
        """Test the replicaset policy default comes from REPLICASET_POLICY_DEFAULT."""
        assert AppSettings().replicaset_policy.value == REPLICASET_POLICY_DEFAULT


class TestValidation:
    """Tests for field validators."""

    def test_csv_lists(self) -> None:
        """Test comma separated strings are split into lists."""
        settings = AppSettings(resources="Pods, deployments,,", namespaces="default,team-a")
        assert settings.resources == ["pods", "deployments"]
        assert settings.namespaces == ["default", "team-a"]

    def test_interval_minimum(self) -> None:
        """Test log_interval below the minimum is rejected."""
        with pytest.raises(ValidationError):
            AppSettings(log_interval=0.5)

    def test_resource_interval_minimum(self) -> None:
        """Test per-resource intervals below the minimum are rejected."""
        with pytest.raises(ValidationError):
            AppSettings(resource_intervals={"pods": 0})

    def test_resource_intervals_lowercased(self) -> None:
        """Test per-resource interval keys are lowercased."""
        settings = AppSettings(resource_intervals={"Pods": 5})
        assert settings.interval_for("pods") == 5
        assert settings.interval_for("roles") == 60.0

    @pytest.mark.parametrize(("raw", "expected"), [("WARNING", "warn"), ("debug", "debug"), (" Error ", "error")])
    def test_log_level(self, raw: str, expected: str) -> None:
        """Test log levels are normalized."""
        assert AppSettings(log_level=raw).log_level == expected

    def test_log_level_rejected(self) -> None:
        """Test unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            AppSettings(log_level="verbose")

    @pytest.mark.parametrize("parallelism", [0, 17])
    def test_parallelism_bounds(self, parallelism: int) -> None:
        """Test parallelism outside its bounds is rejected."""
        with pytest.raises(ValidationError):
            AppSettings(parallelism=parallelism)

    def test_policy_from_string(self) -> None:
        """Test replicaset_policy accepts its string value."""
        settings = AppSettings(replicaset_policy="nonzero-desired")
        assert settings.replicaset_policy is ReplicaSetPolicy.NONZERO_DESIRED


class TestLoading:
    """Tests for from_yaml and with_overrides."""

    def test_from_yaml(self, tmp_path: Path) -> None:
        """Test from_yaml loads settings from a YAML file."""
        path = tmp_path / "settings.yaml"
        path.write_text(
            "log_interval: 30\n"
            "resources: [pods, replicasets]\n"
            "resource_intervals:\n"
            "  pods: 10\n"
            "namespaces: default\n",
            encoding="utf-8",
        )
        settings = AppSettings.from_yaml(path)
        assert settings.log_interval == 30
        assert settings.resources == ["pods", "replicasets"]
        assert settings.interval_for("pods") == 10
        assert settings.namespaces == ["default"]

    def test_empty_yaml_is_defaults(self, tmp_path: Path) -> None:
        """Test an empty YAML file yields default settings."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert AppSettings.from_yaml(path) == AppSettings()

    def test_from_yaml_missing(self, tmp_path: Path) -> None:
        """Test from_yaml raises ConfigLoadError for a missing file."""
        with pytest.raises(ConfigLoadError):
            AppSettings.from_yaml(tmp_path / "absent.yaml")

    def test_from_yaml_not_a_mapping(self, tmp_path: Path) -> None:
        """Test from_yaml raises ConfigLoadError when the file is not a mapping."""
        path = tmp_path / "list.yaml"
        path.write_text("- pods\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError):
            AppSettings.from_yaml(path)

    def test_from_yaml_invalid_value(self, tmp_path: Path) -> None:
        """Test from_yaml raises ConfigLoadError for invalid values."""
        path = tmp_path / "bad.yaml"
        path.write_text("parallelism: 99\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError):
            AppSettings.from_yaml(path)

    def test_overrides_skip_none(self) -> None:
        """Test with_overrides ignores None values and leaves the base untouched."""
        base = AppSettings(log_interval=30)
        settings = base.with_overrides({"log_interval": None, "once": True, "namespaces": "a,b"})
        assert settings.log_interval == 30
        assert settings.once is True
        assert settings.namespaces == ["a", "b"]
        assert base.once is False

    def test_invalid_override(self) -> None:
        """Test with_overrides raises ConfigError for invalid values."""
        with pytest.raises(ConfigError):
            AppSettings().with_overrides({"log_level": "loud"})
