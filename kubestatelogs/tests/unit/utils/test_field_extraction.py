"""Tests for field extraction helpers."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from kubestatelogs.utils.field_extraction import (
    coerce_int,
    extract_creation_timestamp,
    extract_envelope_fields,
    extract_labels,
    get_nested,
    get_owner_reference_info,
    object_identity,
    parse_timestamp,
)
from kubestatelogs.utils.namespace_filter import should_include_namespace


@pytest.fixture
def owned_object() -> dict:
    """Create an object with metadata and owner references."""
    return {
        "metadata": {
            "name": "web-7c9f",
            "namespace": "default",
            "uid": "uid-1",
            "resourceVersion": "42",
            "creationTimestamp": "2024-01-01T00:00:00Z",
            "labels": {"app": "web", "tier": "frontend"},
            "annotations": {"note": "x"},
            "ownerReferences": [
                {"kind": "Deployment", "name": "web"},
                {"kind": "Rollout", "name": "web-rollout"},
            ],
        }
    }


class TestScalars:
    """Tests for scalar coercion and path lookup."""

    def test_get_nested(self) -> None:
        """Test get_nested follows dotted paths."""
        assert get_nested({"a": {"b": {"c": 1}}}, "a.b.c") == 1
        assert get_nested({"a": {"b": 1}}, "a.b.c") is None
        assert get_nested({"a": 1}, "") is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("3", 3), (4, 4), (None, 0), ("x", 0), (True, 0), ([], 0)],
    )
    def test_coerce_int(self, value: object, expected: int) -> None:
        """Test coerce_int converts numbers and rejects other values."""
        assert coerce_int(value) == expected

    def test_coerce_int_default(self) -> None:
        """Test coerce_int returns the given default."""
        assert coerce_int(None, 1) == 1

    def test_parse_timestamp(self) -> None:
        """Test parse_timestamp reads RFC3339 timestamps."""
        assert parse_timestamp("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert parse_timestamp("garbage") is None
        assert parse_timestamp(None) is None

    def test_parse_timestamp_naive_datetime_becomes_utc(self) -> None:
        """Test naive datetimes are treated as UTC."""
        parsed = parse_timestamp(datetime(2024, 1, 1))
        assert parsed is not None
        assert parsed.tzinfo is timezone.utc


class TestMetadata:
    """Tests for metadata and envelope extraction."""

    def test_creation_timestamp_epoch(self, owned_object: dict) -> None:
        """Test creation timestamp is rendered as epoch seconds."""
        assert extract_creation_timestamp(owned_object) == 1704067200

    def test_creation_timestamp_absent(self) -> None:
        """Test a missing creation timestamp renders as zero."""
        assert extract_creation_timestamp({"metadata": {"name": "x"}}) == 0

    def test_owner_reference_first_only(self, owned_object: dict) -> None:
        """Test only the first owner reference is used."""
        assert get_owner_reference_info(owned_object) == ("Deployment", "web")

    def test_owner_reference_absent(self) -> None:
        """Test a missing owner reference yields empty strings."""
        assert get_owner_reference_info({"metadata": {"name": "x"}}) == ("", "")

    def test_labels_are_copied(self, owned_object: dict) -> None:
        """Test extract_labels returns a copy."""
        labels = extract_labels(owned_object)
        labels["added"] = "y"
        assert "added" not in owned_object["metadata"]["labels"]

    def test_object_identity_prefers_uid(self, owned_object: dict) -> None:
        """Test object_identity uses the UID when present."""
        assert object_identity(owned_object) == ("default", "web-7c9f", "uid-1")

    def test_object_identity_falls_back_to_resource_version(self) -> None:
        """Test object_identity falls back to the resource version."""
        obj = {"metadata": {"name": "a", "namespace": "ns", "resourceVersion": "7"}}
        assert object_identity(obj) == ("ns", "a", "7")

    def test_envelope_fields(self, owned_object: dict) -> None:
        """Test extract_envelope_fields reads the shared envelope."""
        fields = extract_envelope_fields(owned_object)
        assert fields == {
            "name": "web-7c9f",
            "namespace": "default",
            "created_timestamp": 1704067200,
            "labels": {"app": "web", "tier": "frontend"},
            "annotations": {"note": "x"},
            "created_by_kind": "Deployment",
            "created_by_name": "web",
        }

    def test_envelope_fields_tolerate_garbage(self) -> None:
        """Test extract_envelope_fields tolerates malformed metadata."""
        fields = extract_envelope_fields({"metadata": "oops"})
        assert fields["name"] == ""
        assert fields["labels"] == {}


class TestNamespaceFilter:
    """Tests for should_include_namespace."""

    def test_empty_allow_list_includes_everything(self) -> None:
        """Test an empty allow list includes every namespace."""
        assert should_include_namespace([], "kube-system") is True

    def test_allow_list_membership(self) -> None:
        """Test only listed namespaces are included."""
        assert should_include_namespace(["default"], "default") is True
        assert should_include_namespace(["default"], "kube-system") is False
