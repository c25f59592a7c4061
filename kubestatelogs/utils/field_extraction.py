"""Field extraction helpers for raw Kubernetes objects.

Raw objects are API JSON mappings (``kubectl get -o json`` shape). Every helper
tolerates missing or malformed fields and falls back to the field's zero value,
so transformers never have to guard individual lookups.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import suppress
from datetime import datetime, timezone
from typing import Any


def as_mapping(value: Any) -> Mapping[str, Any]:
    """Return ``value`` if it is a mapping, otherwise an empty dict."""
    return value if isinstance(value, Mapping) else {}


def as_list(value: Any) -> list[Any]:
    """Return ``value`` as a list, treating anything but a list/tuple as empty."""
    return list(value) if isinstance(value, (list, tuple)) else []


def get_nested(obj: Any, path: str) -> Any:
    """Extract a field using a dot-separated path such as ``"spec.template.spec"``.

    Returns None if the path does not exist or an intermediate value is not a mapping.
    """
    if not path:
        return None
    current: Any = obj
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def coerce_int(value: Any, default: int = 0) -> int:
    """Convert ``value`` to int, returning ``default`` for missing or invalid values."""
    if value is None or isinstance(value, bool):
        return default
    with suppress(ValueError, TypeError):
        return int(value)
    return default


def coerce_str(value: Any) -> str:
    return "" if value is None else str(value)


def string_map(value: Any) -> dict[str, str]:
    """Copy a label/annotation/selector mapping, keeping every key."""
    return {str(k): coerce_str(v) for k, v in as_mapping(value).items()}


def parse_timestamp(timestamp: Any) -> datetime | None:
    """Parse an RFC3339 Kubernetes timestamp into an aware datetime."""
    if isinstance(timestamp, datetime):
        return timestamp if timestamp.tzinfo else timestamp.replace(tzinfo=timezone.utc)
    if not isinstance(timestamp, str) or not timestamp:
        return None
    with suppress(ValueError, TypeError):
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


# =============================================================================
# Metadata
# =============================================================================


def get_metadata(obj: Any) -> Mapping[str, Any]:
    return as_mapping(as_mapping(obj).get("metadata"))


def extract_name(obj: Any) -> str:
    return coerce_str(get_metadata(obj).get("name"))


def extract_namespace(obj: Any) -> str:
    return coerce_str(get_metadata(obj).get("namespace"))


def extract_uid(obj: Any) -> str:
    return coerce_str(get_metadata(obj).get("uid"))


def extract_resource_version(obj: Any) -> str:
    return coerce_str(get_metadata(obj).get("resourceVersion"))


def extract_generation(obj: Any) -> int:
    return coerce_int(get_metadata(obj).get("generation"))


def extract_labels(obj: Any) -> dict[str, str]:
    return string_map(get_metadata(obj).get("labels"))


def extract_annotations(obj: Any) -> dict[str, str]:
    return string_map(get_metadata(obj).get("annotations"))


def extract_creation_time(obj: Any) -> datetime | None:
    return parse_timestamp(get_metadata(obj).get("creationTimestamp"))


def extract_creation_timestamp(obj: Any) -> int:
    """Creation time in epoch seconds, 0 when the object carries none."""
    created = extract_creation_time(obj)
    return int(created.timestamp()) if created else 0


def extract_deletion_timestamp(obj: Any) -> datetime | None:
    return parse_timestamp(get_metadata(obj).get("deletionTimestamp"))


def extract_owner_references(obj: Any) -> list[Mapping[str, Any]]:
    return [as_mapping(ref) for ref in as_list(get_metadata(obj).get("ownerReferences"))]


def get_owner_reference_info(obj: Any) -> tuple[str, str]:
    """Kind and name of the first owner reference, or empty strings if there is none.

    Only the direct owner is reported; owner chains are not followed.
    """
    owners = extract_owner_references(obj)
    if not owners:
        return "", ""
    first = owners[0]
    return coerce_str(first.get("kind")), coerce_str(first.get("name"))


def object_identity(obj: Any) -> tuple[str, str, str]:
    """Stable key for an object within one collection pass.

    Uses the UID when present and falls back to the resource version.
    """
    return (
        extract_namespace(obj),
        extract_name(obj),
        extract_uid(obj) or extract_resource_version(obj),
    )


def extract_envelope_fields(obj: Any) -> dict[str, Any]:
    """Envelope fields shared by every record, minus the capture timestamp.

    Returns:
        Keyword arguments for a record model: name, namespace,
        created_timestamp, labels, annotations, created_by_kind and
        created_by_name.
    """
    created_by_kind, created_by_name = get_owner_reference_info(obj)
    return {
        "name": extract_name(obj),
        "namespace": extract_namespace(obj),
        "created_timestamp": extract_creation_timestamp(obj),
        "labels": extract_labels(obj),
        "annotations": extract_annotations(obj),
        "created_by_kind": created_by_kind,
        "created_by_name": created_by_name,
    }
