"""Record envelope shared by every resource kind."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from kubestatelogs.constants.enums import ResourceType


class RecordModel(BaseModel):
    """Base for record models: immutable, camelCase on the wire."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class RecordEnvelope(RecordModel):
    """Metadata every record carries, whatever its resource kind.

    ``timestamp`` is the capture time of the collection pass and is identical
    for every record produced by that pass.
    """

    resource_type: ResourceType
    name: str = Field(min_length=1)
    namespace: str = ""
    timestamp: datetime
    created_timestamp: int = 0
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    created_by_kind: str = ""
    created_by_name: str = ""

    def to_log_dict(self) -> dict[str, Any]:
        """Flatten the record into the JSON log entry shape.

        Returns:
            ``{"timestamp", "resourceType", "name", "namespace", "data"}`` where
            ``data`` holds every other field keyed by its camelCase name.
        """
        data = self.model_dump(mode="json", by_alias=True)
        return {
            "timestamp": data.pop("timestamp"),
            "resourceType": data.pop("resourceType"),
            "name": data.pop("name"),
            "namespace": data.pop("namespace"),
            "data": data,
        }
