"""LimitRange and ResourceQuota record models."""

from __future__ import annotations

from pydantic import Field

from kubestatelogs.constants.enums import ResourceType
from kubestatelogs.models.records.envelope import RecordEnvelope, RecordModel


class LimitRangeItem(RecordModel):
    """One entry of ``spec.limits``; every quantity is a canonical string."""

    type: str = ""
    resource_type: str = ""
    resource_name: str = ""
    min: dict[str, str] = Field(default_factory=dict)
    max: dict[str, str] = Field(default_factory=dict)
    default: dict[str, str] = Field(default_factory=dict)
    default_request: dict[str, str] = Field(default_factory=dict)
    max_limit_request_ratio: dict[str, str] = Field(default_factory=dict)


class LimitRangeRecord(RecordEnvelope):
    resource_type: ResourceType = ResourceType.LIMIT_RANGE

    limits: list[LimitRangeItem] = Field(default_factory=list)


class ResourceQuotaRecord(RecordEnvelope):
    resource_type: ResourceType = ResourceType.RESOURCE_QUOTA

    hard: dict[str, str] = Field(default_factory=dict)
    used: dict[str, str] = Field(default_factory=dict)
    scopes: list[str] = Field(default_factory=list)
