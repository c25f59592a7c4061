"""RBAC record models."""

from __future__ import annotations

from pydantic import Field

from kubestatelogs.constants.enums import ResourceType
from kubestatelogs.models.records.envelope import RecordEnvelope, RecordModel


class PolicyRule(RecordModel):
    api_groups: list[str] = Field(default_factory=list)
    resources: list[str] = Field(default_factory=list)
    resource_names: list[str] = Field(default_factory=list)
    verbs: list[str] = Field(default_factory=list)


class RoleRef(RecordModel):
    api_group: str = ""
    kind: str = ""
    name: str = ""


class Subject(RecordModel):
    kind: str = ""
    name: str = ""
    namespace: str = ""
    api_group: str = ""


class RoleRecord(RecordEnvelope):
    resource_type: ResourceType = ResourceType.ROLE

    rules: list[PolicyRule] = Field(default_factory=list)


class ClusterRoleRecord(RecordEnvelope):
    resource_type: ResourceType = ResourceType.CLUSTER_ROLE

    rules: list[PolicyRule] = Field(default_factory=list)


class RoleBindingRecord(RecordEnvelope):
    resource_type: ResourceType = ResourceType.ROLE_BINDING

    role_ref: RoleRef = Field(default_factory=RoleRef)
    subjects: list[Subject] = Field(default_factory=list)


class ClusterRoleBindingRecord(RecordEnvelope):
    resource_type: ResourceType = ResourceType.CLUSTER_ROLE_BINDING

    role_ref: RoleRef = Field(default_factory=RoleRef)
    subjects: list[Subject] = Field(default_factory=list)
