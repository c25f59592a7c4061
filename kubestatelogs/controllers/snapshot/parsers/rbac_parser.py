"""RBAC parser - roles, cluster roles and their bindings."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from kubestatelogs.models.records import (
    ClusterRoleBindingRecord,
    ClusterRoleRecord,
    PolicyRule,
    RoleBindingRecord,
    RoleRecord,
    RoleRef,
    Subject,
)
from kubestatelogs.models.state.collection_stats import CollectionStats
from kubestatelogs.utils.field_extraction import (
    as_list,
    as_mapping,
    coerce_str,
    extract_envelope_fields,
)


def _strings(value: Any) -> list[str]:
    return [coerce_str(item) for item in as_list(value)]


class RbacParser:
    """Parses RBAC objects into records."""

    def parse_role(
        self,
        role: Mapping[str, Any],
        capture_time: datetime,
        stats: CollectionStats | None = None,
    ) -> RoleRecord:
        return RoleRecord(
            **extract_envelope_fields(role),
            timestamp=capture_time,
            rules=self._rules(role),
        )

    def parse_cluster_role(
        self,
        role: Mapping[str, Any],
        capture_time: datetime,
        stats: CollectionStats | None = None,
    ) -> ClusterRoleRecord:
        fields = extract_envelope_fields(role)
        fields["namespace"] = ""
        return ClusterRoleRecord(**fields, timestamp=capture_time, rules=self._rules(role))

    def parse_role_binding(
        self,
        binding: Mapping[str, Any],
        capture_time: datetime,
        stats: CollectionStats | None = None,
    ) -> RoleBindingRecord:
        return RoleBindingRecord(
            **extract_envelope_fields(binding),
            timestamp=capture_time,
            role_ref=self._role_ref(binding),
            subjects=self._subjects(binding),
        )

    def parse_cluster_role_binding(
        self,
        binding: Mapping[str, Any],
        capture_time: datetime,
        stats: CollectionStats | None = None,
    ) -> ClusterRoleBindingRecord:
        fields = extract_envelope_fields(binding)
        fields["namespace"] = ""
        return ClusterRoleBindingRecord(
            **fields,
            timestamp=capture_time,
            role_ref=self._role_ref(binding),
            subjects=self._subjects(binding),
        )

    def _rules(self, role: Mapping[str, Any]) -> list[PolicyRule]:
        rules = []
        for rule in as_list(role.get("rules")):
            rule = as_mapping(rule)
            rules.append(
                PolicyRule(
                    api_groups=_strings(rule.get("apiGroups")),
                    resources=_strings(rule.get("resources")),
                    resource_names=_strings(rule.get("resourceNames")),
                    verbs=_strings(rule.get("verbs")),
                )
            )
        return rules

    def _role_ref(self, binding: Mapping[str, Any]) -> RoleRef:
        ref = as_mapping(binding.get("roleRef"))
        return RoleRef(
            api_group=coerce_str(ref.get("apiGroup")),
            kind=coerce_str(ref.get("kind")),
            name=coerce_str(ref.get("name")),
        )

    def _subjects(self, binding: Mapping[str, Any]) -> list[Subject]:
        subjects = []
        for subject in as_list(binding.get("subjects")):
            subject = as_mapping(subject)
            subjects.append(
                Subject(
                    kind=coerce_str(subject.get("kind")),
                    name=coerce_str(subject.get("name")),
                    namespace=coerce_str(subject.get("namespace")),
                    api_group=coerce_str(subject.get("apiGroup")),
                )
            )
        return subjects
