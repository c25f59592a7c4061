"""Condition helpers shared by the resource transformers.

When an object lists the same condition type more than once, the last entry
of that type wins.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from kubestatelogs.constants.values import CONDITION_FALSE, CONDITION_TRUE
from kubestatelogs.utils.field_extraction import as_list, as_mapping, coerce_str, parse_timestamp


def iter_conditions(conditions: Any) -> list[Mapping[str, Any]]:
    return [as_mapping(condition) for condition in as_list(conditions)]


def find_condition(conditions: Any, condition_type: str) -> Mapping[str, Any] | None:
    found = None
    for condition in iter_conditions(conditions):
        if condition.get("type") == condition_type:
            found = condition
    return found


def condition_is_true(conditions: Any, condition_type: str) -> bool:
    condition = find_condition(conditions, condition_type)
    return condition is not None and condition.get("status") == CONDITION_TRUE


def any_condition_false(conditions: Any, condition_type: str) -> bool:
    """True when any entry of the type reports False, regardless of order."""
    return any(
        condition.get("type") == condition_type and condition.get("status") == CONDITION_FALSE
        for condition in iter_conditions(conditions)
    )


def condition_status_map(conditions: Any) -> dict[str, bool | None]:
    """Map each condition type to True, False or None (Unknown/unrecognized status)."""
    statuses: dict[str, bool | None] = {}
    for condition in iter_conditions(conditions):
        condition_type = coerce_str(condition.get("type"))
        if not condition_type:
            continue
        status = condition.get("status")
        if status == CONDITION_TRUE:
            statuses[condition_type] = True
        elif status == CONDITION_FALSE:
            statuses[condition_type] = False
        else:
            statuses[condition_type] = None
    return statuses


def true_condition_transition_time(conditions: Any, condition_type: str) -> datetime | None:
    """Transition time of the last True entry of a type that carries one."""
    transition_time = None
    for condition in iter_conditions(conditions):
        if condition.get("type") != condition_type or condition.get("status") != CONDITION_TRUE:
            continue
        parsed = parse_timestamp(condition.get("lastTransitionTime"))
        if parsed is not None:
            transition_time = parsed
    return transition_time


def first_false_condition_reason(conditions: Any) -> str:
    """Reason of the first False condition that carries a non-empty reason."""
    for condition in iter_conditions(conditions):
        reason = coerce_str(condition.get("reason"))
        if condition.get("status") == CONDITION_FALSE and reason:
            return reason
    return ""
