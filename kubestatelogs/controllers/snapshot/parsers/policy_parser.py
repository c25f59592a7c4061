"""Policy parser - limit ranges and resource quotas."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from kubestatelogs.models.records import LimitRangeItem, LimitRangeRecord, ResourceQuotaRecord
from kubestatelogs.models.state.collection_stats import CollectionStats
from kubestatelogs.utils.field_extraction import (
    as_list,
    as_mapping,
    coerce_str,
    extract_envelope_fields,
)
from kubestatelogs.utils.quantity import format_resource_map


class PolicyParser:
    """Parses namespace policy objects into records."""

    def parse_limit_range(
        self,
        limit_range: Mapping[str, Any],
        capture_time: datetime,
        stats: CollectionStats | None = None,
    ) -> LimitRangeRecord:
        """Parse a LimitRange, keeping ``spec.limits`` in order.

        Each item reports the first resource of its ``min`` map as the
        resource it constrains.
        """
        items = []
        for limit in as_list(as_mapping(limit_range.get("spec")).get("limits")):
            limit = as_mapping(limit)
            minimum = format_resource_map(limit.get("min"))
            constrained = next(iter(minimum), "")
            items.append(
                LimitRangeItem(
                    type=coerce_str(limit.get("type")),
                    resource_type=constrained,
                    resource_name=constrained,
                    min=minimum,
                    max=format_resource_map(limit.get("max")),
                    default=format_resource_map(limit.get("default")),
                    default_request=format_resource_map(limit.get("defaultRequest")),
                    max_limit_request_ratio=format_resource_map(limit.get("maxLimitRequestRatio")),
                )
            )
        return LimitRangeRecord(
            **extract_envelope_fields(limit_range),
            timestamp=capture_time,
            limits=items,
        )

    def parse_resource_quota(
        self,
        quota: Mapping[str, Any],
        capture_time: datetime,
        stats: CollectionStats | None = None,
    ) -> ResourceQuotaRecord:
        spec = as_mapping(quota.get("spec"))
        status = as_mapping(quota.get("status"))
        return ResourceQuotaRecord(
            **extract_envelope_fields(quota),
            timestamp=capture_time,
            hard=format_resource_map(spec.get("hard")),
            used=format_resource_map(status.get("used")),
            scopes=[coerce_str(scope) for scope in as_list(spec.get("scopes"))],
        )
