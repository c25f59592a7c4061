"""Namespace allow-list filtering."""

from __future__ import annotations

from collections.abc import Collection


def should_include_namespace(namespaces: Collection[str], namespace: str) -> bool:
    """Check if a namespace passes the allow-list.

    An empty allow-list includes every namespace; otherwise only listed
    namespaces are included.
    """
    return not namespaces or namespace in namespaces
