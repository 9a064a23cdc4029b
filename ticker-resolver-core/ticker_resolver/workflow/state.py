"""
Shared state reducers for the resolution workflow graph.
"""

from typing import TypeVar

T = TypeVar("T")


def merge_dict(left: dict | None, right: dict | None) -> dict:
    """Shallow-merge partial dict updates instead of replacing the channel."""
    if not left:
        return dict(right or {})
    if not right:
        return dict(left)
    return {**left, **right}


def append_logs(left: list | None, right: list | None) -> list:
    """Accumulate error log entries across nodes and cycles."""
    return [*(left or []), *(right or [])]


def last_value(left: T, right: T) -> T:
    return right
