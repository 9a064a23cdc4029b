from __future__ import annotations


def resolve_end_goto(target: str, *, end_node: str) -> str:
    """Normalize sentinel END target to the framework END node value."""
    return end_node if target == "END" else target
