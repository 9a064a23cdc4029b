from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WorkflowNodeResult:
    """Single-target result returned by every pipeline node handler."""

    update: dict[str, object]
    goto: str
