from __future__ import annotations

import os
from dataclasses import dataclass

from .llm_config import LLM_TIMEOUT


@dataclass(frozen=True)
class ResolutionSettings:
    """Runtime bounds for one ticker resolution request."""

    max_cycles: int = 3
    request_deadline: float = 90.0
    catalog_call_timeout: float = 10.0
    reasoning_call_timeout: float = LLM_TIMEOUT

    @property
    def recursion_limit(self) -> int:
        # extract, resolve, grade per cycle plus one rewrite between cycles
        return 4 * self.max_cycles + 2


def get_resolution_settings() -> ResolutionSettings:
    return ResolutionSettings(
        max_cycles=max(1, int(os.getenv("RESOLUTION_MAX_CYCLES", "3"))),
        request_deadline=float(os.getenv("RESOLUTION_REQUEST_DEADLINE", "90")),
        catalog_call_timeout=float(os.getenv("CATALOG_CALL_TIMEOUT", "10")),
        reasoning_call_timeout=LLM_TIMEOUT,
    )
