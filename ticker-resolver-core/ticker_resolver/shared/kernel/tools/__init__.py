from .incident_logging import (
    CONTRACT_KIND_CATALOG_LOOKUP,
    CONTRACT_KIND_REASONING_OUTPUT,
    CONTRACT_KIND_WORKFLOW_STATE,
    build_replay_diagnostics,
    log_boundary_event,
)
from .logger import (
    get_log_context,
    get_logger,
    log_context,
    log_event,
)

__all__ = [
    "get_logger",
    "get_log_context",
    "log_context",
    "log_event",
    "CONTRACT_KIND_WORKFLOW_STATE",
    "CONTRACT_KIND_REASONING_OUTPUT",
    "CONTRACT_KIND_CATALOG_LOOKUP",
    "build_replay_diagnostics",
    "log_boundary_event",
]
