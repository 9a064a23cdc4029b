from __future__ import annotations

from ticker_resolver.agents.ticker.application.resolution_service import (
    LookupFailure,
)
from ticker_resolver.agents.ticker.domain.errors import (
    ERROR_CODE_CYCLE_BOUND_EXCEEDED,
    ERROR_CODE_LOOKUP_DEGRADED,
    TickerResolutionError,
)
from ticker_resolver.shared.kernel.tools.incident_logging import (
    CONTRACT_KIND_CATALOG_LOOKUP,
    CONTRACT_KIND_WORKFLOW_STATE,
)
from ticker_resolver.shared.kernel.types import JSONObject

AGENT_ID = "ticker_resolution"


def build_extraction_update(
    *, candidates: list[JSONObject], cycle: int
) -> JSONObject:
    return {
        "extracted": candidates,
        "cycle": cycle,
        "status": "resolving",
        "current_node": "extraction",
        "internal_progress": {"extraction": "done", "resolution": "running"},
        "node_statuses": {AGENT_ID: "running"},
    }


def build_resolution_update(
    *, answer: list[JSONObject], failures: list[LookupFailure]
) -> JSONObject:
    update: JSONObject = {
        "answer": answer,
        "status": "grading",
        "current_node": "resolution",
        "internal_progress": {"resolution": "done", "grading": "running"},
        "node_statuses": {AGENT_ID: "degraded" if failures else "running"},
    }
    if failures:
        update["error_logs"] = [
            {
                "node": "resolution",
                "error": failure.message,
                "severity": "warning",
                "error_code": ERROR_CODE_LOOKUP_DEGRADED,
                "contract_kind": CONTRACT_KIND_CATALOG_LOOKUP,
                "candidate": failure.candidate,
            }
            for failure in failures
        ]
    return update


def build_grading_pass_update(*, score: str) -> JSONObject:
    return {
        "score": score,
        "status": "resolved",
        "low_confidence": False,
        "current_node": "grading",
        "internal_progress": {"grading": "done"},
        "node_statuses": {AGENT_ID: "done"},
    }


def build_grading_retry_update(*, score: str) -> JSONObject:
    return {
        "score": score,
        "status": "rewriting",
        "current_node": "grading",
        "internal_progress": {"grading": "done", "rewriting": "running"},
    }


def build_cycle_bound_update(*, score: str, cycle: int, max_cycles: int) -> JSONObject:
    return {
        "score": score,
        "status": "low_confidence",
        "low_confidence": True,
        "current_node": "grading",
        "internal_progress": {"grading": "done"},
        "node_statuses": {AGENT_ID: "degraded"},
        "error_logs": [
            {
                "node": "grading",
                "error": (
                    f"Answer still failing after {cycle} of {max_cycles} cycles; "
                    "returning best available answer."
                ),
                "severity": "warning",
                "error_code": ERROR_CODE_CYCLE_BOUND_EXCEEDED,
                "contract_kind": CONTRACT_KIND_WORKFLOW_STATE,
            }
        ],
    }


def build_rewrite_update(*, query: str) -> JSONObject:
    return {
        "query": query,
        "status": "extracting",
        "current_node": "rewriting",
        "internal_progress": {"rewriting": "done", "extraction": "running"},
    }


def build_failure_update(
    *, node: str, error: TickerResolutionError, diagnostics: JSONObject
) -> JSONObject:
    return {
        "status": "failed",
        "error": error.to_payload(),
        "current_node": node,
        "internal_progress": {node: "error"},
        "node_statuses": {AGENT_ID: "error"},
        "error_logs": [
            {
                "node": node,
                "error": error.message,
                "severity": "error",
                "error_code": error.error_code,
                "contract_kind": CONTRACT_KIND_WORKFLOW_STATE,
                "candidate": error.candidate,
                "diagnostics": diagnostics,
            }
        ],
    }
