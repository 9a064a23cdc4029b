from __future__ import annotations

import json
import logging
from collections.abc import Mapping

from ticker_resolver.shared.kernel.types import JSONObject

CONTRACT_KIND_WORKFLOW_STATE = "workflow_state"
CONTRACT_KIND_REASONING_OUTPUT = "reasoning_output"
CONTRACT_KIND_CATALOG_LOOKUP = "catalog_lookup"


def _string_map(value: object) -> dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {
        key: val
        for key, val in value.items()
        if isinstance(key, str) and isinstance(val, str)
    }


def _list_length(value: object) -> int:
    return len(value) if isinstance(value, list) else 0


def build_replay_diagnostics(state: Mapping[str, object], *, node: str) -> JSONObject:
    """Snapshot the parts of a pipeline state needed to replay a failure."""
    current_node = state.get("current_node")
    query = state.get("query")
    market = state.get("market")
    cycle = state.get("cycle")
    return {
        "node": node,
        "current_node": current_node if isinstance(current_node, str) else None,
        "query": query if isinstance(query, str) else None,
        "market": market if isinstance(market, str) else None,
        "cycle": cycle if isinstance(cycle, int) else 0,
        "candidate_count": _list_length(state.get("extracted")),
        "answer_count": _list_length(state.get("answer")),
        "error_log_count": _list_length(state.get("error_logs")),
        "node_statuses": _string_map(state.get("node_statuses")),
        "internal_progress": _string_map(state.get("internal_progress")),
    }


def log_boundary_event(
    logger: logging.Logger,
    *,
    node: str,
    contract_kind: str,
    error_code: str,
    state: Mapping[str, object] | None = None,
    detail: JSONObject | None = None,
    level: int = logging.INFO,
) -> JSONObject:
    payload: JSONObject = {
        "node": node,
        "contract_kind": contract_kind,
        "error_code": error_code,
    }
    if detail is not None:
        payload["detail"] = detail
    if state is not None:
        payload["replay"] = build_replay_diagnostics(state, node=node)

    logger.log(
        level,
        "BOUNDARY_EVENT %s",
        json.dumps(payload, sort_keys=True, ensure_ascii=False, default=str),
    )
    return payload
