from __future__ import annotations

import json

from ticker_resolver.agents.ticker.domain.models import Candidate, CatalogRecord
from ticker_resolver.agents.ticker.interface.mappers import (
    from_candidate,
    from_catalog_record,
    to_response_record,
)
from ticker_resolver.shared.kernel.types import JSONObject


def serialize_candidates(candidates: list[Candidate]) -> list[JSONObject]:
    return [from_candidate(candidate).model_dump(mode="json") for candidate in candidates]


def serialize_catalog_records(records: list[CatalogRecord]) -> list[JSONObject]:
    return [from_catalog_record(record).model_dump(mode="json") for record in records]


def serialize_answer_for_response(records: list[CatalogRecord]) -> list[JSONObject]:
    return [to_response_record(record) for record in records]


def format_answer_for_prompt(records: list[CatalogRecord]) -> str:
    """Render the resolved answer the way the grader and rewriter prompts expect it."""
    return json.dumps(serialize_answer_for_response(records), ensure_ascii=False)
