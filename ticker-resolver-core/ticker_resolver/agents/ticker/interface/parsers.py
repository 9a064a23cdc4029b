from __future__ import annotations

from collections.abc import Mapping

from ticker_resolver.agents.ticker.domain.models import (
    Candidate,
    CatalogRecord,
    Market,
    QueryContext,
    Verdict,
)
from ticker_resolver.agents.ticker.interface.contracts import (
    CandidateModel,
    CatalogRecordModel,
)
from ticker_resolver.agents.ticker.interface.mappers import (
    to_candidate,
    to_catalog_record,
)


def parse_candidates(value: object) -> list[Candidate]:
    if not isinstance(value, list):
        return []
    parsed: list[Candidate] = []
    for raw in value:
        if not isinstance(raw, Mapping):
            continue
        parsed.append(to_candidate(CandidateModel.model_validate(raw)))
    return parsed


def parse_catalog_records(value: object) -> list[CatalogRecord]:
    if not isinstance(value, list):
        return []
    parsed: list[CatalogRecord] = []
    for raw in value:
        if not isinstance(raw, Mapping):
            continue
        parsed.append(to_catalog_record(CatalogRecordModel.model_validate(raw)))
    return parsed


def parse_verdict(value: object) -> Verdict | None:
    if isinstance(value, Verdict):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Verdict(value.strip().lower())
    except ValueError:
        return None


def parse_query_context(state: Mapping[str, object]) -> QueryContext | None:
    """Read the current query context out of a pipeline state, None if incomplete."""
    query = state.get("query")
    language = state.get("language")
    market = Market.parse(state.get("market"))
    if not isinstance(query, str) or not query.strip():
        return None
    if not isinstance(language, str) or not language.strip() or market is None:
        return None
    return QueryContext(query=query, market=market, language=language)
