from __future__ import annotations

from collections.abc import Mapping

from ticker_resolver.agents.ticker.domain.errors import TickerResolutionError
from ticker_resolver.agents.ticker.domain.models import (
    Candidate,
    CatalogRecord,
    QueryContext,
)
from ticker_resolver.agents.ticker.interface.parsers import (
    parse_candidates,
    parse_catalog_records,
    parse_query_context,
)


def read_query_context(state: Mapping[str, object], *, node: str) -> QueryContext:
    context = parse_query_context(state)
    if context is None:
        raise TickerResolutionError(
            "Pipeline state is missing query, market, or language", node=node
        )
    return context


def read_cycle(state: Mapping[str, object]) -> int:
    cycle = state.get("cycle")
    return cycle if isinstance(cycle, int) and cycle > 0 else 0


def read_candidates(state: Mapping[str, object]) -> list[Candidate]:
    return parse_candidates(state.get("extracted"))


def read_answer(state: Mapping[str, object]) -> list[CatalogRecord]:
    return parse_catalog_records(state.get("answer"))
