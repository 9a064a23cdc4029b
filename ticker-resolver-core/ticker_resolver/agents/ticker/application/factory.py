from __future__ import annotations

from ticker_resolver.agents.ticker.application.extraction_service import (
    extract_candidates,
)
from ticker_resolver.agents.ticker.application.grading_service import (
    grade_answer,
    rewrite_query,
)
from ticker_resolver.agents.ticker.application.orchestrator import (
    TickerResolutionOrchestrator,
)
from ticker_resolver.agents.ticker.application.ports import (
    CatalogStorePort,
    ReasoningPort,
)
from ticker_resolver.agents.ticker.application.resolution_service import (
    CatalogResolver,
)
from ticker_resolver.agents.ticker.application.runner import TickerResolutionRunner
from ticker_resolver.config.resolution_config import (
    ResolutionSettings,
    get_resolution_settings,
)


def build_ticker_resolution_orchestrator(
    *,
    reasoner: ReasoningPort,
    store: CatalogStorePort,
    settings: ResolutionSettings,
) -> TickerResolutionOrchestrator:
    resolver = CatalogResolver(store, call_timeout=settings.catalog_call_timeout)
    return TickerResolutionOrchestrator(
        extract_candidates_fn=lambda context: extract_candidates(
            context, reasoner=reasoner
        ),
        resolve_candidates_fn=resolver.resolve,
        grade_answer_fn=lambda context, answer: grade_answer(
            context, answer, reasoner=reasoner
        ),
        rewrite_query_fn=lambda context, answer: rewrite_query(
            context, answer, reasoner=reasoner
        ),
        max_cycles=settings.max_cycles,
    )


def build_ticker_resolution_runner(
    *,
    reasoner: ReasoningPort | None = None,
    store: CatalogStorePort | None = None,
    settings: ResolutionSettings | None = None,
) -> TickerResolutionRunner:
    from ticker_resolver.agents.ticker.subgraph import (
        build_ticker_resolution_subgraph,
    )

    settings = settings or get_resolution_settings()
    if reasoner is None:
        from ticker_resolver.infrastructure.llm.structured_output import (
            StructuredOutputReasoner,
        )

        reasoner = StructuredOutputReasoner(timeout=settings.reasoning_call_timeout)
    if store is None:
        from ticker_resolver.agents.ticker.data.catalog_store import SqlCatalogStore

        store = SqlCatalogStore()

    orchestrator = build_ticker_resolution_orchestrator(
        reasoner=reasoner, store=store, settings=settings
    )
    return TickerResolutionRunner(
        graph=build_ticker_resolution_subgraph(orchestrator), settings=settings
    )
