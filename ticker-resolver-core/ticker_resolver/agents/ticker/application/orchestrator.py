from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass

from ticker_resolver.agents.ticker.application.resolution_service import (
    ResolutionOutcome,
)
from ticker_resolver.agents.ticker.application.state_readers import (
    read_answer,
    read_candidates,
    read_cycle,
    read_query_context,
)
from ticker_resolver.agents.ticker.application.state_updates import (
    build_cycle_bound_update,
    build_extraction_update,
    build_failure_update,
    build_grading_pass_update,
    build_grading_retry_update,
    build_resolution_update,
    build_rewrite_update,
)
from ticker_resolver.agents.ticker.domain.errors import (
    ERROR_CODE_CYCLE_BOUND_EXCEEDED,
    ERROR_CODE_LOOKUP_DEGRADED,
    SchemaViolationError,
    TickerResolutionError,
)
from ticker_resolver.agents.ticker.domain.models import (
    Candidate,
    CatalogRecord,
    Market,
    QueryContext,
    Verdict,
)
from ticker_resolver.agents.ticker.interface.serializers import (
    serialize_candidates,
    serialize_catalog_records,
)
from ticker_resolver.shared.kernel.tools.incident_logging import (
    CONTRACT_KIND_CATALOG_LOOKUP,
    CONTRACT_KIND_REASONING_OUTPUT,
    CONTRACT_KIND_WORKFLOW_STATE,
    build_replay_diagnostics,
    log_boundary_event,
)
from ticker_resolver.shared.kernel.tools.logger import get_logger, log_event
from ticker_resolver.shared.kernel.workflow_contracts import WorkflowNodeResult

logger = get_logger(__name__)

TickerNodeResult = WorkflowNodeResult


@dataclass
class TickerResolutionOrchestrator:
    extract_candidates_fn: Callable[[QueryContext], Awaitable[list[Candidate]]]
    resolve_candidates_fn: Callable[
        [list[Candidate], Market], Awaitable[ResolutionOutcome]
    ]
    grade_answer_fn: Callable[[QueryContext, list[CatalogRecord]], Awaitable[Verdict]]
    rewrite_query_fn: Callable[
        [QueryContext, list[CatalogRecord]], Awaitable[QueryContext]
    ]
    max_cycles: int = 3

    def _fail(
        self,
        state: Mapping[str, object],
        *,
        node: str,
        error: TickerResolutionError,
    ) -> TickerNodeResult:
        log_boundary_event(
            logger,
            node=f"ticker.{node}",
            contract_kind=(
                CONTRACT_KIND_REASONING_OUTPUT
                if isinstance(error, SchemaViolationError)
                else CONTRACT_KIND_WORKFLOW_STATE
            ),
            error_code=error.error_code,
            state=state,
            detail=error.to_payload(),
            level=logging.ERROR,
        )
        log_event(
            logger,
            event=f"ticker_{node}_failed",
            message=f"Ticker {node} failed: {error.message}",
            level=logging.ERROR,
            error_code=error.error_code,
            fields={"candidate": error.candidate},
        )
        return TickerNodeResult(
            update=build_failure_update(
                node=node,
                error=error,
                diagnostics=build_replay_diagnostics(state, node=f"ticker.{node}"),
            ),
            goto="END",
        )

    def _unexpected(self, node: str, exc: Exception) -> TickerResolutionError:
        logger.exception("Unexpected failure in ticker %s", node)
        return TickerResolutionError(
            f"Unexpected {type(exc).__name__}: {exc}", node=node
        )

    async def run_extraction(self, state: Mapping[str, object]) -> TickerNodeResult:
        cycle = read_cycle(state) + 1
        try:
            context = read_query_context(state, node="extraction")
            log_event(
                logger,
                event="ticker_extraction_started",
                message=f"--- Ticker Resolution: cycle {cycle}, extracting from: {context.query} ---",
                fields={"cycle": cycle, "market": context.market.value},
            )
            candidates = await self.extract_candidates_fn(context)
        except TickerResolutionError as exc:
            return self._fail(state, node="extraction", error=exc)
        except Exception as exc:
            return self._fail(
                state, node="extraction", error=self._unexpected("extraction", exc)
            )

        log_event(
            logger,
            event="ticker_extraction_completed",
            message="Ticker extraction completed",
            fields={
                "cycle": cycle,
                "candidates": [candidate.label() for candidate in candidates],
            },
        )
        return TickerNodeResult(
            update=build_extraction_update(
                candidates=serialize_candidates(candidates), cycle=cycle
            ),
            goto="resolution",
        )

    async def run_resolution(self, state: Mapping[str, object]) -> TickerNodeResult:
        try:
            context = read_query_context(state, node="resolution")
            candidates = read_candidates(state)
            outcome = await self.resolve_candidates_fn(candidates, context.market)
        except TickerResolutionError as exc:
            return self._fail(state, node="resolution", error=exc)
        except Exception as exc:
            return self._fail(
                state, node="resolution", error=self._unexpected("resolution", exc)
            )

        records = outcome.records
        if outcome.degraded:
            log_boundary_event(
                logger,
                node="ticker.resolution",
                contract_kind=CONTRACT_KIND_CATALOG_LOOKUP,
                error_code=ERROR_CODE_LOOKUP_DEGRADED,
                state=state,
                detail={
                    "failures": [
                        {"candidate": f.candidate, "lookup": f.lookup}
                        for f in outcome.failures
                    ]
                },
                level=logging.WARNING,
            )
        log_event(
            logger,
            event="ticker_resolution_completed",
            message="Ticker resolution completed",
            fields={
                "candidate_count": len(candidates),
                "symbols": [record.symbol for record in records],
                "degraded": outcome.degraded,
            },
        )
        return TickerNodeResult(
            update=build_resolution_update(
                answer=serialize_catalog_records(records),
                failures=outcome.failures,
            ),
            goto="grading",
        )

    async def run_grading(self, state: Mapping[str, object]) -> TickerNodeResult:
        cycle = read_cycle(state)
        try:
            context = read_query_context(state, node="grading")
            verdict = await self.grade_answer_fn(context, read_answer(state))
        except TickerResolutionError as exc:
            return self._fail(state, node="grading", error=exc)
        except Exception as exc:
            return self._fail(
                state, node="grading", error=self._unexpected("grading", exc)
            )

        log_event(
            logger,
            event="ticker_grading_completed",
            message=f"Ticker grading verdict: {verdict.value}",
            fields={"cycle": cycle, "score": verdict.value},
        )
        if verdict is Verdict.PASS:
            return TickerNodeResult(
                update=build_grading_pass_update(score=verdict.value), goto="END"
            )

        if cycle >= self.max_cycles:
            log_boundary_event(
                logger,
                node="ticker.grading",
                contract_kind=CONTRACT_KIND_WORKFLOW_STATE,
                error_code=ERROR_CODE_CYCLE_BOUND_EXCEEDED,
                state=state,
                detail={"cycle": cycle, "max_cycles": self.max_cycles},
                level=logging.WARNING,
            )
            return TickerNodeResult(
                update=build_cycle_bound_update(
                    score=verdict.value, cycle=cycle, max_cycles=self.max_cycles
                ),
                goto="END",
            )

        return TickerNodeResult(
            update=build_grading_retry_update(score=verdict.value),
            goto="rewriting",
        )

    async def run_rewriting(self, state: Mapping[str, object]) -> TickerNodeResult:
        try:
            context = read_query_context(state, node="rewriting")
            rewritten = await self.rewrite_query_fn(context, read_answer(state))
        except TickerResolutionError as exc:
            return self._fail(state, node="rewriting", error=exc)
        except Exception as exc:
            return self._fail(
                state, node="rewriting", error=self._unexpected("rewriting", exc)
            )

        log_event(
            logger,
            event="ticker_query_rewritten",
            message=f"--- Ticker Resolution: query rewritten to: {rewritten.query} ---",
            fields={"previous_query": context.query},
        )
        return TickerNodeResult(
            update=build_rewrite_update(query=rewritten.query),
            goto="extraction",
        )
