"""
Catalog resolution for extracted candidates.

Each candidate is looked up independently: exact symbol first, then fuzzy symbol
and full-text name search side by side. All candidate lookups are joined before
returning.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field

from ticker_resolver.agents.ticker.application.ports import CatalogStorePort
from ticker_resolver.agents.ticker.domain.errors import (
    ERROR_CODE_LOOKUP_DEGRADED,
    ERROR_CODE_NO_MATCH,
    StoreUnavailableError,
)
from ticker_resolver.agents.ticker.domain.models import (
    Candidate,
    CatalogRecord,
    Market,
)
from ticker_resolver.agents.ticker.domain.ranking_policies import (
    merge_lookup_results,
    select_best_match,
)
from ticker_resolver.shared.kernel.tools.logger import get_logger, log_event

logger = get_logger(__name__)

LOOKUP_EXACT = "exact"
LOOKUP_FUZZY = "fuzzy"
LOOKUP_FULL_TEXT = "full_text"


@dataclass(frozen=True)
class LookupFailure:
    candidate: str
    lookup: str
    message: str


@dataclass(frozen=True)
class CandidateResolution:
    candidate: Candidate
    record: CatalogRecord | None = None
    source: str | None = None
    lookups_issued: int = 0
    failures: tuple[LookupFailure, ...] = ()


@dataclass(frozen=True)
class ResolutionOutcome:
    resolutions: list[CandidateResolution] = field(default_factory=list)

    @property
    def records(self) -> list[CatalogRecord]:
        return [r.record for r in self.resolutions if r.record is not None]

    @property
    def failures(self) -> list[LookupFailure]:
        return [failure for r in self.resolutions for failure in r.failures]

    @property
    def degraded(self) -> bool:
        return bool(self.failures)


class CatalogResolver:
    def __init__(self, store: CatalogStorePort, *, call_timeout: float) -> None:
        self._store = store
        self._call_timeout = call_timeout

    async def resolve(
        self, candidates: list[Candidate], market: Market
    ) -> ResolutionOutcome:
        resolutions = await asyncio.gather(
            *(self._resolve_candidate(candidate, market) for candidate in candidates)
        )
        outcome = ResolutionOutcome(resolutions=list(resolutions))

        issued = sum(r.lookups_issued for r in outcome.resolutions)
        failures = outcome.failures
        if issued and len(failures) == issued:
            raise StoreUnavailableError(
                f"All {issued} catalog lookup(s) failed; last error: {failures[-1].message}",
                node="resolution",
                candidate=failures[0].candidate,
            )
        return outcome

    async def _lookup(
        self,
        candidate: Candidate,
        lookup: str,
        call: Awaitable[list[CatalogRecord]],
    ) -> tuple[list[CatalogRecord], LookupFailure | None]:
        try:
            records = await asyncio.wait_for(call, timeout=self._call_timeout)
        except asyncio.TimeoutError:
            message = f"{lookup} lookup timed out after {self._call_timeout}s"
        except Exception as exc:
            message = f"{lookup} lookup failed: {type(exc).__name__}: {exc}"
        else:
            return list(records), None

        log_event(
            logger,
            event="catalog_lookup_failed",
            message=message,
            level=logging.WARNING,
            error_code=ERROR_CODE_LOOKUP_DEGRADED,
            fields={"candidate": candidate.label(), "lookup": lookup},
        )
        return [], LookupFailure(
            candidate=candidate.label(), lookup=lookup, message=message
        )

    async def _resolve_candidate(
        self, candidate: Candidate, market: Market
    ) -> CandidateResolution:
        if candidate.is_empty:
            return CandidateResolution(candidate=candidate)

        failures: list[LookupFailure] = []
        issued = 0

        if candidate.ticker:
            issued += 1
            exact_hits, failure = await self._lookup(
                candidate, LOOKUP_EXACT, self._store.find_by_symbol(candidate.ticker)
            )
            if failure is not None:
                failures.append(failure)
            if exact_hits:
                return CandidateResolution(
                    candidate=candidate,
                    record=select_best_match(exact_hits, market),
                    source=LOOKUP_EXACT,
                    lookups_issued=issued,
                    failures=tuple(failures),
                )

        branches: dict[str, Awaitable[list[CatalogRecord]]] = {}
        if candidate.ticker:
            branches[LOOKUP_FUZZY] = self._store.find_by_symbol_fragment(
                candidate.ticker
            )
        if candidate.name:
            branches[LOOKUP_FULL_TEXT] = self._store.search_by_name(candidate.name)
        issued += len(branches)

        results = await asyncio.gather(
            *(
                self._lookup(candidate, lookup, call)
                for lookup, call in branches.items()
            )
        )
        hits: dict[str, list[CatalogRecord]] = {}
        for lookup, (records, failure) in zip(branches, results):
            hits[lookup] = records
            if failure is not None:
                failures.append(failure)

        merged = merge_lookup_results(
            hits.get(LOOKUP_FUZZY, []), hits.get(LOOKUP_FULL_TEXT, [])
        )
        record = select_best_match(merged, market)
        if record is None:
            log_event(
                logger,
                event="catalog_candidate_unmatched",
                message=f"No catalog match for candidate {candidate.label()}",
                error_code=ERROR_CODE_NO_MATCH,
                fields={"degraded": bool(failures)},
            )

        return CandidateResolution(
            candidate=candidate,
            record=record,
            source="merged" if record is not None else None,
            lookups_issued=issued,
            failures=tuple(failures),
        )
