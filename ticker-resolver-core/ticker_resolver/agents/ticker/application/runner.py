from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field

from langgraph.errors import GraphRecursionError
from pydantic import BaseModel

from ticker_resolver.agents.ticker.domain.errors import ERROR_CODE_REQUEST_TIMEOUT
from ticker_resolver.agents.ticker.domain.models import QueryContext
from ticker_resolver.agents.ticker.interface.parsers import parse_catalog_records
from ticker_resolver.agents.ticker.interface.serializers import (
    serialize_answer_for_response,
)
from ticker_resolver.config.resolution_config import ResolutionSettings
from ticker_resolver.shared.kernel.tools.logger import (
    get_logger,
    log_context,
    log_event,
)
from ticker_resolver.shared.kernel.types import JSONObject

logger = get_logger(__name__)

STATUS_RESOLVED = "resolved"
STATUS_LOW_CONFIDENCE = "low_confidence"
STATUS_TIMEOUT = "timeout"
STATUS_FAILED = "failed"
TERMINAL_STATUSES = frozenset({STATUS_RESOLVED, STATUS_LOW_CONFIDENCE, STATUS_FAILED})


@dataclass(frozen=True)
class ResolutionResult:
    query: str
    market: str
    language: str
    status: str
    answer: list[JSONObject] = field(default_factory=list)
    extracted: list[JSONObject] = field(default_factory=list)
    score: str | None = None
    cycles: int = 0
    low_confidence: bool = False
    error: JSONObject | None = None

    @property
    def failed(self) -> bool:
        return self.status == STATUS_FAILED

    def to_payload(self) -> JSONObject:
        return {
            "query": self.query,
            "market": self.market,
            "language": self.language,
            "extracted": self.extracted,
            "answer": self.answer,
            "score": self.score,
            "cycles": self.cycles,
            "status": self.status,
            "low_confidence": self.low_confidence,
            "error": self.error,
        }


def _as_mapping(chunk: object) -> Mapping[str, object]:
    if isinstance(chunk, BaseModel):
        return chunk.model_dump()
    if isinstance(chunk, Mapping):
        return chunk
    return {}


def _json_list(value: object) -> list[JSONObject]:
    if not isinstance(value, list):
        return []
    return [dict(item) for item in value if isinstance(item, Mapping)]


class TickerResolutionRunner:
    """
    Runs one request through the compiled resolution graph.

    Every call starts from a fresh state. The latest streamed snapshot is kept so
    an expired deadline can still return the best answer found so far.
    """

    def __init__(self, *, graph, settings: ResolutionSettings) -> None:
        self._graph = graph
        self._settings = settings

    def _initial_state(self, context: QueryContext) -> dict[str, object]:
        return {
            "query": context.query,
            "market": context.market.value,
            "language": context.language,
            "cycle": 0,
        }

    async def resolve(self, context: QueryContext) -> ResolutionResult:
        request_id = uuid.uuid4().hex
        initial = self._initial_state(context)
        latest: dict[str, object] = dict(initial)

        async def _consume() -> None:
            async for chunk in self._graph.astream(
                initial,
                config={
                    "recursion_limit": self._settings.recursion_limit,
                    "run_name": "ticker_resolution",
                    "metadata": {"request_id": request_id},
                },
                stream_mode="values",
            ):
                latest.update(_as_mapping(chunk))

        with log_context(
            request_id=request_id,
            market=context.market.value,
            language=context.language,
        ):
            log_event(
                logger,
                event="ticker_request_started",
                message=f"Resolving ticker query: {context.query}",
                fields={"max_cycles": self._settings.max_cycles},
            )
            try:
                await asyncio.wait_for(
                    _consume(), timeout=self._settings.request_deadline
                )
            except asyncio.TimeoutError:
                result = self._timeout_result(context, latest)
            except GraphRecursionError as exc:
                result = self._build_result(
                    context,
                    latest,
                    status=STATUS_FAILED,
                    error={
                        "error_code": "TICKER_RECURSION_LIMIT",
                        "node": latest.get("current_node"),
                        "candidate": None,
                        "message": str(exc),
                    },
                )
            else:
                result = self._final_result(context, latest)

            log_event(
                logger,
                event="ticker_request_completed",
                message=f"Ticker request finished with status {result.status}",
                level=logging.ERROR if result.failed else logging.INFO,
                error_code=(result.error or {}).get("error_code"),
                fields={
                    "cycles": result.cycles,
                    "symbols": [record.get("symbol") for record in result.answer],
                },
            )
            return result

    def _build_result(
        self,
        context: QueryContext,
        snapshot: Mapping[str, object],
        *,
        status: str,
        low_confidence: bool = False,
        error: JSONObject | None = None,
    ) -> ResolutionResult:
        query = snapshot.get("query")
        score = snapshot.get("score")
        cycle = snapshot.get("cycle")
        return ResolutionResult(
            query=query if isinstance(query, str) else context.query,
            market=context.market.value,
            language=context.language,
            status=status,
            answer=serialize_answer_for_response(
                parse_catalog_records(snapshot.get("answer"))
            ),
            extracted=_json_list(snapshot.get("extracted")),
            score=score if isinstance(score, str) else None,
            cycles=cycle if isinstance(cycle, int) else 0,
            low_confidence=low_confidence,
            error=error,
        )

    def _final_result(
        self, context: QueryContext, snapshot: Mapping[str, object]
    ) -> ResolutionResult:
        status = snapshot.get("status")
        if status not in TERMINAL_STATUSES:
            return self._build_result(
                context,
                snapshot,
                status=STATUS_FAILED,
                error={
                    "error_code": "TICKER_RESOLUTION_FAILED",
                    "node": snapshot.get("current_node"),
                    "candidate": None,
                    "message": f"Pipeline stopped without a verdict (status={status!r})",
                },
            )

        error = snapshot.get("error")
        return self._build_result(
            context,
            snapshot,
            status=str(status),
            low_confidence=bool(snapshot.get("low_confidence")),
            error=dict(error) if isinstance(error, Mapping) else None,
        )

    def _timeout_result(
        self, context: QueryContext, snapshot: Mapping[str, object]
    ) -> ResolutionResult:
        log_event(
            logger,
            event="ticker_request_timeout",
            message=(
                f"Request deadline of {self._settings.request_deadline}s exceeded; "
                "returning best available answer"
            ),
            level=logging.WARNING,
            error_code=ERROR_CODE_REQUEST_TIMEOUT,
            fields={"current_node": snapshot.get("current_node")},
        )
        return self._build_result(
            context,
            snapshot,
            status=STATUS_TIMEOUT,
            low_confidence=True,
            error={
                "error_code": ERROR_CODE_REQUEST_TIMEOUT,
                "node": snapshot.get("current_node"),
                "candidate": None,
                "message": (
                    f"Request deadline of {self._settings.request_deadline}s exceeded"
                ),
            },
        )
