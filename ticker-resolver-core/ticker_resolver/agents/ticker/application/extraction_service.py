"""
Candidate extraction for the ticker agent.
Drives the reasoning capability with the extraction prompt and the worked examples.
"""

from __future__ import annotations

from collections.abc import Sequence

from ticker_resolver.agents.ticker.application.ports import ReasoningPort
from ticker_resolver.agents.ticker.domain.errors import SchemaViolationError
from ticker_resolver.agents.ticker.domain.extraction_examples import (
    EXTRACTION_EXAMPLES,
    ExtractionExample,
)
from ticker_resolver.agents.ticker.domain.models import Candidate, QueryContext
from ticker_resolver.agents.ticker.domain.prompt_builder import (
    build_extraction_system_prompt,
)
from ticker_resolver.agents.ticker.interface.contracts import StockExtraction
from ticker_resolver.agents.ticker.interface.mappers import to_candidate
from ticker_resolver.agents.ticker.interface.prompt_renderers import (
    build_example_messages,
    build_extraction_chat_prompt,
)
from ticker_resolver.shared.kernel.tools.logger import get_logger

logger = get_logger(__name__)


async def extract_candidates(
    context: QueryContext,
    *,
    reasoner: ReasoningPort,
    examples: Sequence[ExtractionExample] = EXTRACTION_EXAMPLES,
) -> list[Candidate]:
    prompt = build_extraction_chat_prompt(system_prompt=build_extraction_system_prompt())
    try:
        result = await reasoner.invoke_structured(
            prompt,
            StockExtraction,
            {
                "query": context.query,
                "market": context.market.value,
                "language": context.language,
                "examples": build_example_messages(examples),
            },
        )
    except Exception as exc:
        raise SchemaViolationError(
            f"Extraction call failed: {type(exc).__name__}: {exc}",
            node="extraction",
        ) from exc

    if not isinstance(result, StockExtraction):
        raise SchemaViolationError(
            f"Extraction returned {type(result).__name__}, expected StockExtraction",
            node="extraction",
        )

    candidates = [to_candidate(stock) for stock in result.stocks]
    logger.info(
        "Extracted %d candidate(s): %s",
        len(candidates),
        [candidate.label() for candidate in candidates],
    )
    return candidates
