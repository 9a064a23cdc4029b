from __future__ import annotations

from ticker_resolver.agents.ticker.application.ports import ReasoningPort
from ticker_resolver.agents.ticker.domain.errors import SchemaViolationError
from ticker_resolver.agents.ticker.domain.models import (
    CatalogRecord,
    QueryContext,
    Verdict,
)
from ticker_resolver.agents.ticker.domain.prompt_builder import (
    build_grader_prompt,
    build_query_rewrite_prompt,
)
from ticker_resolver.agents.ticker.interface.contracts import (
    GradeScore,
    TransformedQuery,
)
from ticker_resolver.agents.ticker.interface.parsers import parse_verdict
from ticker_resolver.agents.ticker.interface.prompt_renderers import (
    build_grader_chat_prompt,
    build_query_rewrite_chat_prompt,
)
from ticker_resolver.agents.ticker.interface.serializers import (
    format_answer_for_prompt,
)


async def grade_answer(
    context: QueryContext, answer: list[CatalogRecord], *, reasoner: ReasoningPort
) -> Verdict:
    """Ask whether the resolved records plausibly answer the query for the market."""
    prompt = build_grader_chat_prompt(grader_prompt=build_grader_prompt())
    try:
        result = await reasoner.invoke_structured(
            prompt,
            GradeScore,
            {
                "answer": format_answer_for_prompt(answer),
                "query": context.query,
                "market": context.market.value,
            },
        )
    except Exception as exc:
        raise SchemaViolationError(
            f"Grading call failed: {type(exc).__name__}: {exc}", node="grading"
        ) from exc

    if not isinstance(result, GradeScore):
        raise SchemaViolationError(
            f"Grading returned {type(result).__name__}, expected GradeScore",
            node="grading",
        )
    verdict = parse_verdict(result.score)
    if verdict is None:
        raise SchemaViolationError(
            f"Grading returned unknown score {result.score!r}", node="grading"
        )
    return verdict


async def rewrite_query(
    context: QueryContext, answer: list[CatalogRecord], *, reasoner: ReasoningPort
) -> QueryContext:
    """Restate the query with explicit exchange emphasis; market and language carry over."""
    prompt = build_query_rewrite_chat_prompt(rewrite_prompt=build_query_rewrite_prompt())
    try:
        result = await reasoner.invoke_structured(
            prompt,
            TransformedQuery,
            {
                "query": context.query,
                "market": context.market.value,
                "answer": format_answer_for_prompt(answer),
            },
        )
    except Exception as exc:
        raise SchemaViolationError(
            f"Query rewrite call failed: {type(exc).__name__}: {exc}",
            node="rewriting",
        ) from exc

    if not isinstance(result, TransformedQuery) or not result.query.strip():
        raise SchemaViolationError(
            "Query rewrite returned no usable query", node="rewriting"
        )
    return context.with_query(result.query.strip())
