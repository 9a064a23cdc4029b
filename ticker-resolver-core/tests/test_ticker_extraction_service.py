import pytest
from langchain_core.messages import AIMessage, HumanMessage, ToolMessage
from pydantic import ValidationError

from tests.fakes import FakeReasoner
from ticker_resolver.agents.ticker.application.extraction_service import (
    extract_candidates,
)
from ticker_resolver.agents.ticker.domain.errors import SchemaViolationError
from ticker_resolver.agents.ticker.domain.extraction_examples import (
    EXTRACTION_EXAMPLES,
)
from ticker_resolver.agents.ticker.domain.models import (
    Confidence,
    Market,
    QueryContext,
)
from ticker_resolver.agents.ticker.interface.contracts import (
    ExtractedStockModel,
    GradeScore,
    StockExtraction,
)
from ticker_resolver.agents.ticker.interface.prompt_renderers import (
    TOOL_ACKNOWLEDGEMENT,
    build_example_messages,
)

CONTEXT = QueryContext(query="Tesla stock price", market=Market.US, language="english")


@pytest.mark.asyncio
async def test_extract_candidates_maps_structured_output():
    reasoner = FakeReasoner(
        {
            "StockExtraction": [
                StockExtraction(
                    stocks=[
                        ExtractedStockModel(
                            ticker=" TSLA ", name="Tesla", confidence="high"
                        )
                    ]
                )
            ]
        }
    )

    candidates = await extract_candidates(CONTEXT, reasoner=reasoner)

    assert len(candidates) == 1
    assert candidates[0].ticker == "TSLA"
    assert candidates[0].name == "Tesla"
    assert candidates[0].confidence is Confidence.HIGH
    variables = reasoner.calls_for("StockExtraction")[0]
    assert variables["query"] == "Tesla stock price"
    assert variables["market"] == "US"
    assert variables["language"] == "english"
    assert len(variables["examples"]) == 3 * len(EXTRACTION_EXAMPLES)


@pytest.mark.asyncio
async def test_extract_candidates_normalizes_sentinel_and_blank_tickers():
    reasoner = FakeReasoner(
        {
            "StockExtraction": [
                StockExtraction(
                    stocks=[
                        ExtractedStockModel(ticker="No tickers found"),
                        ExtractedStockModel(
                            ticker="", name="Moutai stock", confidence="Low"
                        ),
                        ExtractedStockModel(ticker="X", confidence="certain"),
                    ]
                )
            ]
        }
    )

    candidates = await extract_candidates(CONTEXT, reasoner=reasoner)

    assert candidates[0].is_empty
    assert candidates[1].ticker is None
    assert candidates[1].name == "Moutai stock"
    assert candidates[2].confidence is None


@pytest.mark.asyncio
async def test_extract_candidates_wraps_reasoning_errors():
    reasoner = FakeReasoner(
        {
            "StockExtraction": [
                ValidationError.from_exception_data("StockExtraction", [])
            ]
        }
    )

    with pytest.raises(SchemaViolationError) as exc_info:
        await extract_candidates(CONTEXT, reasoner=reasoner)

    assert exc_info.value.node == "extraction"
    assert exc_info.value.error_code == "TICKER_SCHEMA_VIOLATION"


@pytest.mark.asyncio
async def test_extract_candidates_rejects_wrong_schema():
    reasoner = FakeReasoner({"StockExtraction": [GradeScore(score="pass")]})

    with pytest.raises(SchemaViolationError, match="expected StockExtraction"):
        await extract_candidates(CONTEXT, reasoner=reasoner)


def test_example_messages_form_completed_tool_calls():
    messages = build_example_messages(EXTRACTION_EXAMPLES[:2])

    assert [type(message) for message in messages] == [
        HumanMessage,
        AIMessage,
        ToolMessage,
    ] * 2
    human, ai, tool = messages[3:6]
    assert "AAPL" in human.content
    assert ai.tool_calls[0]["name"] == "StockExtraction"
    assert ai.tool_calls[0]["args"] == {
        "stocks": [{"ticker": "AAPL", "name": "Apple Inc.", "confidence": "High"}]
    }
    assert tool.tool_call_id == ai.tool_calls[0]["id"]
    assert tool.content == TOOL_ACKNOWLEDGEMENT


def test_example_messages_use_fresh_tool_call_ids():
    first = build_example_messages(EXTRACTION_EXAMPLES[:1])[1]
    second = build_example_messages(EXTRACTION_EXAMPLES[:1])[1]

    assert first.tool_calls[0]["id"] != second.tool_calls[0]["id"]
