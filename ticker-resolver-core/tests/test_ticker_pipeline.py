import asyncio
from dataclasses import replace

import pytest

from tests.fakes import FakeReasoner, InMemoryCatalogStore
from ticker_resolver.agents.ticker.application.factory import (
    build_ticker_resolution_runner,
)
from ticker_resolver.agents.ticker.domain.models import Market, QueryContext
from ticker_resolver.agents.ticker.interface.contracts import (
    ExtractedStockModel,
    GradeScore,
    StockExtraction,
    TransformedQuery,
)


def _extraction(*stocks: dict) -> StockExtraction:
    return StockExtraction(stocks=[ExtractedStockModel(**stock) for stock in stocks])


def _runner(reasoner, store, settings):
    return build_ticker_resolution_runner(
        reasoner=reasoner, store=store, settings=settings
    )


@pytest.mark.asyncio
async def test_tesla_resolves_by_exact_symbol(catalog_records, settings):
    reasoner = FakeReasoner(
        {
            "StockExtraction": [
                _extraction({"ticker": "TSLA", "name": "Tesla", "confidence": "High"})
            ],
            "GradeScore": [GradeScore(score="pass")],
        }
    )
    store = InMemoryCatalogStore(catalog_records)

    result = await _runner(reasoner, store, settings).resolve(
        QueryContext(query="Tesla stock price", market=Market.US, language="english")
    )

    assert result.status == "resolved"
    assert result.low_confidence is False
    assert result.cycles == 1
    assert result.score == "pass"
    assert [(r["symbol"], r["country"]) for r in result.answer] == [("TSLA", "US")]
    assert result.error is None


@pytest.mark.asyncio
async def test_misspelled_company_resolves_by_full_text(catalog_records, settings):
    reasoner = FakeReasoner(
        {
            "StockExtraction": [_extraction({"name": "Microsoft"})],
            "GradeScore": [GradeScore(score="pass")],
        }
    )
    store = InMemoryCatalogStore(catalog_records)

    result = await _runner(reasoner, store, settings).resolve(
        QueryContext(query="Microsft stock", market=Market.US, language="english")
    )

    assert [r["symbol"] for r in result.answer] == ["MSFT"]
    assert store.calls == [("full_text", "Microsoft")]


@pytest.mark.asyncio
async def test_persistent_failure_stops_at_cycle_bound(catalog_records, settings):
    reasoner = FakeReasoner(
        {
            "StockExtraction": [
                _extraction({"ticker": "", "name": "Moutai stock", "confidence": "Low"})
            ],
            "GradeScore": [GradeScore(score="fail")],
            "TransformedQuery": [TransformedQuery(query="Moutai stock on CN exchange")],
        }
    )
    store = InMemoryCatalogStore(catalog_records)

    result = await _runner(reasoner, store, settings).resolve(
        QueryContext(query="茅台股票", market=Market.CN, language="simplified chinese")
    )

    assert result.status == "low_confidence"
    assert result.low_confidence is True
    assert result.cycles == settings.max_cycles
    assert result.answer == []
    assert result.query == "Moutai stock on CN exchange"
    assert len(reasoner.calls_for("StockExtraction")) == settings.max_cycles
    assert len(reasoner.calls_for("TransformedQuery")) == settings.max_cycles - 1


@pytest.mark.asyncio
async def test_rewritten_query_resolves_on_second_cycle(catalog_records, settings):
    reasoner = FakeReasoner(
        {
            "StockExtraction": [
                _extraction({"name": "Moutai stock", "confidence": "Low"}),
                _extraction(
                    {"ticker": "600519.SS", "name": "Kweichow Moutai", "confidence": "High"}
                ),
            ],
            "GradeScore": [GradeScore(score="fail"), GradeScore(score="pass")],
            "TransformedQuery": [
                TransformedQuery(query="Kweichow Moutai 600519.SS on Shanghai exchange")
            ],
        }
    )
    store = InMemoryCatalogStore(catalog_records)

    result = await _runner(reasoner, store, settings).resolve(
        QueryContext(query="茅台股票", market=Market.CN, language="simplified chinese")
    )

    assert result.status == "resolved"
    assert result.cycles == 2
    assert [r["symbol"] for r in result.answer] == ["600519.SS"]
    second_extraction = reasoner.calls_for("StockExtraction")[1]
    assert second_extraction["query"].startswith("Kweichow Moutai")
    assert second_extraction["market"] == "CN"


@pytest.mark.asyncio
async def test_multiple_candidates_keep_input_order(catalog_records, settings):
    reasoner = FakeReasoner(
        {
            "StockExtraction": [_extraction({"ticker": "BABA"}, {"ticker": "NVDA"})],
            "GradeScore": [GradeScore(score="pass")],
        }
    )

    result = await _runner(
        reasoner, InMemoryCatalogStore(catalog_records), settings
    ).resolve(
        QueryContext(query="compare BABA and NVDA", market=Market.GLOBAL, language="english")
    )

    assert [r["symbol"] for r in result.answer] == ["BABA", "NVDA"]
    assert len(result.extracted) == 2


@pytest.mark.asyncio
async def test_partial_store_failure_still_answers(catalog_records, settings):
    reasoner = FakeReasoner(
        {
            "StockExtraction": [_extraction({"ticker": "NVD", "name": "NVIDIA"})],
            "GradeScore": [GradeScore(score="pass")],
        }
    )
    store = InMemoryCatalogStore(
        catalog_records, failures={"full_text": ConnectionError("fts down")}
    )

    result = await _runner(reasoner, store, settings).resolve(
        QueryContext(query="NVIDIA", market=Market.US, language="english")
    )

    assert result.status == "resolved"
    assert [r["symbol"] for r in result.answer] == ["NVDA"]


@pytest.mark.asyncio
async def test_identical_requests_give_identical_answers(catalog_records, settings):
    def _reasoner():
        return FakeReasoner(
            {
                "StockExtraction": [_extraction({"ticker": "9988", "name": "Alibaba"})],
                "GradeScore": [GradeScore(score="pass")],
            }
        )

    context = QueryContext(query="Alibaba HK", market=Market.HK, language="english")
    store = InMemoryCatalogStore(catalog_records)

    first = await _runner(_reasoner(), store, settings).resolve(context)
    second = await _runner(_reasoner(), store, settings).resolve(context)

    assert first.answer == second.answer
    assert [r["symbol"] for r in first.answer] == ["9988.HK"]


@pytest.mark.asyncio
async def test_extraction_schema_violation_surfaces_as_failure(catalog_records, settings):
    reasoner = FakeReasoner({"StockExtraction": [ValueError("malformed tool call")]})

    result = await _runner(
        reasoner, InMemoryCatalogStore(catalog_records), settings
    ).resolve(QueryContext(query="Tesla", market=Market.US, language="english"))

    assert result.status == "failed"
    assert result.failed
    assert result.error["error_code"] == "TICKER_SCHEMA_VIOLATION"
    assert result.error["node"] == "extraction"


@pytest.mark.asyncio
async def test_store_outage_surfaces_as_failure(catalog_records, settings):
    error = ConnectionError("catalog unreachable")
    reasoner = FakeReasoner(
        {"StockExtraction": [_extraction({"ticker": "TSLA", "name": "Tesla"})]}
    )
    store = InMemoryCatalogStore(
        catalog_records, failures={"exact": error, "fuzzy": error, "full_text": error}
    )

    result = await _runner(reasoner, store, settings).resolve(
        QueryContext(query="Tesla", market=Market.US, language="english")
    )

    assert result.status == "failed"
    assert result.error["error_code"] == "TICKER_STORE_UNAVAILABLE"
    assert result.error["candidate"] == "TSLA"


@pytest.mark.asyncio
async def test_deadline_returns_best_available_answer(catalog_records, settings):
    async def _slow_rewrite(variables):
        await asyncio.sleep(5)
        return TransformedQuery(query="never used")

    reasoner = FakeReasoner(
        {
            "StockExtraction": [_extraction({"ticker": "TSLA"})],
            "GradeScore": [GradeScore(score="fail")],
            "TransformedQuery": [_slow_rewrite],
        }
    )

    result = await _runner(
        reasoner,
        InMemoryCatalogStore(catalog_records),
        replace(settings, request_deadline=0.3),
    ).resolve(QueryContext(query="Tesla", market=Market.US, language="english"))

    assert result.status == "timeout"
    assert result.low_confidence is True
    assert result.error["error_code"] == "TICKER_REQUEST_TIMEOUT"
    assert [r["symbol"] for r in result.answer] == ["TSLA"]
