from __future__ import annotations

import json

import httpx
import pytest

from ticker_resolver.agents.ticker.domain.models import Market
from ticker_resolver.ingestion.contracts import ProviderStock, SymbolSearchResult
from ticker_resolver.ingestion.exchange_classifier import (
    assign_countries,
    classify_exchanges,
    country_for_currency,
    group_by_exchange,
)
from ticker_resolver.ingestion.job import run_ingestion
from ticker_resolver.ingestion.loader import iter_batches
from ticker_resolver.ingestion.market_data_client import (
    FmpMarketDataClient,
    MarketDataProviderError,
)


def _listing(symbol, name, price, exchange, short_name):
    return {
        "symbol": symbol,
        "name": name,
        "price": price,
        "exchange": exchange,
        "exchangeShortName": short_name,
        "type": "stock",
    }


STOCK_LIST = [
    _listing("AAPL", "Apple Inc.", 190.0, "NASDAQ Global Select", "NASDAQ"),
    _listing("0005.HK", "HSBC Holdings plc", 62.0, "HKSE", "HKSE"),
    _listing("600519.SS", "Kweichow Moutai Co., Ltd.", 1500.0, "Shanghai", "SHH"),
    _listing("SAP.DE", "SAP SE", 180.0, "XETRA", "XETRA"),
    _listing("ODD", "Odd Listing", None, None, None),
    {"symbol": "BROKEN"},
]

SEARCH_RESULTS = {
    "600519.SS": [{"symbol": "600519.SS", "name": "Kweichow Moutai", "currency": "CNY"}],
    "SAP.DE": [{"symbol": "SAP.DE", "name": "SAP SE", "currency": "EUR"}],
}


def _provider_handler(calls: list[str]):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        assert request.url.params["apikey"] == "test-key"
        if request.url.path == "/api/v3/stock/list":
            return httpx.Response(200, json=STOCK_LIST)
        if request.url.path == "/stable/search-symbol":
            return httpx.Response(
                200, json=SEARCH_RESULTS.get(request.url.params["query"], [])
            )
        return httpx.Response(404)

    return handler


def _client(tmp_path, calls: list[str], handler=None) -> FmpMarketDataClient:
    transport = httpx.MockTransport(handler or _provider_handler(calls))
    return FmpMarketDataClient(
        api_key="test-key",
        cache_dir=tmp_path,
        http_client=httpx.AsyncClient(
            transport=transport, base_url="https://fmp.test"
        ),
    )


def _stock(symbol: str, exchange: str | None) -> ProviderStock:
    return ProviderStock(
        symbol=symbol, name=symbol, exchange_short_name=exchange, type="stock"
    )


def test_group_by_exchange_buckets_missing_exchange_as_unknown():
    groups = group_by_exchange(
        [_stock("A", "NYSE"), _stock("B", None), _stock("C", None)]
    )

    assert sorted(groups) == ["NYSE", "UNKNOWN"]
    assert [stock.symbol for stock in groups["UNKNOWN"]] == ["B", "C"]


def test_country_for_currency_defaults_to_global():
    assert country_for_currency("hkd") is Market.HK
    assert country_for_currency("EUR") is Market.GLOBAL


@pytest.mark.asyncio
async def test_classify_exchanges_samples_only_unmapped_exchanges():
    sampled: list[str] = []

    async def search(symbol: str) -> list[SymbolSearchResult]:
        sampled.append(symbol)
        if symbol == "X1":
            raise httpx.ConnectError("provider down")
        if symbol == "E1":
            return []
        return [SymbolSearchResult(symbol=symbol, name=symbol, currency="CNY")]

    groups = group_by_exchange(
        [
            _stock("AAPL", "NASDAQ"),
            _stock("S1", "SHH"),
            _stock("S2", "SHH"),
            _stock("X1", "FLAKY"),
            _stock("E1", "EMPTY"),
            _stock("U1", None),
        ]
    )

    exchange_map = await classify_exchanges(groups, search_symbol_fn=search)

    assert exchange_map == {"NASDAQ": Market.US, "SHH": Market.CN}
    assert sorted(sampled) == ["E1", "S1", "X1"]


def test_assign_countries_defaults_unclassified_to_global():
    rows = assign_countries(
        [_stock("AAPL", "NASDAQ"), _stock("Z", "NOWHERE"), _stock("U", None)],
        {"NASDAQ": Market.US},
    )

    assert [row["country"] for row in rows] == ["US", "GLOBAL", "GLOBAL"]
    assert rows[0]["exchange_short_name"] == "NASDAQ"


@pytest.mark.asyncio
async def test_client_caches_stock_list_and_skips_invalid_entries(tmp_path):
    calls: list[str] = []
    async with _client(tmp_path, calls) as client:
        first = await client.get_full_stock_list()
        second = await client.get_full_stock_list()

    assert calls == ["/api/v3/stock/list"]
    assert len(first) == len(STOCK_LIST) - 1
    assert [stock.symbol for stock in second] == [stock.symbol for stock in first]
    cached = json.loads((tmp_path / "full-stocks-list.json").read_text())
    assert cached[0]["exchangeShortName"] == "NASDAQ"


@pytest.mark.asyncio
async def test_client_raises_on_non_200(tmp_path):
    calls: list[str] = []
    client = _client(tmp_path, calls, handler=lambda request: httpx.Response(503))

    with pytest.raises(MarketDataProviderError, match="503"):
        await client.get_full_stock_list()
    await client.aclose()


@pytest.mark.asyncio
async def test_dry_run_classifies_without_loading(tmp_path):
    calls: list[str] = []
    loaded: list[list[dict]] = []

    async def load_rows(rows, *, batch_size):
        loaded.append(rows)
        return len(rows)

    async with _client(tmp_path, calls) as client:
        summary = await run_ingestion(client, dry_run=True, load_rows_fn=load_rows)

    assert loaded == []
    assert summary.total == 5
    assert summary.inserted == 0
    assert summary.by_country == {"US": 1, "HK": 1, "CN": 1, "GLOBAL": 2}
    assert sorted(path for path in calls if path.endswith("search-symbol")) == [
        "/stable/search-symbol",
        "/stable/search-symbol",
    ]


@pytest.mark.asyncio
async def test_run_ingestion_loads_rows_in_batches(tmp_path):
    calls: list[str] = []
    captured: dict[str, object] = {}

    async def load_rows(rows, *, batch_size):
        captured["rows"] = rows
        captured["batch_size"] = batch_size
        return len(rows)

    async with _client(tmp_path, calls) as client:
        summary = await run_ingestion(client, batch_size=2, load_rows_fn=load_rows)

    assert summary.inserted == 5
    assert captured["batch_size"] == 2
    assert {row["symbol"]: row["country"] for row in captured["rows"]}["SAP.DE"] == "GLOBAL"


def test_iter_batches_splits_rows():
    rows = [{"symbol": str(index)} for index in range(5)]

    assert [len(batch) for batch in iter_batches(rows, 2)] == [2, 2, 1]
