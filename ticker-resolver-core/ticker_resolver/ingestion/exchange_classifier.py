"""
Exchange -> country classification for the catalog build.

Known exchanges come from a static map. Any other exchange is classified by
looking up its first listed instrument and mapping that instrument's currency.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping

from ticker_resolver.agents.ticker.domain.models import Market
from ticker_resolver.ingestion.contracts import ProviderStock, SymbolSearchResult
from ticker_resolver.shared.kernel.tools.logger import get_logger, log_event
from ticker_resolver.shared.kernel.types import JSONObject

logger = get_logger(__name__)

UNKNOWN_EXCHANGE = "UNKNOWN"

EXCHANGE_TO_COUNTRY: dict[str, Market] = {
    "HKSE": Market.HK,
    "NYSE": Market.US,
    "NASDAQ": Market.US,
}

CURRENCY_TO_COUNTRY: dict[str, Market] = {
    "USD": Market.US,
    "HKD": Market.HK,
    "CNY": Market.CN,
}

SearchSymbolFn = Callable[[str], Awaitable[list[SymbolSearchResult]]]


def group_by_exchange(stocks: list[ProviderStock]) -> dict[str, list[ProviderStock]]:
    groups: dict[str, list[ProviderStock]] = {}
    for stock in stocks:
        exchange = stock.exchange_short_name or UNKNOWN_EXCHANGE
        groups.setdefault(exchange, []).append(stock)
    return groups


def country_for_currency(currency: str) -> Market:
    return CURRENCY_TO_COUNTRY.get(currency.strip().upper(), Market.GLOBAL)


async def _classify_by_sample(
    exchange: str, sample: ProviderStock, search_symbol_fn: SearchSymbolFn
) -> Market | None:
    try:
        results = await search_symbol_fn(sample.symbol)
    except Exception as exc:
        log_event(
            logger,
            event="exchange_sample_lookup_failed",
            message=f"Sample lookup failed for exchange {exchange}",
            level=logging.ERROR,
            error_code="INGESTION_SAMPLE_LOOKUP_FAILED",
            fields={"exchange": exchange, "symbol": sample.symbol, "exception": str(exc)},
        )
        return None

    if not results:
        log_event(
            logger,
            event="exchange_sample_lookup_empty",
            message=f"No search results found for exchange {exchange}",
            level=logging.WARNING,
            error_code="INGESTION_SAMPLE_LOOKUP_EMPTY",
            fields={"exchange": exchange, "symbol": sample.symbol},
        )
        return None
    return country_for_currency(results[0].currency)


async def classify_exchanges(
    groups: Mapping[str, list[ProviderStock]],
    *,
    search_symbol_fn: SearchSymbolFn,
    static_map: Mapping[str, Market] = EXCHANGE_TO_COUNTRY,
) -> dict[str, Market]:
    """Return a country for every exchange that could be classified."""
    exchange_map = {
        exchange: country
        for exchange, country in static_map.items()
        if exchange in groups
    }
    unclassified = [
        exchange
        for exchange, stocks in groups.items()
        if exchange not in exchange_map and exchange != UNKNOWN_EXCHANGE and stocks
    ]

    countries = await asyncio.gather(
        *(
            _classify_by_sample(exchange, groups[exchange][0], search_symbol_fn)
            for exchange in unclassified
        )
    )
    for exchange, country in zip(unclassified, countries):
        if country is not None:
            exchange_map[exchange] = country
    return exchange_map


def assign_countries(
    stocks: list[ProviderStock], exchange_map: Mapping[str, Market]
) -> list[JSONObject]:
    """Build catalog rows; instruments on unclassified exchanges default to GLOBAL."""
    rows: list[JSONObject] = []
    for stock in stocks:
        country = exchange_map.get(stock.exchange_short_name or "", Market.GLOBAL)
        rows.append(
            {
                "symbol": stock.symbol,
                "name": stock.name,
                "price": stock.price,
                "exchange": stock.exchange,
                "exchange_short_name": stock.exchange_short_name,
                "type": stock.type,
                "country": country.value,
            }
        )
    return rows
