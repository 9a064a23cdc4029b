from .exchange_classifier import (
    CURRENCY_TO_COUNTRY,
    EXCHANGE_TO_COUNTRY,
    assign_countries,
    classify_exchanges,
    group_by_exchange,
)
from .job import IngestionSummary, run_ingestion
from .market_data_client import FmpMarketDataClient, MarketDataProviderError

__all__ = [
    "CURRENCY_TO_COUNTRY",
    "EXCHANGE_TO_COUNTRY",
    "FmpMarketDataClient",
    "IngestionSummary",
    "MarketDataProviderError",
    "assign_countries",
    "classify_exchanges",
    "group_by_exchange",
    "run_ingestion",
]
