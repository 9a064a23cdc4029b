from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from ticker_resolver.config.catalog_config import INGESTION_BATCH_SIZE
from ticker_resolver.ingestion.exchange_classifier import (
    assign_countries,
    classify_exchanges,
    group_by_exchange,
)
from ticker_resolver.ingestion.loader import load_catalog_rows
from ticker_resolver.ingestion.market_data_client import FmpMarketDataClient
from ticker_resolver.shared.kernel.tools.logger import get_logger, log_event

logger = get_logger(__name__)


@dataclass(frozen=True)
class IngestionSummary:
    total: int
    exchanges: int
    classified_exchanges: int
    inserted: int
    by_country: dict[str, int] = field(default_factory=dict)


async def run_ingestion(
    client: FmpMarketDataClient,
    *,
    dry_run: bool = False,
    batch_size: int = INGESTION_BATCH_SIZE,
    load_rows_fn=load_catalog_rows,
) -> IngestionSummary:
    """Fetch, classify and (unless dry_run) load the full stock catalog."""
    stocks = await client.get_full_stock_list()
    groups = group_by_exchange(stocks)
    exchange_map = await classify_exchanges(
        groups, search_symbol_fn=client.search_symbol
    )
    rows = assign_countries(stocks, exchange_map)
    by_country = dict(Counter(str(row["country"]) for row in rows))

    inserted = 0
    if not dry_run:
        inserted = await load_rows_fn(rows, batch_size=batch_size)

    summary = IngestionSummary(
        total=len(rows),
        exchanges=len(groups),
        classified_exchanges=len(exchange_map),
        inserted=inserted,
        by_country=by_country,
    )
    log_event(
        logger,
        event="catalog_ingestion_completed",
        message="Catalog ingestion completed",
        fields={
            "total": summary.total,
            "exchanges": summary.exchanges,
            "classified_exchanges": summary.classified_exchanges,
            "inserted": summary.inserted,
            "by_country": summary.by_country,
            "dry_run": dry_run,
        },
    )
    return summary
