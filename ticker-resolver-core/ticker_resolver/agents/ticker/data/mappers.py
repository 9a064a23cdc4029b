from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from ticker_resolver.agents.ticker.domain.models import CatalogRecord, Market
from ticker_resolver.shared.kernel.tools.logger import get_logger, log_event

logger = get_logger(__name__)


def _text(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


def _price(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    return float(value) if isinstance(value, int | float) else None


def to_catalog_record(row: Mapping[str, object]) -> CatalogRecord | None:
    """Map one catalog row; rows missing identity, symbol, name or country yield None."""
    row_id = row.get("id")
    symbol = _text(row.get("symbol"))
    name = _text(row.get("name"))
    country = Market.parse(row.get("country"))
    if not isinstance(row_id, int | str) or symbol is None or name is None:
        return None
    if country is None:
        return None

    return CatalogRecord(
        id=row_id,
        symbol=symbol,
        name=name,
        price=_price(row.get("price")),
        exchange=_text(row.get("exchange")),
        exchange_short_name=_text(row.get("exchange_short_name")),
        type=_text(row.get("type")) or "stock",
        country=country,
    )


def to_catalog_records(rows: Iterable[Mapping[str, object]]) -> list[CatalogRecord]:
    records: list[CatalogRecord] = []
    for row in rows:
        record = to_catalog_record(row)
        if record is None:
            log_event(
                logger,
                event="catalog_row_skipped",
                message="Skipping malformed catalog row",
                level=logging.WARNING,
                error_code="TICKER_CATALOG_ROW_MALFORMED",
                fields={"id": row.get("id"), "symbol": row.get("symbol")},
            )
            continue
        records.append(record)
    return records
