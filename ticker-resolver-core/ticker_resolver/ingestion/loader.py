from __future__ import annotations

from sqlalchemy import insert

from ticker_resolver.config.catalog_config import INGESTION_BATCH_SIZE
from ticker_resolver.infrastructure.database import AsyncSessionLocal
from ticker_resolver.infrastructure.models import StockListing
from ticker_resolver.shared.kernel.tools.logger import get_logger, log_event
from ticker_resolver.shared.kernel.types import JSONObject

logger = get_logger(__name__)


def iter_batches(rows: list[JSONObject], batch_size: int):
    if batch_size < 1:
        raise ValueError("batch_size must be positive")
    for start in range(0, len(rows), batch_size):
        yield rows[start : start + batch_size]


async def load_catalog_rows(
    rows: list[JSONObject],
    *,
    session_factory=AsyncSessionLocal,
    batch_size: int = INGESTION_BATCH_SIZE,
) -> int:
    inserted = 0
    async with session_factory() as session:
        for batch in iter_batches(rows, batch_size):
            await session.execute(insert(StockListing), batch)
            inserted += len(batch)
            log_event(
                logger,
                event="catalog_batch_inserted",
                message=f"Inserted {inserted}/{len(rows)} catalog rows",
                fields={"batch_size": len(batch)},
            )
        await session.commit()
    return inserted
