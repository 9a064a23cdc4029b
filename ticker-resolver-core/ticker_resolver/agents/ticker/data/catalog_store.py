"""
Read-only access to the stock catalog table.
"""

from __future__ import annotations

from sqlalchemy import Select, func, select

from ticker_resolver.agents.ticker.data.mappers import to_catalog_records
from ticker_resolver.agents.ticker.domain.models import CatalogRecord
from ticker_resolver.config.catalog_config import (
    CATALOG_RESULT_LIMIT,
    CATALOG_SEARCH_CONFIG,
)
from ticker_resolver.infrastructure.database import AsyncSessionLocal
from ticker_resolver.infrastructure.models import (
    StockListing,
    name_search_vector,
    search_config_literal,
)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_exact_symbol_statement(
    symbol: str, *, limit: int = CATALOG_RESULT_LIMIT
) -> Select:
    return (
        select(StockListing)
        .where(StockListing.symbol == symbol)
        .order_by(StockListing.id)
        .limit(limit)
    )


def build_symbol_fragment_statement(
    fragment: str, *, limit: int = CATALOG_RESULT_LIMIT
) -> Select:
    return (
        select(StockListing)
        .where(StockListing.symbol.ilike(f"%{_escape_like(fragment)}%", escape="\\"))
        .order_by(StockListing.id)
        .limit(limit)
    )


def build_name_search_statement(
    name: str,
    *,
    search_config: str = CATALOG_SEARCH_CONFIG,
    limit: int = CATALOG_RESULT_LIMIT,
) -> Select:
    ts_query = func.websearch_to_tsquery(search_config_literal(search_config), name)
    return (
        select(StockListing)
        .where(
            name_search_vector(StockListing.name, search_config).op("@@")(ts_query)
        )
        .order_by(StockListing.id)
        .limit(limit)
    )


class SqlCatalogStore:
    def __init__(
        self,
        *,
        session_factory=AsyncSessionLocal,
        search_config: str = CATALOG_SEARCH_CONFIG,
        limit: int = CATALOG_RESULT_LIMIT,
    ) -> None:
        self._session_factory = session_factory
        self._search_config = search_config
        self._limit = limit

    async def _fetch(self, statement: Select) -> list[CatalogRecord]:
        async with self._session_factory() as session:
            result = await session.execute(statement)
            rows = result.scalars().all()
        return to_catalog_records(row.to_dict() for row in rows)

    async def find_by_symbol(self, symbol: str) -> list[CatalogRecord]:
        return await self._fetch(build_exact_symbol_statement(symbol, limit=self._limit))

    async def find_by_symbol_fragment(self, fragment: str) -> list[CatalogRecord]:
        return await self._fetch(
            build_symbol_fragment_statement(fragment, limit=self._limit)
        )

    async def search_by_name(self, name: str) -> list[CatalogRecord]:
        return await self._fetch(
            build_name_search_statement(
                name, search_config=self._search_config, limit=self._limit
            )
        )
