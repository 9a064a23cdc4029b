"""
Market data provider client used by the offline catalog build.
Responses are cached as JSON files so reruns do not hit the provider again.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ticker_resolver.config.catalog_config import (
    FMP_API_KEY,
    FMP_BASE_URL,
    FMP_TIMEOUT,
    INGESTION_CACHE_DIR,
)
from ticker_resolver.ingestion.contracts import ProviderStock, SymbolSearchResult
from ticker_resolver.shared.kernel.tools.logger import get_logger, log_event

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

FULL_STOCK_LIST_PATH = "/api/v3/stock/list"
SEARCH_SYMBOL_PATH = "/stable/search-symbol"
FULL_STOCK_LIST_CACHE = "full-stocks-list.json"


class MarketDataProviderError(RuntimeError):
    pass


def _validate_entries(raw: object, model: type[ModelT], *, source: str) -> list[ModelT]:
    if not isinstance(raw, list):
        raise MarketDataProviderError(
            f"{source} returned {type(raw).__name__}, expected a list"
        )
    entries: list[ModelT] = []
    skipped = 0
    for item in raw:
        try:
            entries.append(model.model_validate(item))
        except ValidationError:
            skipped += 1
    if skipped:
        log_event(
            logger,
            event="provider_entries_skipped",
            message=f"Skipped {skipped} invalid {source} entries",
            level=logging.WARNING,
            error_code="INGESTION_PROVIDER_ENTRY_INVALID",
            fields={"source": source, "skipped": skipped, "kept": len(entries)},
        )
    return entries


class FmpMarketDataClient:
    def __init__(
        self,
        *,
        api_key: str | None = FMP_API_KEY,
        base_url: str = FMP_BASE_URL,
        cache_dir: str | Path = INGESTION_CACHE_DIR,
        timeout: float = FMP_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key or ""
        self._cache_dir = Path(cache_dir)
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout, follow_redirects=True
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> FmpMarketDataClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _read_cache(self, path: Path) -> object | None:
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def _write_cache(self, path: Path, entries: list[BaseModel]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = [entry.model_dump(mode="json", by_alias=True) for entry in entries]
        path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
        )

    async def _get_json(self, path: str, params: dict[str, str]) -> object:
        resp = await self._client.get(path, params={**params, "apikey": self._api_key})
        if resp.status_code != 200:
            raise MarketDataProviderError(
                f"Market data provider returned status {resp.status_code} for {path}"
            )
        return resp.json()

    async def get_full_stock_list(self) -> list[ProviderStock]:
        cache_path = self._cache_dir / FULL_STOCK_LIST_CACHE
        cached = self._read_cache(cache_path)
        if cached is not None:
            log_event(
                logger,
                event="provider_stock_list_cache_hit",
                message="Loaded full stock list from cache",
                fields={"path": str(cache_path)},
            )
            return _validate_entries(cached, ProviderStock, source="stock list")

        raw = await self._get_json(FULL_STOCK_LIST_PATH, {})
        stocks = _validate_entries(raw, ProviderStock, source="stock list")
        self._write_cache(cache_path, stocks)
        log_event(
            logger,
            event="provider_stock_list_fetched",
            message=f"Fetched {len(stocks)} instruments from provider",
            fields={"count": len(stocks)},
        )
        return stocks

    async def search_symbol(self, symbol: str) -> list[SymbolSearchResult]:
        cache_path = self._cache_dir / "symbol" / f"{symbol}.json"
        cached = self._read_cache(cache_path)
        if cached is not None:
            return _validate_entries(cached, SymbolSearchResult, source="symbol search")

        raw = await self._get_json(SEARCH_SYMBOL_PATH, {"query": symbol})
        results = _validate_entries(raw, SymbolSearchResult, source="symbol search")
        self._write_cache(cache_path, results)
        return results
