from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProviderStock(BaseModel):
    """One entry of the provider's full instrument list."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    symbol: str
    name: str
    price: float | None = None
    exchange: str | None = None
    exchange_short_name: str | None = Field(None, alias="exchangeShortName")
    type: str


class SymbolSearchResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    symbol: str
    name: str
    currency: str
    stock_exchange: str | None = Field(None, alias="stockExchange")
    exchange_short_name: str | None = Field(None, alias="exchangeShortName")
