from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Market(str, Enum):
    """User-stated preferred exchange region; also the catalog country code."""

    US = "US"
    HK = "HK"
    CN = "CN"
    GLOBAL = "GLOBAL"

    @classmethod
    def parse(cls, value: object) -> Market | None:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class Confidence(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def parse(cls, value: object) -> Confidence | None:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return None


class Verdict(str, Enum):
    PASS = "pass"
    FAIL = "fail"


class QueryContext(BaseModel):
    """Immutable request input; rewriting produces a new context."""

    model_config = ConfigDict(frozen=True)

    query: str
    market: Market
    language: str

    def with_query(self, query: str) -> QueryContext:
        return self.model_copy(update={"query": query})


class Candidate(BaseModel):
    """An extracted, unresolved mention of a possible ticker/company."""

    model_config = ConfigDict(frozen=True)

    ticker: str | None = Field(None, description="Ticker symbol, if identified")
    name: str | None = Field(None, description="Company name, if identified")
    confidence: Confidence | None = Field(None, description="Extraction confidence")

    @property
    def is_empty(self) -> bool:
        return not self.ticker and not self.name

    def label(self) -> str:
        return self.ticker or self.name or "<empty>"


class CatalogRecord(BaseModel):
    """Canonical stored description of one tradable instrument."""

    model_config = ConfigDict(frozen=True)

    id: int | str
    symbol: str
    name: str
    price: float | None = None
    exchange: str | None = None
    exchange_short_name: str | None = None
    type: str
    country: Market
