from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ExtractedStockModel(BaseModel):
    ticker: str | None = Field(None, description="The ticker symbol of the stock")
    name: str | None = Field(
        None, description="The name of the company the stock belongs to"
    )
    confidence: str | None = Field(
        None, description="The confidence level of the prediction: High, Medium or Low"
    )


class StockExtraction(BaseModel):
    """Stocks extracted from the user query."""

    stocks: list[ExtractedStockModel] = Field(
        default_factory=list,
        description="The list of stocks extracted from the user query",
    )


class GradeScore(BaseModel):
    """Grade the relevance of the resolved stocks to the question. Either 'pass' or 'fail'."""

    score: Literal["pass", "fail"] = Field(
        ..., description="Relevance score 'pass' or 'fail'"
    )


class TransformedQuery(BaseModel):
    """Rewritten stock query emphasizing the preferred exchange."""

    query: str = Field(..., description="The user query")


class CatalogRecordModel(BaseModel):
    """JSON shape of a catalog record inside the pipeline state."""

    model_config = ConfigDict(extra="ignore")

    id: int | str
    symbol: str
    name: str
    price: float | None = None
    exchange: str | None = None
    exchange_short_name: str | None = None
    type: str
    country: str


class CandidateModel(BaseModel):
    """JSON shape of a normalized candidate inside the pipeline state."""

    model_config = ConfigDict(extra="ignore")

    ticker: str | None = None
    name: str | None = None
    confidence: str | None = None
