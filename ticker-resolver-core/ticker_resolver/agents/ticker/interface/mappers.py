from __future__ import annotations

from ticker_resolver.agents.ticker.domain.extraction_policies import build_candidate
from ticker_resolver.agents.ticker.domain.models import Candidate, CatalogRecord, Market
from ticker_resolver.agents.ticker.interface.contracts import (
    CandidateModel,
    CatalogRecordModel,
    ExtractedStockModel,
)
from ticker_resolver.shared.kernel.types import JSONObject


def to_candidate(model: ExtractedStockModel | CandidateModel) -> Candidate:
    return build_candidate(
        ticker=model.ticker,
        name=model.name,
        confidence=model.confidence,
    )


def from_candidate(candidate: Candidate) -> CandidateModel:
    return CandidateModel(
        ticker=candidate.ticker,
        name=candidate.name,
        confidence=candidate.confidence.value if candidate.confidence else None,
    )


def to_catalog_record(model: CatalogRecordModel) -> CatalogRecord:
    country = Market.parse(model.country)
    if country is None:
        raise ValueError(f"catalog record {model.id} has unknown country {model.country!r}")
    return CatalogRecord(
        id=model.id,
        symbol=model.symbol,
        name=model.name,
        price=model.price,
        exchange=model.exchange,
        exchange_short_name=model.exchange_short_name,
        type=model.type,
        country=country,
    )


def from_catalog_record(record: CatalogRecord) -> CatalogRecordModel:
    return CatalogRecordModel(
        id=record.id,
        symbol=record.symbol,
        name=record.name,
        price=record.price,
        exchange=record.exchange,
        exchange_short_name=record.exchange_short_name,
        type=record.type,
        country=record.country.value,
    )


def to_response_record(record: CatalogRecord) -> JSONObject:
    """Outbound shape: catalog fields with the provider's camelCase exchange key."""
    return {
        "id": record.id,
        "symbol": record.symbol,
        "name": record.name,
        "price": record.price,
        "exchange": record.exchange,
        "exchangeShortName": record.exchange_short_name,
        "type": record.type,
        "country": record.country.value,
    }
