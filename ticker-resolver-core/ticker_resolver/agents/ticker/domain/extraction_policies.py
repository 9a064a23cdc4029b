from __future__ import annotations

from ticker_resolver.agents.ticker.domain.extraction_examples import NO_TICKER_SENTINEL
from ticker_resolver.agents.ticker.domain.models import Candidate, Confidence


def _clean_text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def normalize_ticker(value: object) -> str | None:
    ticker = _clean_text(value)
    if ticker is None or ticker.lower() == NO_TICKER_SENTINEL.lower():
        return None
    return ticker


def build_candidate(*, ticker: object, name: object, confidence: object) -> Candidate:
    """Turn raw extractor fields into a Candidate; blanks and sentinels become None."""
    return Candidate(
        ticker=normalize_ticker(ticker),
        name=_clean_text(name),
        confidence=Confidence.parse(confidence),
    )
