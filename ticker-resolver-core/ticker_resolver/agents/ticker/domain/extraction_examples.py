from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractionExample:
    """A worked input -> expected-candidates pair shown to the extractor."""

    input: str
    stocks: tuple[dict[str, str], ...]


EXTRACTION_EXAMPLES: tuple[ExtractionExample, ...] = (
    ExtractionExample(
        input="random text",
        stocks=({"ticker": "No tickers found"},),
    ),
    ExtractionExample(
        input="我想了解苹果公司的股票 AAPL 现在表现如何？",
        stocks=({"ticker": "AAPL", "name": "Apple Inc.", "confidence": "High"},),
    ),
    ExtractionExample(
        input="Thoughts on HSBC",
        stocks=({"ticker": "HSBC", "name": "HSBC", "confidence": "High"},),
    ),
    ExtractionExample(
        input="Microsft stock",
        stocks=({"ticker": "MSFT", "name": "Microsoft", "confidence": "High"},),
    ),
    ExtractionExample(
        input="compare BABA and NVDA",
        stocks=(
            {"ticker": "BABA", "name": "Alibaba", "confidence": "High"},
            {"ticker": "NVDA", "name": "NVIDIA", "confidence": "High"},
        ),
    ),
    ExtractionExample(
        input="中国最大的电商公司股票值得投资吗？",
        stocks=({"ticker": "BABA", "name": "Alibaba", "confidence": "Medium"},),
    ),
    ExtractionExample(
        input="茅台股票",
        stocks=({"ticker": "", "name": "Moutai stock", "confidence": "Low"},),
    ),
    ExtractionExample(
        input="how is Canadian Utilities stock performing?",
        stocks=({"ticker": "", "name": "Canadian Utilities", "confidence": "Low"},),
    ),
)

# Sentinel the examples teach the model to emit when nothing is identifiable.
NO_TICKER_SENTINEL = "No tickers found"
