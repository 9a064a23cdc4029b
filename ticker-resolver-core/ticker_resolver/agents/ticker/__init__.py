from .application import (
    ResolutionResult,
    TickerResolutionRunner,
    build_ticker_resolution_runner,
)
from .domain import Market, QueryContext

__all__ = [
    "Market",
    "QueryContext",
    "ResolutionResult",
    "TickerResolutionRunner",
    "build_ticker_resolution_runner",
]
