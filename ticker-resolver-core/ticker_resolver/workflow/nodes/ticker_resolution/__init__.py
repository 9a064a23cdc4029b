from .nodes import build_ticker_resolution_nodes
from .subgraph_state import (
    TickerResolutionInput,
    TickerResolutionOutput,
    TickerResolutionState,
)

__all__ = [
    "build_ticker_resolution_nodes",
    "TickerResolutionInput",
    "TickerResolutionOutput",
    "TickerResolutionState",
]
