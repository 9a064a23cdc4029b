from .factory import build_ticker_resolution_orchestrator, build_ticker_resolution_runner
from .orchestrator import TickerResolutionOrchestrator
from .resolution_service import CatalogResolver, ResolutionOutcome
from .runner import ResolutionResult, TickerResolutionRunner

__all__ = [
    "CatalogResolver",
    "ResolutionOutcome",
    "ResolutionResult",
    "TickerResolutionOrchestrator",
    "TickerResolutionRunner",
    "build_ticker_resolution_orchestrator",
    "build_ticker_resolution_runner",
]
