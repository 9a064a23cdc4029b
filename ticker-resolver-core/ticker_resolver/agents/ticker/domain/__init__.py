from .errors import SchemaViolationError, StoreUnavailableError, TickerResolutionError
from .models import Candidate, CatalogRecord, Confidence, Market, QueryContext, Verdict
from .ranking_policies import merge_lookup_results, select_best_match

__all__ = [
    "Candidate",
    "CatalogRecord",
    "Confidence",
    "Market",
    "QueryContext",
    "Verdict",
    "TickerResolutionError",
    "SchemaViolationError",
    "StoreUnavailableError",
    "merge_lookup_results",
    "select_best_match",
]
