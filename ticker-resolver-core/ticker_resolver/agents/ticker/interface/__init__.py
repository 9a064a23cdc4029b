from .contracts import GradeScore, StockExtraction, TransformedQuery
from .parsers import parse_candidates, parse_catalog_records, parse_query_context
from .serializers import (
    serialize_answer_for_response,
    serialize_candidates,
    serialize_catalog_records,
)

__all__ = [
    "StockExtraction",
    "GradeScore",
    "TransformedQuery",
    "parse_candidates",
    "parse_catalog_records",
    "parse_query_context",
    "serialize_candidates",
    "serialize_catalog_records",
    "serialize_answer_for_response",
]
