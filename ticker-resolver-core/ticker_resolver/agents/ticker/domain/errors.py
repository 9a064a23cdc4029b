from __future__ import annotations

from ticker_resolver.shared.kernel.types import JSONObject

# Non-fatal conditions recorded in the pipeline state rather than raised.
ERROR_CODE_NO_MATCH = "TICKER_NO_MATCH"
ERROR_CODE_LOOKUP_DEGRADED = "TICKER_LOOKUP_DEGRADED"
ERROR_CODE_CYCLE_BOUND_EXCEEDED = "TICKER_CYCLE_BOUND_EXCEEDED"
ERROR_CODE_REQUEST_TIMEOUT = "TICKER_REQUEST_TIMEOUT"


class TickerResolutionError(Exception):
    """Fatal pipeline failure carrying the state and candidate it happened in."""

    error_code = "TICKER_RESOLUTION_FAILED"

    def __init__(
        self,
        message: str,
        *,
        node: str | None = None,
        candidate: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.node = node
        self.candidate = candidate

    def to_payload(self) -> JSONObject:
        return {
            "error_code": self.error_code,
            "node": self.node,
            "candidate": self.candidate,
            "message": self.message,
        }


class SchemaViolationError(TickerResolutionError):
    """The reasoning capability returned output that does not fit the schema."""

    error_code = "TICKER_SCHEMA_VIOLATION"


class StoreUnavailableError(TickerResolutionError):
    """The catalog store could not serve any lookup of a resolve call."""

    error_code = "TICKER_STORE_UNAVAILABLE"
