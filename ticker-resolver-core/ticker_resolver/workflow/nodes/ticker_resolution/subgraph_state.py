from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import TypedDict

from ...state import append_logs, last_value, merge_dict


class TickerResolutionInput(BaseModel):
    """
    Input schema for the ticker resolution subgraph.
    Boundary validation remains Pydantic.
    """

    model_config = ConfigDict(extra="ignore")

    query: str
    market: str
    language: str
    cycle: int = 0


class TickerResolutionOutput(BaseModel):
    """
    Output schema for the ticker resolution subgraph.
    """

    query: str
    market: str
    language: str
    extracted: list[dict] = Field(default_factory=list)
    answer: list[dict] = Field(default_factory=list)
    score: str | None = None
    cycle: int = 0
    status: str | None = None
    low_confidence: bool = False
    error: dict | None = None
    current_node: str | None = None
    node_statuses: dict[str, str] = Field(default_factory=dict)
    error_logs: list[dict] = Field(default_factory=list)


class TickerResolutionState(TypedDict):
    """
    Internal state for the ticker resolution subgraph.
    Uses TypedDict for performance and native LangGraph state reducers.
    """

    # --- Query context (query is replaced on rewrite) ---
    query: Annotated[str, last_value]
    market: str
    language: str

    # --- Cycle results ---
    extracted: Annotated[list[dict], last_value]
    answer: Annotated[list[dict], last_value]
    score: Annotated[str | None, last_value]
    cycle: Annotated[int, last_value]
    status: Annotated[str | None, last_value]
    low_confidence: Annotated[bool, last_value]
    error: Annotated[dict | None, last_value]

    # --- Private State ---
    internal_progress: Annotated[dict[str, str], merge_dict]
    current_node: Annotated[str, last_value]
    node_statuses: Annotated[dict[str, str], merge_dict]
    error_logs: Annotated[list[dict], append_logs]
