"""
Ticker Resolution Nodes.
Extraction, resolution, grading and query rewriting, bound to one orchestrator.
"""

from collections.abc import Awaitable, Callable

from langgraph.graph import END
from langgraph.types import Command

from ticker_resolver.agents.ticker.application.orchestrator import (
    TickerResolutionOrchestrator,
)
from ticker_resolver.shared.kernel.workflow_contracts import WorkflowNodeResult
from ticker_resolver.shared.kernel.workflow_routing import resolve_end_goto

from .subgraph_state import TickerResolutionState

TickerNode = Callable[[TickerResolutionState], Awaitable[Command]]


def _to_command(result: WorkflowNodeResult) -> Command:
    return Command(
        update=result.update,
        goto=resolve_end_goto(result.goto, end_node=END),
    )


def build_ticker_resolution_nodes(
    orchestrator: TickerResolutionOrchestrator,
) -> dict[str, TickerNode]:
    async def extraction_node(state: TickerResolutionState) -> Command:
        """Extract candidate tickers and company names from the current query."""
        return _to_command(await orchestrator.run_extraction(state))

    async def resolution_node(state: TickerResolutionState) -> Command:
        """Look candidates up in the stock catalog and rank the hits."""
        return _to_command(await orchestrator.run_resolution(state))

    async def grading_node(state: TickerResolutionState) -> Command:
        """Grade the resolved answer; pass ends the run."""
        return _to_command(await orchestrator.run_grading(state))

    async def rewriting_node(state: TickerResolutionState) -> Command:
        """Rewrite the query with explicit market emphasis and loop back."""
        return _to_command(await orchestrator.run_rewriting(state))

    return {
        "extraction": extraction_node,
        "resolution": resolution_node,
        "grading": grading_node,
        "rewriting": rewriting_node,
    }
