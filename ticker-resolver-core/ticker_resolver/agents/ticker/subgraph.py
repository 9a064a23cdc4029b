"""
Ticker resolution subgraph entrypoint owned by the ticker agent package.
"""

from langchain_core.runnables import RunnableLambda
from langgraph.graph import START, StateGraph

from ticker_resolver.agents.ticker.application.orchestrator import (
    TickerResolutionOrchestrator,
)
from ticker_resolver.workflow.nodes.ticker_resolution.nodes import (
    build_ticker_resolution_nodes,
)
from ticker_resolver.workflow.nodes.ticker_resolution.subgraph_state import (
    TickerResolutionInput,
    TickerResolutionOutput,
    TickerResolutionState,
)


def build_ticker_resolution_subgraph(orchestrator: TickerResolutionOrchestrator):
    """Build and return the compiled extract -> resolve -> grade -> rewrite loop."""
    builder = StateGraph(
        TickerResolutionState,
        input_schema=TickerResolutionInput,
        output_schema=TickerResolutionOutput,
    )
    for name, node in build_ticker_resolution_nodes(orchestrator).items():
        builder.add_node(
            name,
            RunnableLambda(node).with_config(tags=["hide_stream"]),
            metadata={"agent_id": "ticker_resolution"},
        )
    builder.add_edge(START, "extraction")
    return builder.compile()
