from __future__ import annotations

import uuid
from collections.abc import Iterable

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, ToolMessage
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

from ticker_resolver.agents.ticker.domain.extraction_examples import ExtractionExample
from ticker_resolver.agents.ticker.interface.contracts import StockExtraction

TOOL_ACKNOWLEDGEMENT = "You have correctly called this tool."


def build_extraction_chat_prompt(*, system_prompt: str) -> ChatPromptTemplate:
    return ChatPromptTemplate.from_messages(
        [
            ("system", system_prompt),
            MessagesPlaceholder("examples"),
            ("user", "{query}"),
        ]
    )


def build_grader_chat_prompt(*, grader_prompt: str) -> ChatPromptTemplate:
    return ChatPromptTemplate.from_template(grader_prompt)


def build_query_rewrite_chat_prompt(*, rewrite_prompt: str) -> ChatPromptTemplate:
    return ChatPromptTemplate.from_template(rewrite_prompt)


def example_to_messages(
    example: ExtractionExample, *, tool_name: str = StockExtraction.__name__
) -> list[BaseMessage]:
    """Render one worked example as a completed tool-call exchange."""
    tool_call_id = str(uuid.uuid4())
    return [
        HumanMessage(content=example.input),
        AIMessage(
            content="",
            tool_calls=[
                {
                    "name": tool_name,
                    "args": {"stocks": [dict(stock) for stock in example.stocks]},
                    "id": tool_call_id,
                    "type": "tool_call",
                }
            ],
        ),
        ToolMessage(content=TOOL_ACKNOWLEDGEMENT, tool_call_id=tool_call_id),
    ]


def build_example_messages(examples: Iterable[ExtractionExample]) -> list[BaseMessage]:
    messages: list[BaseMessage] = []
    for example in examples:
        messages.extend(example_to_messages(example))
    return messages
