from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import TypeVar

from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel

from ...config.llm_config import LLM_TIMEOUT
from .provider import get_llm

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class StructuredOutputReasoner:
    """
    Reasoning capability backed by a chat model with structured output.
    Knows nothing about tickers: it renders a prompt, binds the target schema
    and enforces the per-call timeout.
    """

    def __init__(
        self,
        *,
        llm_factory: Callable[..., object] = get_llm,
        timeout: float = LLM_TIMEOUT,
    ) -> None:
        self._llm_factory = llm_factory
        self._timeout = timeout

    async def invoke_structured(
        self,
        prompt: ChatPromptTemplate,
        schema: type[SchemaT],
        variables: Mapping[str, object],
    ) -> object:
        llm = self._llm_factory(timeout=self._timeout)
        # few-shot examples are tool-call transcripts
        chain = prompt | llm.with_structured_output(schema, method="function_calling")
        return await asyncio.wait_for(
            chain.ainvoke(dict(variables)), timeout=self._timeout
        )
