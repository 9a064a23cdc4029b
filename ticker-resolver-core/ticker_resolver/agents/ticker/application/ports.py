from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel

from ticker_resolver.agents.ticker.domain.models import CatalogRecord


class ReasoningPort(Protocol):
    """Prompt plus target schema in, schema instance out (or an exception)."""

    async def invoke_structured(
        self,
        prompt: ChatPromptTemplate,
        schema: type[BaseModel],
        variables: Mapping[str, object],
    ) -> object: ...


class CatalogStorePort(Protocol):
    async def find_by_symbol(self, symbol: str) -> list[CatalogRecord]: ...

    async def find_by_symbol_fragment(self, fragment: str) -> list[CatalogRecord]: ...

    async def search_by_name(self, name: str) -> list[CatalogRecord]: ...
