from __future__ import annotations

import asyncio
import inspect
import re
from collections.abc import Callable, Mapping

from ticker_resolver.agents.ticker.domain.models import CatalogRecord, Market

_TOKEN = re.compile(r"\w+")


def make_record(
    record_id: int,
    symbol: str,
    name: str,
    *,
    country: Market,
    price: float | None = None,
    exchange_short_name: str | None = None,
) -> CatalogRecord:
    return CatalogRecord(
        id=record_id,
        symbol=symbol,
        name=name,
        price=price,
        exchange=exchange_short_name,
        exchange_short_name=exchange_short_name,
        type="stock",
        country=country,
    )


def _tokens(text: str) -> set[str]:
    return {token.lower() for token in _TOKEN.findall(text)}


class FakeReasoner:
    """
    Scripted reasoning capability.

    Each schema name maps to a queue of responses; a response may be a schema
    instance, an exception to raise, or a (possibly async) callable receiving the
    prompt variables.
    The last response of a queue repeats once the queue is exhausted.
    """

    def __init__(self, script: Mapping[str, list[object]] | None = None) -> None:
        self._script = {name: list(items) for name, items in (script or {}).items()}
        self.calls: list[tuple[str, dict[str, object]]] = []
        self.prompts: list[object] = []

    async def invoke_structured(self, prompt, schema, variables):
        name = schema.__name__
        self.calls.append((name, dict(variables)))
        self.prompts.append(prompt)
        queue = self._script.get(name)
        if not queue:
            raise AssertionError(f"no scripted response for {name}")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, BaseException):
            raise response
        if callable(response) and not isinstance(response, type):
            result = response(variables)
            if inspect.isawaitable(result):
                result = await result
            return result
        return response

    def calls_for(self, schema_name: str) -> list[dict[str, object]]:
        return [variables for name, variables in self.calls if name == schema_name]


class InMemoryCatalogStore:
    """Catalog store over a fixed record list with injectable per-lookup failures."""

    def __init__(
        self,
        records: list[CatalogRecord],
        *,
        failures: Mapping[str, BaseException] | None = None,
        delay: float = 0.0,
        on_call: Callable[[str, str], None] | None = None,
    ) -> None:
        self.records = list(records)
        self.failures = dict(failures or {})
        self.delay = delay
        self.calls: list[tuple[str, str]] = []
        self._on_call = on_call

    async def _enter(self, lookup: str, value: str) -> None:
        self.calls.append((lookup, value))
        if self._on_call is not None:
            self._on_call(lookup, value)
        if self.delay:
            await asyncio.sleep(self.delay)
        failure = self.failures.get(lookup)
        if failure is not None:
            raise failure

    async def find_by_symbol(self, symbol: str) -> list[CatalogRecord]:
        await self._enter("exact", symbol)
        return [record for record in self.records if record.symbol == symbol]

    async def find_by_symbol_fragment(self, fragment: str) -> list[CatalogRecord]:
        await self._enter("fuzzy", fragment)
        needle = fragment.lower()
        return [record for record in self.records if needle in record.symbol.lower()]

    async def search_by_name(self, name: str) -> list[CatalogRecord]:
        await self._enter("full_text", name)
        wanted = _tokens(name)
        if not wanted:
            return []
        return [record for record in self.records if wanted <= _tokens(record.name)]
