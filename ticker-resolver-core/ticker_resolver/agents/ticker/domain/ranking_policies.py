from __future__ import annotations

from ticker_resolver.agents.ticker.domain.models import CatalogRecord, Market


def merge_lookup_results(
    fuzzy_hits: list[CatalogRecord], full_text_hits: list[CatalogRecord]
) -> list[CatalogRecord]:
    """
    Concatenate fuzzy-symbol hits then full-text hits, keeping one entry per record id.
    A record found by both lookups keeps its full-text position.
    """
    full_text_ids = {record.id for record in full_text_hits}
    merged: list[CatalogRecord] = []
    seen: set[int | str] = set()

    for record in fuzzy_hits:
        if record.id in full_text_ids or record.id in seen:
            continue
        seen.add(record.id)
        merged.append(record)

    for record in full_text_hits:
        if record.id in seen:
            continue
        seen.add(record.id)
        merged.append(record)

    return merged


def _price_rank(record: CatalogRecord) -> tuple[bool, float]:
    # null prices sort below every real price
    return (record.price is not None, record.price or 0.0)


def select_best_match(
    records: list[CatalogRecord], market: Market
) -> CatalogRecord | None:
    """
    Pick one record for a candidate.

    Records listed in the preferred market win, highest price first; equal prices keep
    the earliest record. Without a market match the first record in lookup order wins.
    """
    if not records:
        return None

    best: CatalogRecord | None = None
    for record in records:
        if record.country != market:
            continue
        if best is None or _price_rank(record) > _price_rank(best):
            best = record

    return best if best is not None else records[0]
