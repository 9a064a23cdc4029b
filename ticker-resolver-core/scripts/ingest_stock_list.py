from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from ticker_resolver.config.catalog_config import (  # noqa: E402
    INGESTION_BATCH_SIZE,
    INGESTION_CACHE_DIR,
)
from ticker_resolver.ingestion.job import run_ingestion  # noqa: E402
from ticker_resolver.ingestion.market_data_client import (  # noqa: E402
    FmpMarketDataClient,
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build the stock catalog from the market data provider."
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        default=Path(INGESTION_CACHE_DIR),
        help="Directory for cached provider responses.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Classify and count instruments without writing to the catalog.",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=INGESTION_BATCH_SIZE,
        help="Rows per insert batch.",
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create the catalog table and indexes before loading.",
    )
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    if args.init_db and not args.dry_run:
        from ticker_resolver.infrastructure.database import init_db

        await init_db()

    async with FmpMarketDataClient(cache_dir=args.cache_dir) as client:
        summary = await run_ingestion(
            client, dry_run=args.dry_run, batch_size=args.batch_size
        )

    print(
        json.dumps(
            {
                "total": summary.total,
                "exchanges": summary.exchanges,
                "classified_exchanges": summary.classified_exchanges,
                "inserted": summary.inserted,
                "by_country": summary.by_country,
                "dry_run": args.dry_run,
            },
            indent=2,
        )
    )
    return 0


def main() -> int:
    return asyncio.run(_run(parse_args()))


if __name__ == "__main__":
    raise SystemExit(main())
