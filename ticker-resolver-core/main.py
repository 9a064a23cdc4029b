import argparse
import asyncio
import json
import sys

from ticker_resolver.agents.ticker.application.factory import (
    build_ticker_resolution_runner,
)
from ticker_resolver.agents.ticker.domain.models import Market, QueryContext


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Resolve a free-text stock query into catalog listings."
    )
    parser.add_argument("query", help="Free-text query, e.g. 'Tesla stock price'.")
    parser.add_argument(
        "--market",
        default=Market.US.value,
        choices=[member.value for member in Market],
        type=str.upper,
        help="Preferred market for ranking and grading.",
    )
    parser.add_argument(
        "--language", default="english", help="Language hint for extraction."
    )
    return parser.parse_args(argv)


async def _resolve(args: argparse.Namespace) -> dict:
    runner = build_ticker_resolution_runner()
    context = QueryContext(
        query=args.query, market=Market(args.market), language=args.language
    )
    result = await runner.resolve(context)
    return result.to_payload()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    payload = asyncio.run(_resolve(args))
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 1 if payload.get("status") == "failed" else 0


if __name__ == "__main__":
    sys.exit(main())
