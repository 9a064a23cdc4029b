import os
import sys
from functools import lru_cache

import uvicorn
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Add the project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ticker_resolver.agents.ticker.application.factory import (  # noqa: E402
    build_ticker_resolution_runner,
)
from ticker_resolver.agents.ticker.application.runner import (  # noqa: E402
    TickerResolutionRunner,
)
from ticker_resolver.agents.ticker.domain.models import Market, QueryContext  # noqa: E402
from ticker_resolver.shared.kernel.tools.logger import get_logger, log_event  # noqa: E402

logger = get_logger(__name__)

MISSING_FIELDS_MESSAGE = "Missing query, market, or language"

app = FastAPI(
    title="Ticker Resolver API",
    version="1.0",
    description="Resolves free-text stock queries into catalog listings for a preferred market.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_runner() -> TickerResolutionRunner:
    return build_ticker_resolution_runner()


def _present(value: str | None) -> bool:
    return value is not None and bool(value.strip())


@app.get("/")
async def health_check():
    return {"status": "ok"}


@app.get("/api/ticker")
async def resolve_ticker(
    query: str | None = None,
    market: str | None = None,
    language: str | None = None,
    runner: TickerResolutionRunner = Depends(get_runner),
):
    if not (_present(query) and _present(market) and _present(language)):
        raise HTTPException(status_code=400, detail=MISSING_FIELDS_MESSAGE)

    parsed_market = Market.parse(market)
    if parsed_market is None:
        allowed = ", ".join(member.value for member in Market)
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported market '{market}'; expected one of {allowed}",
        )

    context = QueryContext(
        query=query.strip(), market=parsed_market, language=language.strip()
    )
    result = await runner.resolve(context)
    if result.failed:
        log_event(
            logger,
            event="ticker_api_failed",
            message="Ticker resolution failed",
            error_code=(result.error or {}).get("error_code"),
            fields={"query": context.query},
        )
        return JSONResponse(status_code=502, content=result.error or {})
    return result.to_payload()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
