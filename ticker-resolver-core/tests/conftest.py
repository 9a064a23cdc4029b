import pytest

from tests.fakes import make_record
from ticker_resolver.agents.ticker.domain.models import CatalogRecord, Market
from ticker_resolver.config.resolution_config import ResolutionSettings


@pytest.fixture
def catalog_records() -> list[CatalogRecord]:
    return [
        make_record(
            1,
            "TSLA",
            "Tesla, Inc.",
            country=Market.US,
            price=250.0,
            exchange_short_name="NASDAQ",
        ),
        make_record(
            2,
            "MSFT",
            "Microsoft Corporation",
            country=Market.US,
            price=410.0,
            exchange_short_name="NASDAQ",
        ),
        make_record(
            3,
            "BABA",
            "Alibaba Group Holding Limited",
            country=Market.US,
            price=80.0,
            exchange_short_name="NYSE",
        ),
        make_record(
            4,
            "9988.HK",
            "Alibaba Group Holding Limited",
            country=Market.HK,
            price=78.0,
            exchange_short_name="HKSE",
        ),
        make_record(
            5,
            "NVDA",
            "NVIDIA Corporation",
            country=Market.US,
            price=120.0,
            exchange_short_name="NASDAQ",
        ),
        make_record(
            6,
            "600519.SS",
            "Kweichow Moutai Co., Ltd.",
            country=Market.CN,
            price=1500.0,
            exchange_short_name="SHH",
        ),
        make_record(
            7,
            "MSFT.NE",
            "Microsoft Corporation CDR",
            country=Market.GLOBAL,
            price=30.0,
            exchange_short_name="NEO",
        ),
    ]


@pytest.fixture
def settings() -> ResolutionSettings:
    return ResolutionSettings(
        max_cycles=3,
        request_deadline=5.0,
        catalog_call_timeout=1.0,
        reasoning_call_timeout=1.0,
    )
