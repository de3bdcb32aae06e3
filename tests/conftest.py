"""Shared test fixtures for the market-data listing API."""

from unittest.mock import AsyncMock

import pytest

from market_api.chain.client import ChainReader
from market_api.config import AppSettings, MarketSettings, UpstreamSettings
from market_api.models import Market
from market_api.subgraph.client import SubgraphClient

BTC = Market(id="BTC-PERP", token_address="0x7130d2A12B9BCbFAe4f2634d864A1Ee1Ce3Ead9c", base_symbol="BTC")
ETH = Market(id="ETH-PERP", token_address="0x2170Ed0880ac9A755fd29B2688956BD959F933F8", base_symbol="ETH")
DOGE = Market(id="DOGE-PERP", token_address="0xbA2aE424d960c26247Dd6c32edC70B295c744C43", base_symbol="DOGE")


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (short upstream timeout)."""
    return AppSettings(
        log_level="DEBUG",
        upstream=UpstreamSettings(timeout_seconds=0.2),
        markets=MarketSettings(),
    )


@pytest.fixture
def markets() -> tuple[Market, ...]:
    return (BTC, ETH, DOGE)


@pytest.fixture
def mock_reader() -> AsyncMock:
    """ChainReader mock; every read returns 0 unless a test overrides it."""
    reader = AsyncMock(spec=ChainReader)
    for name in (
        "get_price_v2",
        "get_price",
        "get_price_v1",
        "get_primary_price",
        "get_vault_min_price",
        "get_guaranteed_usd",
        "get_global_short_size",
        "get_total_supply",
        "get_token_decimals",
    ):
        setattr(reader, name, AsyncMock(return_value=0))
    return reader


@pytest.fixture
def mock_subgraph() -> AsyncMock:
    """SubgraphClient mock returning an empty data object."""
    subgraph = AsyncMock(spec=SubgraphClient)
    subgraph.query = AsyncMock(return_value={})
    return subgraph
