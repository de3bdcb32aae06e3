"""Entry point for the perpetual market-data listing API.

Wires all components together and serves them with uvicorn. Upstream
connections are opened and the market registry is resolved inside the
FastAPI lifespan, so everything shares the server's event loop.

Component wiring order (in _build_components):
1. AppSettings (configuration)
2. Logging setup
3. Web3ChainReader (oracle, vault, governance token)
4. SubgraphClient (shared aiohttp session)
5. PriceResolver (oracle fallback chain)
6. OpenInterestAggregator, VolumeAggregator, HighLowAggregator, FundingRateResolver
7. TickerAssembler (per-field fan-out with defaults)
8. SupplyReader
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from market_api.api.app import create_app
from market_api.chain.web3_reader import Web3ChainReader
from market_api.config import AppSettings
from market_api.logging import get_logger, setup_logging
from market_api.market_data.funding import FundingRateResolver
from market_api.market_data.high_low import HighLowAggregator
from market_api.market_data.markets import load_markets
from market_api.market_data.open_interest import OpenInterestAggregator
from market_api.market_data.price_resolver import PriceResolver
from market_api.market_data.supply import SupplyReader
from market_api.market_data.ticker_assembler import TickerAssembler
from market_api.market_data.volume import VolumeAggregator
from market_api.subgraph.client import SubgraphClient


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all components from settings.

    Note: Does NOT open connections or load markets -- that happens in the
    lifespan, once the event loop is running.

    Args:
        settings: Application-wide settings.

    Returns:
        Dict mapping component names to instances.
    """
    timeout = settings.upstream.timeout_seconds

    # 3. Chain reader
    chain_reader = Web3ChainReader(settings.chain, timeout=timeout)

    # 4. Subgraph client
    subgraph = SubgraphClient(timeout=timeout)

    # 5-7. Market data resolvers and assembler
    price_resolver = PriceResolver.from_reader(chain_reader, timeout=timeout)
    assembler = TickerAssembler(
        price_resolver=price_resolver,
        open_interest=OpenInterestAggregator(chain_reader),
        volume=VolumeAggregator(subgraph, settings.subgraph.stats_url),
        high_low=HighLowAggregator(
            subgraph,
            settings.subgraph.prices_url,
            period=settings.subgraph.candle_period,
            page_size=settings.subgraph.candle_page_size,
        ),
        funding=FundingRateResolver(subgraph, settings.subgraph.stats_url),
        settings=settings.markets,
        timeout=timeout,
    )

    # 8. Supply reader
    supply_reader = SupplyReader(chain_reader)

    return {
        "chain_reader": chain_reader,
        "subgraph": subgraph,
        "price_resolver": price_resolver,
        "assembler": assembler,
        "supply_reader": supply_reader,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage upstream connections within the FastAPI application.

    On startup: opens the chain and subgraph connections, resolves the
    market registry once, and stores components on app.state.

    On shutdown: closes the subgraph session and the chain provider.
    """
    logger = get_logger("market_api.main")
    settings: AppSettings = app.state.settings
    components = app.state.components

    await components["chain_reader"].connect()
    await components["subgraph"].connect()

    try:
        # MarketConfigError here is fatal: the server must not start with a bad list
        app.state.markets = await load_markets(
            components["chain_reader"], settings.markets.definitions
        )
        app.state.assembler = components["assembler"]
        app.state.supply_reader = components["supply_reader"]

        logger.info("lifespan_started", markets=len(app.state.markets))

        yield
    finally:
        await components["subgraph"].close()
        await components["chain_reader"].close()

        logger.info("market_api_stopped")


async def run() -> None:
    """Run the listing API server."""
    # 1. Load settings
    settings = AppSettings()

    # 2. Setup logging
    setup_logging(settings.log_level)
    logger = get_logger("market_api.main")

    # 3-8. Build all components
    components = _build_components(settings)

    app = create_app(lifespan=lifespan)
    app.state.settings = settings
    app.state.components = components

    logger.info("starting_api", host=settings.api.host, port=settings.api.port)

    config = uvicorn.Config(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_level="warning",
        log_config=None,  # keep the structlog handler from setup_logging
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
