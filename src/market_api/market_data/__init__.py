"""Market data layer -- price, open interest, volume, high/low, funding and ticker assembly."""

from market_api.market_data.funding import FundingRateResolver
from market_api.market_data.high_low import HighLowAggregator
from market_api.market_data.markets import find_market, load_markets
from market_api.market_data.open_interest import OpenInterestAggregator
from market_api.market_data.orderbook import synthesize_book
from market_api.market_data.price_resolver import PriceAttempt, PriceResolver
from market_api.market_data.supply import SupplyReader
from market_api.market_data.ticker_assembler import TickerAssembler
from market_api.market_data.volume import VolumeAggregator

__all__ = [
    "FundingRateResolver",
    "HighLowAggregator",
    "OpenInterestAggregator",
    "PriceAttempt",
    "PriceResolver",
    "SupplyReader",
    "TickerAssembler",
    "VolumeAggregator",
    "find_market",
    "load_markets",
    "synthesize_book",
]
