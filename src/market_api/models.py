"""Shared data models for the market-data listing API.

All monetary values use Decimal. Floats only appear at the JSON boundary.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class SpacingPolicy(str, Enum):
    """Level spacing for the synthetic order book."""

    PROPORTIONAL = "proportional"
    FIXED = "fixed"


@dataclass(frozen=True)
class Market:
    """A tracked perpetual market. Immutable once the registry is loaded."""

    id: str  # e.g. "BTC-PERP"
    token_address: str
    base_symbol: str


@dataclass
class OpenInterestSnapshot:
    """Aggregate long/short position size in USD."""

    long: Decimal = Decimal("0")
    short: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.long + self.short


@dataclass
class HighLow:
    """Trailing 24h extremes. None means no candle existed in the window."""

    high: Decimal | None = None
    low: Decimal | None = None


@dataclass
class OrderbookLevel:
    """One synthetic depth level."""

    price: Decimal
    size: Decimal


@dataclass
class OrderBook:
    """Two-sided synthetic ladder. Bids descend and asks ascend from the reference price."""

    bids: list[OrderbookLevel] = field(default_factory=list)
    asks: list[OrderbookLevel] = field(default_factory=list)


@dataclass
class TokenSupply:
    """Raw ERC-20 supply. total_supply is in base units (not divided by decimals)."""

    total_supply: int
    decimals: int


@dataclass
class TickerRecord:
    """Listing-API ticker for one market. Field names match the wire format."""

    ticker_id: str
    base_currency: str
    last_price: Decimal
    base_volume: Decimal
    target_volume: Decimal
    bid: Decimal
    ask: Decimal
    high: Decimal
    low: Decimal
    open_interest: Decimal
    open_interest_usd: Decimal
    index_price: Decimal
    index_name: str
    funding_rate: Decimal
    next_funding_rate: Decimal
    next_funding_rate_timestamp: int  # Unix seconds
    contract_price: Decimal
    target_currency: str = "USD"
    product_type: str = "perpetual"
    index_currency: str = "USD"
    start_timestamp: int = 0
    end_timestamp: int = 0
    contract_type: str = "vanilla"
    contract_price_currency: str = "USD"
