"""Ticker assembly -- fans out to every resolver and degrades per field.

Each market's five reads run concurrently and join before the record is
built; all markets run concurrently and the output keeps market order.
A failed or timed-out read is replaced by its default for that field only:

  price      -> 0 (PriceResolver already never raises)
  open int.  -> zeroed snapshot
  volume     -> 0
  high/low   -> price * (1 +/- high_low_band)
  funding    -> 0

Anything raised outside those boundaries (e.g. a malformed Market while
building the record) propagates out of assemble_all().
"""

import asyncio
import time
from collections.abc import Awaitable, Iterable
from decimal import Decimal
from typing import TypeVar

import structlog

from market_api.config import MarketSettings
from market_api.logging import get_logger
from market_api.market_data.funding import FundingRateResolver
from market_api.market_data.high_low import HighLowAggregator
from market_api.market_data.open_interest import OpenInterestAggregator
from market_api.market_data.orderbook import synthesize_book
from market_api.market_data.price_resolver import PriceResolver
from market_api.market_data.volume import VolumeAggregator
from market_api.models import (
    HighLow,
    Market,
    OpenInterestSnapshot,
    OrderBook,
    SpacingPolicy,
    TickerRecord,
)

logger = get_logger(__name__)

T = TypeVar("T")

_FUNDING_INTERVAL_SECONDS = 3600
_ZERO = Decimal("0")


def next_funding_timestamp(now: float, interval: int = _FUNDING_INTERVAL_SECONDS) -> int:
    """Return the next funding boundary (Unix seconds) strictly after ``now``."""
    return (int(now) // interval + 1) * interval


def build_ticker(
    market: Market,
    price: Decimal,
    open_interest: OpenInterestSnapshot,
    volume_usd: Decimal,
    high_low: HighLow,
    funding_rate: Decimal,
    settings: MarketSettings,
    now: float,
) -> TickerRecord:
    """Combine resolved fields into a TickerRecord, applying derived defaults."""
    high = high_low.high if high_low.high is not None else price * (1 + settings.high_low_band)
    low = high_low.low if high_low.low is not None else price * (1 - settings.high_low_band)

    oi_total = open_interest.total
    # Base-unit conversions are undefined for an unresolved price
    base_volume = volume_usd / price if price > 0 else _ZERO
    oi_base = oi_total / price if price > 0 else _ZERO

    return TickerRecord(
        ticker_id=market.id,
        base_currency=market.base_symbol,
        last_price=price,
        base_volume=base_volume,
        target_volume=volume_usd,
        bid=price * (1 - settings.spread_pct),
        ask=price * (1 + settings.spread_pct),
        high=high,
        low=low,
        open_interest=oi_base,
        open_interest_usd=oi_total,
        index_price=price,
        index_name=f"{market.base_symbol}-USD Price Feed",
        funding_rate=funding_rate,
        next_funding_rate=funding_rate,
        next_funding_rate_timestamp=next_funding_timestamp(now),
        contract_price=price,
    )


class TickerAssembler:
    """Builds listing tickers and order books from the market-data resolvers.

    Args:
        price_resolver: Oracle fallback chain.
        open_interest: Vault long/short reader.
        volume: 24h volume aggregator.
        high_low: 24h candle aggregator.
        funding: Latest funding rate resolver.
        settings: Spread, band and order book policy.
        timeout: Upper bound in seconds for each non-price field.
    """

    def __init__(
        self,
        price_resolver: PriceResolver,
        open_interest: OpenInterestAggregator,
        volume: VolumeAggregator,
        high_low: HighLowAggregator,
        funding: FundingRateResolver,
        settings: MarketSettings,
        timeout: float = 5.0,
    ) -> None:
        self._price = price_resolver
        self._open_interest = open_interest
        self._volume = volume
        self._high_low = high_low
        self._funding = funding
        self._settings = settings
        self._timeout = timeout

    async def _guard(
        self,
        field: str,
        call: Awaitable[T],
        default: T,
        timeout: float | None,
    ) -> T:
        """Await one field read, substituting ``default`` on any failure."""
        try:
            return await asyncio.wait_for(call, timeout)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning(
                "ticker_field_failed",
                field=field,
                error=str(exc) or type(exc).__name__,
            )
            return default

    async def assemble_ticker(self, market: Market) -> TickerRecord:
        """Resolve all fields of one market concurrently and build its ticker."""
        token = market.token_address
        with structlog.contextvars.bound_contextvars(market=market.id):
            price, oi, volume, high_low, funding = await asyncio.gather(
                # Each price attempt carries its own timeout
                self._guard("price", self._price.resolve_price(token), _ZERO, None),
                self._guard(
                    "open_interest",
                    self._open_interest.open_interest(token),
                    OpenInterestSnapshot(),
                    self._timeout,
                ),
                self._guard("volume", self._volume.volume_24h(token), _ZERO, self._timeout),
                self._guard("high_low", self._high_low.high_low_24h(token), HighLow(), self._timeout),
                self._guard("funding_rate", self._funding.funding_rate(token), _ZERO, self._timeout),
            )

        return build_ticker(
            market, price, oi, volume, high_low, funding, self._settings, time.time()
        )

    async def assemble_all(self, markets: Iterable[Market]) -> list[TickerRecord]:
        """Assemble every market concurrently; output order matches ``markets``."""
        start = time.monotonic()
        tickers = await asyncio.gather(*(self.assemble_ticker(m) for m in markets))
        logger.info(
            "tickers_assembled",
            count=len(tickers),
            duration_ms=round((time.monotonic() - start) * 1000),
        )
        return list(tickers)

    async def orderbook(self, market: Market) -> tuple[Decimal, OrderBook]:
        """Resolve the market price and synthesize a ladder around it."""
        price = await self._price.resolve_price(market.token_address)
        book = synthesize_book(
            price,
            levels=self._settings.orderbook_levels,
            policy=SpacingPolicy(self._settings.orderbook_policy),
        )
        return price, book
