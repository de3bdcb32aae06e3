"""Synthetic order book around a single reference price.

The venue is a pooled-liquidity perpetual exchange, so no real book exists.
Listing APIs still require depth, so a deterministic ladder is generated.

Level i (1-based, stored at index i-1):
  proportional: bid = P - P * 0.0005 * i, ask = P + P * 0.0005 * i
  fixed:        bid = P - i,              ask = P + i

The fixed policy collapses for assets priced below the ladder depth (bids
reach zero or go negative), so in that case the proportional policy is used.

An unresolved price (0) still gets a full ladder: asks at i, bids stepping
down from levels * PRICE_FLOOR to PRICE_FLOOR so every bid stays positive.
"""

from decimal import Decimal

from market_api.logging import get_logger
from market_api.models import OrderBook, OrderbookLevel, SpacingPolicy

logger = get_logger(__name__)

DEFAULT_LEVELS = 50
PROPORTIONAL_STEP = Decimal("0.0005")  # 5 bps per level
PRICE_FLOOR = Decimal("0.00000001")
FIXED_STEP = Decimal("1")
LEVEL_SIZE = Decimal("1")


def synthesize_book(
    price: Decimal,
    levels: int = DEFAULT_LEVELS,
    policy: SpacingPolicy = SpacingPolicy.PROPORTIONAL,
) -> OrderBook:
    """Build a two-sided ladder of ``levels`` levels per side around ``price``.

    Args:
        price: Reference price. Zero (unresolved) yields the floor ladder.
        levels: Levels per side.
        policy: Spacing policy; FIXED falls back to PROPORTIONAL when
            ``price <= levels * FIXED_STEP``.

    Returns:
        OrderBook with strictly decreasing bids and strictly increasing asks.
    """
    if price <= 0:
        return _floor_book(levels)

    if policy is SpacingPolicy.FIXED and price <= FIXED_STEP * levels:
        logger.warning(
            "fixed_spacing_degenerate",
            price=str(price),
            levels=levels,
            fallback=SpacingPolicy.PROPORTIONAL.value,
        )
        policy = SpacingPolicy.PROPORTIONAL

    step = FIXED_STEP if policy is SpacingPolicy.FIXED else price * PROPORTIONAL_STEP

    book = OrderBook()
    for i in range(1, levels + 1):
        offset = step * i
        book.bids.append(OrderbookLevel(price=price - offset, size=LEVEL_SIZE))
        book.asks.append(OrderbookLevel(price=price + offset, size=LEVEL_SIZE))
    return book


def _floor_book(levels: int) -> OrderBook:
    """Ladder for an unresolved price, so depth consumers still get ``levels`` rows."""
    logger.warning("orderbook_without_price", levels=levels)
    book = OrderBook()
    for i in range(1, levels + 1):
        book.bids.append(OrderbookLevel(price=PRICE_FLOOR * (levels + 1 - i), size=LEVEL_SIZE))
        book.asks.append(OrderbookLevel(price=FIXED_STEP * i, size=LEVEL_SIZE))
    return book
