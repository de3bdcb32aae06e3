"""Trailing 24h high/low from the prices subgraph candles."""

import time

from market_api.models import HighLow
from market_api.subgraph.client import SubgraphClient
from market_api.subgraph.queries import PRICE_CANDLES_QUERY
from market_api.units import from_fixed

WINDOW_SECONDS = 24 * 60 * 60


class HighLowAggregator:
    """Reduces in-window price candles to a max high and min low.

    An empty window yields HighLow(None, None); the assembler applies the
    price band default, never this class.
    """

    def __init__(
        self,
        subgraph: SubgraphClient,
        url: str,
        period: str = "hourly",
        page_size: int = 100,
    ) -> None:
        self._subgraph = subgraph
        self._url = url
        self._period = period
        self._page_size = page_size

    async def high_low_24h(self, token: str) -> HighLow:
        since = int(time.time()) - WINDOW_SECONDS
        data = await self._subgraph.query(
            self._url,
            PRICE_CANDLES_QUERY,
            {
                "token": token.lower(),
                "from": since,
                "period": self._period,
                "first": self._page_size,
            },
        )

        candles = data.get("priceCandles") or []
        if not candles:
            return HighLow()

        return HighLow(
            high=max(from_fixed(c.get("high")) for c in candles),
            low=min(from_fixed(c.get("low")) for c in candles),
        )
