"""Open interest from the vault's position-size accounting."""

import asyncio

from market_api.chain.client import ChainReader
from market_api.models import OpenInterestSnapshot
from market_api.units import from_fixed


class OpenInterestAggregator:
    """Sums the vault's aggregate long and short notional for a token.

    No fallback: a failed read propagates so the assembler can substitute
    a zeroed snapshot for this market only.
    """

    def __init__(self, reader: ChainReader) -> None:
        self._reader = reader

    async def open_interest(self, token: str) -> OpenInterestSnapshot:
        long_raw, short_raw = await asyncio.gather(
            self._reader.get_guaranteed_usd(token),
            self._reader.get_global_short_size(token),
        )
        return OpenInterestSnapshot(long=from_fixed(long_raw), short=from_fixed(short_raw))
