"""Governance token supply for the /supply endpoint."""

import asyncio

from market_api.chain.client import ChainReader
from market_api.models import TokenSupply


class SupplyReader:
    """Reads totalSupply() and decimals() from the governance token.

    Circulating supply equals total supply: the token has no lock-up or
    vesting contracts to subtract.
    """

    def __init__(self, reader: ChainReader) -> None:
        self._reader = reader

    async def read_supply(self) -> TokenSupply:
        total, decimals = await asyncio.gather(
            self._reader.get_total_supply(),
            self._reader.get_token_decimals(),
        )
        return TokenSupply(total_supply=total, decimals=decimals)
