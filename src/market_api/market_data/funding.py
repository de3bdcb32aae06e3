"""Latest funding rate from the stats subgraph.

Funding records carry the vault's cumulative funding rate at the start and
end of each period; the period's rate is their difference. The vault keeps
funding rates at 1e6 precision, not the 1e30 price scale.

ZERO OVERLOAD: no record and a genuinely zero rate both return 0.
"""

from decimal import Decimal

from market_api.subgraph.client import SubgraphClient
from market_api.subgraph.queries import LATEST_FUNDING_RATE_QUERY
from market_api.units import from_fixed

FUNDING_RATE_DECIMALS = 6  # FUNDING_RATE_PRECISION = 1_000_000


class FundingRateResolver:
    """Returns the most recent per-period funding rate for a token."""

    def __init__(self, subgraph: SubgraphClient, url: str) -> None:
        self._subgraph = subgraph
        self._url = url

    async def funding_rate(self, token: str) -> Decimal:
        data = await self._subgraph.query(
            self._url,
            LATEST_FUNDING_RATE_QUERY,
            {"token": token.lower()},
        )
        records = data.get("fundingRates") or []
        if not records:
            return Decimal("0")

        latest = records[0]
        start = from_fixed(latest.get("startFundingRate"), FUNDING_RATE_DECIMALS)
        end = from_fixed(latest.get("endFundingRate"), FUNDING_RATE_DECIMALS)
        return end - start
