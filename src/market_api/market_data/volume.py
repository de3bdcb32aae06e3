"""Trailing 24h trading volume from the stats subgraph.

A token can sit on either side of a pair, so hourly records are fetched
with the token as tokenA and as tokenB in one GraphQL document, and the
five volume categories are summed across both result lists.

Core formula:
  volume = sum(margin + swap + liquidation + mint + burn) / 10**30
           over (asTokenA + asTokenB) records with timestamp >= now - 24h
"""

import time
from decimal import Decimal

from market_api.logging import get_logger
from market_api.subgraph.client import SubgraphClient
from market_api.subgraph.queries import VOLUME_BY_TOKEN_QUERY
from market_api.units import from_fixed, round_usd

logger = get_logger(__name__)

VOLUME_CATEGORIES = ("margin", "swap", "liquidation", "mint", "burn")
WINDOW_SECONDS = 24 * 60 * 60
PAGE_SIZE = 1000  # records per pair leg


def sum_volume_records(records: list[dict] | None) -> Decimal:
    """Sum the normalized category fields of hourly volume records."""
    total = Decimal("0")
    for record in records or []:
        for category in VOLUME_CATEGORIES:
            total += from_fixed(record.get(category))
    return total


class VolumeAggregator:
    """Computes 24h USD volume for a token.

    Args:
        subgraph: Shared GraphQL client.
        url: Stats subgraph endpoint.
    """

    def __init__(self, subgraph: SubgraphClient, url: str) -> None:
        self._subgraph = subgraph
        self._url = url

    async def volume_24h(self, token: str) -> Decimal:
        """Return 24h volume in USD rounded to cents. Upstream errors propagate."""
        since = int(time.time()) - WINDOW_SECONDS
        data = await self._subgraph.query(
            self._url,
            VOLUME_BY_TOKEN_QUERY,
            {"token": token.lower(), "from": since, "first": PAGE_SIZE},
        )

        as_a = data.get("asTokenA")
        as_b = data.get("asTokenB")
        for leg, records in (("asTokenA", as_a), ("asTokenB", as_b)):
            if len(records or []) >= PAGE_SIZE:
                logger.warning(
                    "volume_page_full", token=token, leg=leg, page_size=PAGE_SIZE
                )
        total = sum_volume_records(as_a) + sum_volume_records(as_b)

        logger.debug(
            "volume_aggregated",
            token=token,
            records=len(as_a or []) + len(as_b or []),
            total=str(total),
        )
        return round_usd(total)
