"""Price resolution across oracle interface generations.

The price feed has been upgraded several times and not every token is
wired into every getter. Rather than configuring which interface applies
per market, resolve_price() walks an ordered strategy list (newest first)
and keeps the first positive answer.

ZERO SENTINEL: a return of Decimal("0") means "unresolved". The protocol
never prices a listed token at exactly zero, so callers treat 0 as missing
data rather than a real price.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from decimal import Decimal

from market_api.chain.client import ChainReader
from market_api.logging import get_logger
from market_api.units import from_fixed

logger = get_logger(__name__)


@dataclass(frozen=True)
class PriceAttempt:
    """One oracle read in the fallback chain."""

    name: str
    read: Callable[[str], Awaitable[int]]


def default_attempts(reader: ChainReader) -> list[PriceAttempt]:
    """Return the oracle reads in priority order, newest interface first."""
    return [
        PriceAttempt("getPriceV2", reader.get_price_v2),
        PriceAttempt("getPrice", reader.get_price),
        PriceAttempt("getPriceV1", reader.get_price_v1),
        PriceAttempt("getPrimaryPrice", reader.get_primary_price),
        PriceAttempt("vaultMinPrice", reader.get_vault_min_price),
    ]


class PriceResolver:
    """Resolves a USD price for a token through an ordered fallback chain.

    Args:
        attempts: Oracle reads in priority order.
        timeout: Upper bound in seconds for each individual attempt.
    """

    def __init__(self, attempts: list[PriceAttempt], timeout: float = 5.0) -> None:
        self._attempts = attempts
        self._timeout = timeout

    @classmethod
    def from_reader(cls, reader: ChainReader, timeout: float = 5.0) -> "PriceResolver":
        return cls(default_attempts(reader), timeout=timeout)

    async def resolve_price(self, token: str) -> Decimal:
        """Return the first positive price, or Decimal("0") if every attempt fails.

        Never raises (except CancelledError). Each attempt is isolated: a
        revert, timeout or malformed answer just moves on to the next one.
        """
        for attempt in self._attempts:
            try:
                raw = await asyncio.wait_for(attempt.read(token), self._timeout)
                price = from_fixed(raw)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.debug(
                    "price_attempt_failed",
                    token=token,
                    attempt=attempt.name,
                    error=str(exc),
                )
                continue

            if price > 0:
                return price
            logger.debug("price_attempt_non_positive", token=token, attempt=attempt.name)

        logger.warning("price_unresolved", token=token, attempts=len(self._attempts))
        return Decimal("0")
