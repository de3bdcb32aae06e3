"""Static market registry, resolved once at boot.

Some token addresses are published as fields on the price feed contract
(btc(), eth(), bnb()). Those are read once at startup; when a read fails or
returns the zero address the static address is kept. The resulting tuple is
never mutated afterwards.
"""

import asyncio
from collections.abc import Iterable, Mapping

from market_api.chain.abi import ORACLE_TOKEN_FIELDS
from market_api.chain.client import ChainReader
from market_api.exceptions import MarketConfigError
from market_api.logging import get_logger
from market_api.models import Market

logger = get_logger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

DEFAULT_MARKET_DEFINITIONS: tuple[dict[str, str], ...] = (
    {
        "id": "BTC-PERP",
        "token": "0x7130d2A12B9BCbFAe4f2634d864A1Ee1Ce3Ead9c",
        "base": "BTC",
        "oracle_field": "btc",
    },
    {
        "id": "ETH-PERP",
        "token": "0x2170Ed0880ac9A755fd29B2688956BD959F933F8",
        "base": "ETH",
        "oracle_field": "eth",
    },
    {
        "id": "BNB-PERP",
        "token": "0xB8c77482e45F1F44De1745F52C74426C631bDD52",
        "base": "BNB",
        "oracle_field": "bnb",
    },
    {"id": "SOL-PERP", "token": "0x570A5d02638F9E7b20dfE31aA15d1d0505AFcD6f", "base": "SOL"},
    {"id": "DOGE-PERP", "token": "0xbA2aE424d960c26247Dd6c32edC70B295c744C43", "base": "DOGE"},
    {"id": "XRP-PERP", "token": "0x1D2F0da169ceB9fC7B3144628dB156f3F6c60dBE", "base": "XRP"},
)


def _validate(definition: Mapping[str, str], seen: set[str]) -> None:
    missing = [key for key in ("id", "token", "base") if not definition.get(key)]
    if missing:
        raise MarketConfigError(f"market definition {dict(definition)} missing {missing}")
    if definition["id"] in seen:
        raise MarketConfigError(f"duplicate market id {definition['id']}")
    field = definition.get("oracle_field")
    if field and field not in ORACLE_TOKEN_FIELDS:
        raise MarketConfigError(f"unknown oracle_field {field!r} for {definition['id']}")


async def _resolve_address(reader: ChainReader, definition: Mapping[str, str]) -> str:
    field = definition.get("oracle_field")
    static = definition["token"]
    if not field:
        return static
    try:
        resolved = await reader.get_oracle_token(field)
    except Exception:
        logger.warning("oracle_token_unresolved", market=definition["id"], field=field, exc_info=True)
        return static
    if not resolved or resolved.lower() == ZERO_ADDRESS:
        return static
    if resolved.lower() != static.lower():
        logger.info("oracle_token_resolved", market=definition["id"], field=field, address=resolved)
    return resolved


async def load_markets(
    reader: ChainReader,
    definitions: Iterable[Mapping[str, str]] | None = None,
) -> tuple[Market, ...]:
    """Build the immutable market tuple, resolving oracle-published addresses.

    Raises:
        MarketConfigError: If a definition is missing fields, repeats an id,
            or names an unknown oracle field.
    """
    defs = list(definitions if definitions is not None else DEFAULT_MARKET_DEFINITIONS)
    if not defs:
        raise MarketConfigError("no markets configured")

    seen: set[str] = set()
    for definition in defs:
        _validate(definition, seen)
        seen.add(definition["id"])

    addresses = await asyncio.gather(*(_resolve_address(reader, d) for d in defs))
    markets = tuple(
        Market(id=d["id"], token_address=address, base_symbol=d["base"])
        for d, address in zip(defs, addresses)
    )
    logger.info("markets_loaded", count=len(markets), ids=[m.id for m in markets])
    return markets


def find_market(markets: Iterable[Market], ticker_id: str | None) -> Market | None:
    """Return the market with the given id, or None."""
    for market in markets:
        if market.id == ticker_id:
            return market
    return None
