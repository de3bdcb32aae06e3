"""Fixed-point normalization shared by every market-data component.

The protocol stores USD amounts and prices as integers scaled by 10**30.
The subgraphs expose the same integers as decimal strings. Every conversion
goes through from_fixed() so rounding stays consistent across components.
"""

from decimal import Decimal

PRICE_DECIMALS = 30
USD_QUANT = Decimal("0.01")


def from_fixed(raw: int | str | None, decimals: int = PRICE_DECIMALS) -> Decimal:
    """Convert a scaled integer (or its string form) to a Decimal.

    Args:
        raw: On-chain integer, subgraph BigInt string, or None.
        decimals: Number of implied decimal places (default 30).

    Returns:
        The unscaled value. None and empty strings normalize to zero.
    """
    if raw is None or raw == "":
        return Decimal("0")
    return Decimal(int(raw)).scaleb(-decimals)


def round_usd(value: Decimal) -> Decimal:
    """Round a USD amount to cents for display."""
    return value.quantize(USD_QUANT)
