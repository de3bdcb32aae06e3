"""Custom exceptions for the market-data listing API.

Upstream, configuration and request errors live here so the chain,
subgraph and HTTP layers can share them without circular imports.
"""


class MarketApiError(Exception):
    """Base exception for all listing API errors."""


class UpstreamUnavailable(MarketApiError):
    """Raised when a single chain or subgraph read fails (network, timeout, revert, bad payload)."""


class UnknownMarketError(MarketApiError):
    """Raised when a ticker_id does not name a configured market."""


class MarketConfigError(MarketApiError):
    """Raised when the market definitions cannot be turned into Market records."""
