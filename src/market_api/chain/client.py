"""Abstract on-chain reader interface.

Market-data components depend only on this interface, keeping web3
details isolated in the concrete implementation. Every method returns the
raw integer the contract returns; scaling is the caller's job.

Implementations raise UpstreamUnavailable for any failed read.
"""

from abc import ABC, abstractmethod


class ChainReader(ABC):
    """Abstract base class for read-only protocol contract access."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the provider connection."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the provider connection."""
        ...

    @abstractmethod
    async def get_price_v2(self, token: str) -> int:
        """VaultPriceFeed.getPriceV2(token, maximise=False, includeAmmPrice=False)."""
        ...

    @abstractmethod
    async def get_price(self, token: str) -> int:
        """VaultPriceFeed.getPrice(token, False, False, False)."""
        ...

    @abstractmethod
    async def get_price_v1(self, token: str) -> int:
        """VaultPriceFeed.getPriceV1(token, maximise=False, includeAmmPrice=False)."""
        ...

    @abstractmethod
    async def get_primary_price(self, token: str) -> int:
        """VaultPriceFeed.getPrimaryPrice(token, maximise=False)."""
        ...

    @abstractmethod
    async def get_vault_min_price(self, token: str) -> int:
        """Vault.getMinPrice(token)."""
        ...

    @abstractmethod
    async def get_guaranteed_usd(self, token: str) -> int:
        """Vault.guaranteedUsd(token): aggregate long notional."""
        ...

    @abstractmethod
    async def get_global_short_size(self, token: str) -> int:
        """Vault.globalShortSizes(token): aggregate short notional."""
        ...

    @abstractmethod
    async def get_oracle_token(self, field: str) -> str:
        """Read a token address field ("btc", "eth", "bnb") from the price feed."""
        ...

    @abstractmethod
    async def get_total_supply(self) -> int:
        """Governance token totalSupply() in base units."""
        ...

    @abstractmethod
    async def get_token_decimals(self) -> int:
        """Governance token decimals()."""
        ...
