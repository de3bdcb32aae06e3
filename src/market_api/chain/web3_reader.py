"""On-chain reader implementation via web3.py's async provider.

Wraps AsyncWeb3 with contract handles for the price feed, vault and
governance token. Each call is bounded by the configured upstream timeout
and every failure surfaces as UpstreamUnavailable.
"""

import asyncio

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.contract.async_contract import AsyncContractFunction
from web3.exceptions import Web3Exception

from market_api.chain.abi import ERC20_ABI, PRICE_FEED_ABI, VAULT_ABI
from market_api.chain.client import ChainReader
from market_api.config import ChainSettings
from market_api.exceptions import UpstreamUnavailable
from market_api.logging import get_logger

logger = get_logger(__name__)


class Web3ChainReader(ChainReader):
    """Concrete ChainReader backed by a JSON-RPC endpoint."""

    def __init__(self, settings: ChainSettings, timeout: float = 5.0) -> None:
        self._settings = settings
        self._timeout = timeout
        self._w3 = AsyncWeb3(
            AsyncHTTPProvider(settings.rpc_url, request_kwargs={"timeout": timeout})
        )
        self._price_feed = self._w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(settings.price_feed_address),
            abi=PRICE_FEED_ABI,
        )
        self._vault = self._w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(settings.vault_address),
            abi=VAULT_ABI,
        )
        self._money = self._w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(settings.money_address),
            abi=ERC20_ABI,
        )

    @property
    def w3(self) -> AsyncWeb3:
        """Access the underlying AsyncWeb3 instance."""
        return self._w3

    async def connect(self) -> None:
        """Check the endpoint answers; a failure is logged, not fatal."""
        logger.info("connecting_to_chain", rpc_url=self._settings.rpc_url)
        try:
            chain_id = await asyncio.wait_for(self._w3.eth.chain_id, self._timeout)
        except Exception:
            logger.warning("chain_unreachable_at_startup", exc_info=True)
            return
        logger.info("chain_connected", chain_id=chain_id)

    async def close(self) -> None:
        logger.info("closing_chain_connection")
        await self._w3.provider.disconnect()

    async def _call(self, label: str, fn: AsyncContractFunction) -> int | str:
        """Execute a contract view call with a timeout, normalizing failures."""
        try:
            return await asyncio.wait_for(fn.call(), self._timeout)
        except asyncio.TimeoutError as exc:
            raise UpstreamUnavailable(f"{label} timed out after {self._timeout}s") from exc
        except (Web3Exception, aiohttp.ClientError, OSError, ValueError) as exc:
            raise UpstreamUnavailable(f"{label} failed: {exc}") from exc

    @staticmethod
    def _token(token: str) -> str:
        return AsyncWeb3.to_checksum_address(token)

    async def get_price_v2(self, token: str) -> int:
        fn = self._price_feed.functions.getPriceV2(self._token(token), False, False)
        return int(await self._call("getPriceV2", fn))

    async def get_price(self, token: str) -> int:
        fn = self._price_feed.functions.getPrice(self._token(token), False, False, False)
        return int(await self._call("getPrice", fn))

    async def get_price_v1(self, token: str) -> int:
        fn = self._price_feed.functions.getPriceV1(self._token(token), False, False)
        return int(await self._call("getPriceV1", fn))

    async def get_primary_price(self, token: str) -> int:
        fn = self._price_feed.functions.getPrimaryPrice(self._token(token), False)
        return int(await self._call("getPrimaryPrice", fn))

    async def get_vault_min_price(self, token: str) -> int:
        fn = self._vault.functions.getMinPrice(self._token(token))
        return int(await self._call("getMinPrice", fn))

    async def get_guaranteed_usd(self, token: str) -> int:
        fn = self._vault.functions.guaranteedUsd(self._token(token))
        return int(await self._call("guaranteedUsd", fn))

    async def get_global_short_size(self, token: str) -> int:
        fn = self._vault.functions.globalShortSizes(self._token(token))
        return int(await self._call("globalShortSizes", fn))

    async def get_oracle_token(self, field: str) -> str:
        fn = getattr(self._price_feed.functions, field)()
        return str(await self._call(field, fn))

    async def get_total_supply(self) -> int:
        return int(await self._call("totalSupply", self._money.functions.totalSupply()))

    async def get_token_decimals(self) -> int:
        return int(await self._call("decimals", self._money.functions.decimals()))
