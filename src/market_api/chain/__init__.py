"""Chain access layer -- read-only protocol contracts via web3."""

from market_api.chain.client import ChainReader
from market_api.chain.web3_reader import Web3ChainReader

__all__ = ["ChainReader", "Web3ChainReader"]
