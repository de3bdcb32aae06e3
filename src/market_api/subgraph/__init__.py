"""Indexing service layer -- GraphQL subgraph access via aiohttp."""

from market_api.subgraph.client import SubgraphClient, extract_data

__all__ = ["SubgraphClient", "extract_data"]
