"""GraphQL client for the protocol's subgraphs via aiohttp.

One long-lived ClientSession is shared by all concurrent queries. Every
failure (transport, HTTP status, GraphQL ``errors`` payload, timeout) is
raised as UpstreamUnavailable; callers decide the fallback.
"""

import asyncio
from typing import Any

import aiohttp

from market_api.exceptions import UpstreamUnavailable
from market_api.logging import get_logger

logger = get_logger(__name__)


def extract_data(payload: Any) -> dict[str, Any]:
    """Return the ``data`` object of a GraphQL response body.

    Raises:
        UpstreamUnavailable: If the body reports errors or is not an object.
    """
    if not isinstance(payload, dict):
        raise UpstreamUnavailable(f"malformed GraphQL response: {type(payload).__name__}")
    if payload.get("errors"):
        raise UpstreamUnavailable(f"GraphQL errors: {payload['errors']}")
    data = payload.get("data")
    # A null data object is a valid "nothing matched" answer
    return data if isinstance(data, dict) else {}


class SubgraphClient:
    """Posts GraphQL documents to subgraph endpoints."""

    def __init__(self, timeout: float = 5.0) -> None:
        self._timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    async def connect(self) -> None:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            )
            logger.info("subgraph_session_opened", timeout=self._timeout)

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
            logger.info("subgraph_session_closed")

    async def query(
        self, url: str, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Run a GraphQL query and return its ``data`` object."""
        if self._session is None:
            await self.connect()
        assert self._session is not None

        body = {"query": query, "variables": variables or {}}
        try:
            async with self._session.post(url, json=body) as resp:
                resp.raise_for_status()
                payload = await resp.json(content_type=None)
        except asyncio.TimeoutError as exc:
            raise UpstreamUnavailable(f"subgraph query timed out: {url}") from exc
        except (aiohttp.ClientError, ValueError) as exc:
            raise UpstreamUnavailable(f"subgraph query failed: {exc}") from exc

        return extract_data(payload)
