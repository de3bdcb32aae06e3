"""JSON endpoints required by CoinGecko / CoinMarketCap derivatives listings."""

from __future__ import annotations

import time
from dataclasses import asdict
from decimal import Decimal
from typing import Any

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from market_api.exceptions import UpstreamUnavailable
from market_api.market_data.markets import find_market
from market_api.models import Market, OrderBook, OrderbookLevel

log = structlog.get_logger(__name__)

MAX_DEPTH = 50

router = APIRouter()


def _decimal_to_float(obj: Any) -> Any:
    """Recursively convert Decimal values to floats for JSON serialization."""
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, dict):
        return {k: _decimal_to_float(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_decimal_to_float(item) for item in obj]
    return obj


def contract_specs(markets: tuple[Market, ...]) -> dict[str, dict[str, Any]]:
    """Static contract specification per market. No upstream I/O."""
    return {
        m.id: {
            "contract_type": "vanilla",
            "contract_price_currency": "USD",
            "contract_price": None,
        }
        for m in markets
    }


def _parse_depth(raw: str | None) -> int | None:
    """Parse the depth query value; None when it is not an integer in range."""
    if raw is None:
        return MAX_DEPTH
    try:
        depth = int(raw)
    except ValueError:
        return None
    if not 1 <= depth <= MAX_DEPTH:
        return None
    return depth


def _book_side(levels: list[OrderbookLevel], depth: int) -> list[list[float]]:
    return [[float(level.price), float(level.size)] for level in levels[:depth]]


def _book_payload(ticker_id: str, book: OrderBook, depth: int) -> dict[str, Any]:
    return {
        "ticker_id": ticker_id,
        "timestamp": int(time.time() * 1000),
        "bids": _book_side(book.bids, depth),
        "asks": _book_side(book.asks, depth),
    }


@router.get("/")
@router.get("/health")
async def health() -> JSONResponse:
    """Liveness only; touches no upstream."""
    return JSONResponse(content={"status": "ok", "timestamp": int(time.time())})


@router.get("/contracts")
async def get_contracts(request: Request) -> JSONResponse:
    """One ticker per configured market, in configuration order."""
    assembler = request.app.state.assembler
    markets = request.app.state.markets
    try:
        tickers = await assembler.assemble_all(markets)
    except Exception as e:
        log.error("contracts_error", error=str(e), exc_info=True)
        return JSONResponse(content={"error": str(e) or type(e).__name__}, status_code=500)

    return JSONResponse(content=[_decimal_to_float(asdict(t)) for t in tickers])


@router.get("/contract_specs")
async def get_contract_specs(request: Request) -> JSONResponse:
    return JSONResponse(content=contract_specs(request.app.state.markets))


@router.get("/orderbook")
async def get_orderbook(
    request: Request,
    ticker_id: str | None = None,
    depth: str | None = None,
) -> JSONResponse:
    """Synthetic order book for one market.

    An unknown ticker_id or a depth outside 1..MAX_DEPTH is a 400 with an
    error body. The ticker is checked first.
    """
    market = find_market(request.app.state.markets, ticker_id)
    if market is None:
        return JSONResponse(content={"error": "Invalid ticker_id"}, status_code=400)

    levels = _parse_depth(depth)
    if levels is None:
        return JSONResponse(
            content={"error": f"depth must be an integer between 1 and {MAX_DEPTH}"},
            status_code=400,
        )

    assembler = request.app.state.assembler
    _, book = await assembler.orderbook(market)
    return JSONResponse(content=_book_payload(market.id, book, levels))


@router.get("/supply/money")
async def get_money_supply(request: Request) -> JSONResponse:
    """Governance token supply. Integers are sent as strings."""
    supply_reader = request.app.state.supply_reader
    try:
        supply = await supply_reader.read_supply()
    except UpstreamUnavailable as e:
        log.error("supply_unavailable", error=str(e))
        return JSONResponse(content={"error": str(e)}, status_code=503)

    total = str(supply.total_supply)
    return JSONResponse(content={
        "total_supply": total,
        "circulating_supply": total,
        "decimals": supply.decimals,
    })
