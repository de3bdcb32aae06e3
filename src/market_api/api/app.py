"""FastAPI application factory for the listing API."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from market_api.api.routes import listing, pages
from market_api.logging import request_context_middleware

TEMPLATES_DIR = Path(__file__).parent / "templates"


def create_app(lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to open upstream connections and load markets.

    Returns:
        Configured FastAPI application. Route handlers read ``markets``,
        ``assembler`` and ``supply_reader`` from ``app.state``.
    """
    app = FastAPI(
        title="Perpetual Market Data API",
        lifespan=lifespan,
    )

    app.state.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    app.middleware("http")(request_context_middleware)

    # Wired by main.py lifespan (or directly in tests)
    app.state.markets = ()
    app.state.assembler = None
    app.state.supply_reader = None

    app.include_router(listing.router)
    app.include_router(pages.router)

    return app
