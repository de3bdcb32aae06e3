"""Human-readable contract specifications page."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from market_api.api.routes.listing import contract_specs

router = APIRouter()


@router.get("/contract_specs.html", response_class=HTMLResponse)
async def contract_specs_page(request: Request) -> HTMLResponse:
    """Render the same data as /contract_specs as an HTML table."""
    templates: Jinja2Templates = request.app.state.templates
    markets = request.app.state.markets
    return templates.TemplateResponse(
        request,
        "contract_specs.html",
        {
            "markets": markets,
            "specs": contract_specs(markets),
            "funding_interval_hours": 1,
        },
    )
