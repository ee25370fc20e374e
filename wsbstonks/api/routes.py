from __future__ import annotations

import asyncio
import logging
import traceback

from fastapi import APIRouter, Request, Response

from wsbstonks.candles.service import collect_candles
from wsbstonks.errors import ConfigurationError
from wsbstonks.models.portfolio import AddHoldingRequest
from wsbstonks.portfolio.service import add_holding, remove_holding
from wsbstonks.portfolio.summary import holding_view, summarize_portfolio, totals_view
from wsbstonks.state import ALL_STONK_CANDLES, ALL_STONKS, Services

router = APIRouter()
log = logging.getLogger("api")


def services(request: Request) -> Services:
    return request.app.state.services


def _failed(what: str, e: Exception) -> Response:
    log.error("%s failed error=%s", what, repr(e))
    log.error(traceback.format_exc())
    return Response(status_code=500)


@router.get("/health")
def health(request: Request):
    svc = services(request)
    return {
        "status": "ok",
        "app_env": svc.settings.app_env,
        "provider_loaded": svc.provider.__class__.__name__,
        "timestamps_loaded": svc.context.ready.is_set(),
    }


@router.get("/stonks")
async def list_stonks(request: Request):
    """
    Portfolio overview:
    - totals over all holdings (EUR)
    - per holding figures
    - timestamp of the last successful price sync (ms)
    """
    svc = services(request)
    if not await svc.context.wait_ready(svc.settings.startup_wait_seconds):
        return Response(status_code=503)

    try:
        holdings = await svc.store.all_holdings()
    except Exception as e:
        return _failed("GET /stonks", e)

    return {
        "timestamp": svc.context.get(ALL_STONKS),
        "portfolio": totals_view(summarize_portfolio(holdings)),
        "stonks": [holding_view(h) for h in holdings],
    }


@router.post("/stonks")
async def create_stonk(request: Request):
    """
    Add a holding. Body: {symbol, quantity, price, currency}.
    400 for a malformed body or an unsupported currency.
    """
    svc = services(request)
    try:
        body = AddHoldingRequest.model_validate(await request.json())
    except ValueError as e:  # bad JSON or pydantic ValidationError
        log.info("Rejected POST /stonks body error=%s", e)
        return Response(status_code=400)

    try:
        await add_holding(svc.store, svc.provider, body.symbol, body.quantity, body.price, body.currency)
    except ConfigurationError as e:
        log.info("Rejected POST /stonks: %s", e)
        return Response(status_code=400)
    except Exception as e:
        return _failed("POST /stonks", e)

    return Response(status_code=204)


@router.delete("/stonks/{symbol}")
async def delete_stonk(symbol: str, request: Request):
    svc = services(request)
    try:
        removed = await remove_holding(svc.store, symbol)
    except Exception as e:
        return _failed("DELETE /stonks", e)

    return Response(status_code=204 if removed else 404)


@router.get("/stonks/{symbol}/metrics")
async def stonk_metrics(symbol: str, request: Request):
    """52-week range, P/E ratio and logo for one symbol."""
    svc = services(request)
    symbol = symbol.upper()
    try:
        metrics, logo = await asyncio.gather(
            svc.provider.fetch_metrics(symbol),
            svc.provider.logo_url(symbol),
        )
    except Exception as e:
        return _failed("GET /stonks/metrics", e)

    return {
        "symbol": symbol,
        "yearLow": metrics.year_low,
        "yearHigh": metrics.year_high,
        "peRatio": metrics.pe_ratio,
        "logo": logo,
    }


@router.get("/stonkcandles")
async def stonk_candles(request: Request):
    """Daily candles per held symbol: stored history + last ~3 months from the provider."""
    svc = services(request)
    if not await svc.context.wait_ready(svc.settings.startup_wait_seconds):
        return Response(status_code=503)

    try:
        candles = await collect_candles(svc.store, svc.provider, svc.settings.candle_window_days)
    except Exception as e:
        return _failed("GET /stonkcandles", e)

    return {
        "timestamp": svc.context.get(ALL_STONK_CANDLES),
        "candles": {symbol: series.to_dict() for symbol, series in candles.items()},
    }
