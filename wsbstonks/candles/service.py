from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, Optional

from wsbstonks.candles.aggregator import aggregate_candle_rows, merge_series
from wsbstonks.models.market import CandleSeries
from wsbstonks.providers.base import MarketDataProvider
from wsbstonks.storage.store import PortfolioStore

log = logging.getLogger("candles")

DAY_MS = 86_400_000


async def collect_candles(
    store: PortfolioStore,
    provider: MarketDataProvider,
    window_days: int = 91,
    now_ms: Optional[int] = None,
) -> Dict[str, CandleSeries]:
    """
    Candles for every held symbol: stored history plus a freshly fetched
    window of `window_days` days. A single failed fetch fails the request.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    start_ms = now_ms - window_days * DAY_MS

    holdings, rows = await asyncio.gather(store.all_holdings(), store.all_candle_rows())
    stored = aggregate_candle_rows(rows)

    fresh = await asyncio.gather(
        *(provider.fetch_candles(h.symbol, start_ms, now_ms) for h in holdings)
    )

    result: Dict[str, CandleSeries] = {}
    for holding, series in zip(holdings, fresh):
        result[holding.symbol] = merge_series(stored.get(holding.symbol), series)

    log.info("Collected candles symbols=%d stored_symbols=%d", len(result), len(stored))
    return result
