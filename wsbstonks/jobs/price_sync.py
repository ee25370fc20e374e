from __future__ import annotations

import asyncio
import logging
import time
import traceback
from typing import Optional

from wsbstonks.pricing.currency import convert
from wsbstonks.pricing.quotes import fetch_quotes
from wsbstonks.providers.base import MarketDataProvider
from wsbstonks.state import ALL_STONKS, SyncContext
from wsbstonks.storage.store import PortfolioStore

log = logging.getLogger("price_sync")


async def _write_price(store: PortfolioStore, symbol: str, price: float) -> None:
    touched = await store.update_holding_price(symbol, price)
    if not touched:
        log.warning("Price write matched no holding symbol=%s", symbol)


async def run_price_cycle(
    context: SyncContext,
    store: PortfolioStore,
    provider: MarketDataProvider,
    now_ms: Optional[int] = None,
) -> SyncContext:
    """
    One price sync cycle:
    - read holdings, then fetch FX rates and every quote at once
    - convert each quote into EUR
    - advance the cycle timestamp (it tracks the fetch, not the writes)
    - write every price; each write may fail on its own

    Any fetch failure aborts before the timestamp moves or a price is
    written; the next scheduled run starts over.
    """
    try:
        holdings = await store.all_holdings()
        rates, quotes = await asyncio.gather(provider.fx_rates(), fetch_quotes(provider, holdings))
    except Exception as e:
        log.error("Price sync failed, prices left untouched error=%s", repr(e))
        log.error(traceback.format_exc())
        return context

    prices = [
        (h.symbol, convert(q.current, h.currency, rates))
        for h, q in zip(holdings, quotes)
    ]

    if now_ms is None:
        now_ms = int(time.time() * 1000)
    try:
        await context.record(ALL_STONKS, now_ms, store)
    except Exception as e:
        # cache already advanced; the store catches up on the next cycle
        log.error("Saving sync timestamp failed error=%s", repr(e))

    results = await asyncio.gather(
        *(_write_price(store, symbol, price) for symbol, price in prices),
        return_exceptions=True,
    )

    failed = 0
    for (symbol, price), result in zip(prices, results):
        if isinstance(result, BaseException):
            failed += 1
            log.error("Price write failed symbol=%s price=%s error=%s", symbol, price, repr(result))

    log.info("Price sync done holdings=%d written=%d failed=%d", len(prices), len(prices) - failed, failed)
    return context
