from __future__ import annotations

import asyncio
import logging
from typing import List, Sequence

from wsbstonks.models.market import Quote
from wsbstonks.models.portfolio import Holding
from wsbstonks.providers.base import MarketDataProvider

log = logging.getLogger("quotes")


async def fetch_quotes(provider: MarketDataProvider, holdings: Sequence[Holding]) -> List[Quote]:
    """
    Fetch one quote per holding, all requests in flight at once.

    The result is aligned with `holdings`. The batch only succeeds if every
    request does: the first ValidationError/ProviderError is raised as-is.
    """
    if not holdings:
        return []

    quotes = await asyncio.gather(*(provider.fetch_quote(h.symbol) for h in holdings))
    log.debug("Fetched %d quotes", len(quotes))
    return list(quotes)
