from __future__ import annotations

import logging

from wsbstonks.models.portfolio import Holding
from wsbstonks.pricing.currency import check_currency
from wsbstonks.providers.base import MarketDataProvider
from wsbstonks.storage.store import PortfolioStore

log = logging.getLogger("portfolio")


async def add_holding(
    store: PortfolioStore,
    provider: MarketDataProvider,
    symbol: str,
    quantity: float,
    price: float,
    currency: str,
) -> Holding:
    """
    Track a new position.

    The currency is checked before anything else (ConfigurationError, no
    provider call and no write). The display name comes from the provider;
    the current price starts at 0 until the next sync cycle.
    """
    currency = check_currency(currency)
    symbol = symbol.strip().upper()
    if quantity <= 0:
        raise ValueError(f"quantity must be positive, got {quantity}")

    name = await provider.resolve_name(symbol)
    holding = Holding(
        symbol=symbol,
        name=name,
        buyin=price,
        quantity=quantity,
        price=0.0,
        currency=currency,
    )
    await store.insert_holding(holding)
    log.info("Added holding symbol=%s name=%s quantity=%s currency=%s", symbol, name, quantity, currency)
    return holding


async def remove_holding(store: PortfolioStore, symbol: str) -> bool:
    """Stop tracking `symbol`. Returns False if it was not tracked."""
    removed = await store.delete_holding(symbol.strip().upper())
    if removed:
        log.info("Removed holding symbol=%s", symbol)
    return removed > 0
