from __future__ import annotations

from typing import Iterable

from wsbstonks.models.portfolio import Holding, PortfolioTotals
from wsbstonks.utils import round_to


def _percent(diff: float, base: float) -> float:
    return diff / base * 100 if base else 0.0


def summarize_portfolio(holdings: Iterable[Holding]) -> PortfolioTotals:
    """Buy-in value, current value and their difference over all holdings (EUR)."""
    buyin = 0.0
    value = 0.0
    for h in holdings:
        buyin += h.buyin * h.quantity
        value += h.price * h.quantity

    diff = value - buyin
    return PortfolioTotals(buyin=buyin, value=value, diff_euro=diff, diff_percent=_percent(diff, buyin))


def totals_view(totals: PortfolioTotals, places: int = 2) -> dict:
    return {
        "buyin": round_to(totals.buyin, places),
        "value": round_to(totals.value, places),
        "diffEuro": round_to(totals.diff_euro, places),
        "diffPercent": round_to(totals.diff_percent, places),
    }


def holding_view(h: Holding, places: int = 2) -> dict:
    diff = (h.price - h.buyin) * h.quantity
    return {
        "symbol": h.symbol,
        "name": h.name,
        "currency": h.currency,
        "count": h.quantity,
        "buyinPrice": round_to(h.buyin, places),
        "buyinValue": round_to(h.buyin * h.quantity, places),
        "currentPrice": round_to(h.price, places),
        "currentValue": round_to(h.price * h.quantity, places),
        "diffEuro": round_to(diff, places),
        "diffPercent": round_to(_percent(h.price - h.buyin, h.buyin), places),
    }
