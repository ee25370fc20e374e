from __future__ import annotations

from typing import Dict, Iterable, Optional

from wsbstonks.models.market import CandlePoint, CandleSeries
from wsbstonks.utils import group_by


def aggregate_candle_rows(rows: Iterable[CandlePoint]) -> Dict[str, CandleSeries]:
    """
    Turn flat stored rows into one CandleSeries per symbol.

    rows must already be sorted by (symbol, timestamp); the order is kept,
    not checked. Stored timestamps are seconds, series times are ms.
    """
    result: Dict[str, CandleSeries] = {}
    for symbol, points in group_by(rows, lambda row: row.symbol).items():
        series = CandleSeries()
        for p in points:
            series.append(p.open, p.high, p.low, p.close, p.timestamp * 1000)
        result[symbol] = series
    return result


def merge_series(stored: Optional[CandleSeries], fresh: CandleSeries) -> CandleSeries:
    """
    Stored history followed by the fresh candles that come after it.

    Fresh candles at or before the last stored time are dropped, so days
    present in both are taken from the store.
    """
    if stored is None or not len(stored):
        return CandleSeries(**fresh.to_dict())

    merged = CandleSeries(**stored.to_dict())
    last = stored.times[-1]
    for i, t in enumerate(fresh.times):
        if t > last:
            merged.append(fresh.opens[i], fresh.highs[i], fresh.lows[i], fresh.closes[i], t)
    return merged
