from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Quote:
    """
    Quote = live price snapshot for one symbol.

    Only `current` survives into a holding update; the rest is kept so
    callers can log or display it.
    """
    symbol: str
    current: float
    high: float
    low: float
    open: float
    previous_close: float


@dataclass(frozen=True)
class CandlePoint:
    """
    One stored daily price point.

    timestamp: unix seconds (the store's convention)
    """
    symbol: str
    timestamp: int
    open: float
    high: float
    low: float
    close: float


@dataclass
class CandleSeries:
    """
    Per-symbol candles as index-aligned parallel lists.

    times are unix milliseconds, the same unit the provider candles use.
    """
    opens: List[float] = field(default_factory=list)
    highs: List[float] = field(default_factory=list)
    lows: List[float] = field(default_factory=list)
    closes: List[float] = field(default_factory=list)
    times: List[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.times)

    def append(self, open_: float, high: float, low: float, close: float, time_ms: int) -> None:
        self.opens.append(open_)
        self.highs.append(high)
        self.lows.append(low)
        self.closes.append(close)
        self.times.append(time_ms)

    def to_dict(self) -> dict:
        return {
            "opens": list(self.opens),
            "highs": list(self.highs),
            "lows": list(self.lows),
            "closes": list(self.closes),
            "times": list(self.times),
        }


@dataclass(frozen=True)
class Metrics:
    """52-week range and P/E ratio for a symbol."""
    year_low: float
    year_high: float
    pe_ratio: float
