from __future__ import annotations

from typing import Dict, List, Optional

from wsbstonks.errors import PersistenceError, ProviderError
from wsbstonks.models.market import CandlePoint, CandleSeries, Metrics, Quote
from wsbstonks.models.portfolio import Holding
from wsbstonks.providers.base import MarketDataProvider


def make_quote(symbol: str, current: float) -> Quote:
    return Quote(
        symbol=symbol,
        current=current,
        high=current + 1,
        low=current - 1,
        open=current,
        previous_close=current,
    )


class FakeProvider(MarketDataProvider):
    """In-memory provider; an Exception stored as a value is raised instead."""

    def __init__(self, quotes=None, rates=None, names=None, candles=None):
        self.quotes: Dict[str, object] = quotes or {}
        self.rates: object = rates if rates is not None else {"USD": 2.0, "CAD": 4.0}
        self.names: Dict[str, object] = names or {}
        self.candles: Dict[str, object] = candles or {}
        self.calls: List[tuple] = []
        self.closed = False

    @staticmethod
    def _value(value):
        if isinstance(value, Exception):
            raise value
        return value

    async def fetch_quote(self, symbol: str) -> Quote:
        self.calls.append(("quote", symbol))
        if symbol not in self.quotes:
            raise ProviderError(f"no quote for {symbol}")
        return self._value(self.quotes[symbol])

    async def fetch_candles(self, symbol: str, start_ms: int, end_ms: Optional[int] = None) -> CandleSeries:
        self.calls.append(("candles", symbol, start_ms, end_ms))
        return self._value(self.candles.get(symbol, CandleSeries()))

    async def fx_rates(self) -> Dict[str, float]:
        self.calls.append(("fx",))
        return self._value(self.rates)

    async def resolve_name(self, symbol: str) -> str:
        self.calls.append(("name", symbol))
        if symbol not in self.names:
            raise ProviderError(f"no name for {symbol}")
        return self._value(self.names[symbol])

    async def fetch_metrics(self, symbol: str) -> Metrics:
        self.calls.append(("metrics", symbol))
        return Metrics(year_low=10.0, year_high=20.0, pe_ratio=15.5)

    async def logo_url(self, symbol: str) -> Optional[str]:
        self.calls.append(("logo", symbol))
        return f"https://logo.example/{symbol}.png"

    async def aclose(self) -> None:
        self.closed = True


class FakeStore:
    """Same coroutines as PortfolioStore, backed by lists and dicts."""

    def __init__(self, holdings=None, timestamps=None, candle_rows=None):
        self.holdings: List[Holding] = list(holdings or [])
        self.timestamps: Dict[str, int] = dict(timestamps or {})
        self.candle_rows: List[CandlePoint] = list(candle_rows or [])
        self.price_writes: List[tuple] = []
        self.failing_writes: set = set()
        self.fail_holdings = False
        self.fail_timestamps = False

    async def init_schema(self) -> None:
        pass

    async def all_holdings(self) -> List[Holding]:
        if self.fail_holdings:
            raise PersistenceError("all_holdings failed")
        return list(self.holdings)

    async def insert_holding(self, holding: Holding) -> None:
        self.holdings.append(holding)

    async def update_holding_price(self, symbol: str, price: float) -> int:
        self.price_writes.append((symbol, price))
        if symbol in self.failing_writes:
            raise PersistenceError(f"update {symbol} failed")
        touched = 0
        for i, h in enumerate(self.holdings):
            if h.symbol == symbol:
                self.holdings[i] = Holding(h.symbol, h.name, h.buyin, h.quantity, price, h.currency)
                touched += 1
        return touched

    async def delete_holding(self, symbol: str) -> int:
        before = len(self.holdings)
        self.holdings = [h for h in self.holdings if h.symbol != symbol]
        return before - len(self.holdings)

    async def all_timestamps(self) -> Dict[str, int]:
        if self.fail_timestamps:
            raise PersistenceError("all_timestamps failed")
        return dict(self.timestamps)

    async def save_timestamp(self, name: str, seconds: int) -> None:
        if self.fail_timestamps:
            raise PersistenceError("save_timestamp failed")
        self.timestamps[name] = seconds

    async def all_candle_rows(self) -> List[CandlePoint]:
        return list(self.candle_rows)
