from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Optional

from wsbstonks.models.market import CandleSeries, Metrics, Quote


class MarketDataProvider(ABC):
    """
    Provider contract (interface).

    Any provider must implement:
    - fetch_quote(): live price for one symbol
    - fetch_candles(): daily candles for a time window (times in ms)
    - fx_rates(): EUR based currency -> rate table
    - resolve_name(): display name of a stock or ETF
    - fetch_metrics() / logo_url(): profile extras
    """

    @abstractmethod
    async def fetch_quote(self, symbol: str) -> Quote:
        raise NotImplementedError

    @abstractmethod
    async def fetch_candles(
        self,
        symbol: str,
        start_ms: int,
        end_ms: Optional[int] = None,
    ) -> CandleSeries:
        raise NotImplementedError

    @abstractmethod
    async def fx_rates(self) -> Dict[str, float]:
        raise NotImplementedError

    @abstractmethod
    async def resolve_name(self, symbol: str) -> str:
        raise NotImplementedError

    @abstractmethod
    async def fetch_metrics(self, symbol: str) -> Metrics:
        raise NotImplementedError

    @abstractmethod
    async def logo_url(self, symbol: str) -> Optional[str]:
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources. No-op by default."""
