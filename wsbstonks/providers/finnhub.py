from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx

from wsbstonks.errors import ProviderError, ValidationError
from wsbstonks.models.market import CandleSeries, Metrics, Quote
from wsbstonks.providers.base import MarketDataProvider

log = logging.getLogger("finnhub_provider")

# Finnhub quote payload keys -> Quote fields
_QUOTE_FIELDS = {
    "c": "current",
    "h": "high",
    "l": "low",
    "o": "open",
    "pc": "previous_close",
}

_CANDLE_FIELDS = ("o", "h", "l", "c", "t")


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


class FinnhubProvider(MarketDataProvider):
    """
    Finnhub Provider (REST).

    The plan we are on restricts each token to a subset of endpoints:
    - api_key: stock/profile2, etf/profile, stock/metric, stock/candle
    - sandbox_key: quote (returns 403 for ETFs with the normal key), forex/rates
    """

    def __init__(
        self,
        api_key: str,
        sandbox_key: str,
        base_url: str = "https://finnhub.io/api/v1",
        timeout_s: float = 20.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not api_key or not sandbox_key:
            raise RuntimeError("Missing Finnhub tokens. Set FINNHUB_KEY and FINNHUB_SANDBOX_KEY in your .env.")

        self.api_key = api_key
        self.sandbox_key = sandbox_key
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout_s)

    async def aclose(self) -> None:
        await self._client.aclose()

    # -------------------------
    # Transport
    # -------------------------
    async def _get(self, path: str, params: Dict[str, Any], token: str) -> Any:
        """
        GET {base_url}{path} and decode the JSON body.

        Any status in 200..399 counts as success; everything else raises
        ProviderError carrying the raw body.
        """
        url = f"{self.base_url}{path}"
        try:
            resp = await self._client.get(url, params={**params, "token": token})
        except httpx.HTTPError as e:
            raise ProviderError(f"request to {path} failed: {e!r}", payload=e) from e

        if not 200 <= resp.status_code < 400:
            raise ProviderError(f"{path} returned status {resp.status_code}", payload=resp.text)

        try:
            return resp.json()
        except ValueError as e:
            raise ProviderError(f"{path} returned a non-JSON body", payload=resp.text) from e

    # -------------------------
    # Public interface used by the app
    # -------------------------
    async def fetch_quote(self, symbol: str) -> Quote:
        """
        GET /quote?symbol=...

        Finnhub answers unknown symbols with all-zero fields, so a zero
        counts as missing just like an absent key.
        """
        data = await self._get("/quote", {"symbol": symbol}, self.sandbox_key)
        if not isinstance(data, dict):
            raise ValidationError(symbol, "quote")

        values: Dict[str, float] = {}
        for key, name in _QUOTE_FIELDS.items():
            value = _number(data.get(key))
            if not value:
                raise ValidationError(symbol, name)
            values[name] = value

        return Quote(symbol=symbol, **values)

    async def fetch_candles(
        self,
        symbol: str,
        start_ms: int,
        end_ms: Optional[int] = None,
    ) -> CandleSeries:
        """
        GET /stock/candle?symbol=...&resolution=D&from=<s>&to=<s>

        Window bounds go out as unix seconds; returned times are ms.
        """
        if end_ms is None:
            end_ms = int(time.time() * 1000)

        params = {
            "symbol": symbol,
            "resolution": "D",
            "from": start_ms // 1000,
            "to": end_ms // 1000,
        }
        data = await self._get("/stock/candle", params, self.api_key)
        if not isinstance(data, dict):
            raise ValidationError(symbol, "candles")

        if data.get("s") == "no_data":
            log.info("No candles symbol=%s from=%s to=%s", symbol, params["from"], params["to"])
            return CandleSeries()

        for key in _CANDLE_FIELDS:
            if not isinstance(data.get(key), list):
                raise ValidationError(symbol, key)

        lengths = {len(data[key]) for key in _CANDLE_FIELDS}
        if len(lengths) != 1:
            raise ValidationError(symbol, "candles")

        return CandleSeries(
            opens=[float(v) for v in data["o"]],
            highs=[float(v) for v in data["h"]],
            lows=[float(v) for v in data["l"]],
            closes=[float(v) for v in data["c"]],
            times=[int(v) * 1000 for v in data["t"]],
        )

    async def fx_rates(self) -> Dict[str, float]:
        """GET /forex/rates?base=EUR -> {"USD": 1.08, ...}"""
        data = await self._get("/forex/rates", {"base": "EUR"}, self.sandbox_key)
        quote = data.get("quote") if isinstance(data, dict) else None
        if not isinstance(quote, dict) or not quote:
            raise ValidationError("EUR", "quote")

        rates: Dict[str, float] = {}
        for code, rate in quote.items():
            value = _number(rate)
            if value is not None:
                rates[str(code).upper()] = value
        return rates

    async def resolve_name(self, symbol: str) -> str:
        """
        Company name from stock/profile2; ETFs have no company profile, so
        fall back to the name in etf/profile.
        """
        profile = await self._get("/stock/profile2", {"symbol": symbol}, self.api_key)
        name = profile.get("name") if isinstance(profile, dict) else None
        if name:
            return str(name)

        log.info("No company profile symbol=%s, trying ETF profile", symbol)
        etf = await self._get("/etf/profile", {"symbol": symbol}, self.api_key)
        etf_profile = etf.get("profile") if isinstance(etf, dict) else None
        name = etf_profile.get("name") if isinstance(etf_profile, dict) else None
        if not name:
            raise ValidationError(symbol, "name")
        return str(name)

    async def fetch_metrics(self, symbol: str) -> Metrics:
        """GET /stock/metric?metric=all -> 52-week low/high and P/E (excl. extraordinary items, TTM)."""
        data = await self._get("/stock/metric", {"symbol": symbol, "metric": "all"}, self.api_key)
        metric = data.get("metric") if isinstance(data, dict) else None
        if not isinstance(metric, dict):
            raise ValidationError(symbol, "metric")

        year_low = _number(metric.get("52WeekLow"))
        year_high = _number(metric.get("52WeekHigh"))
        pe_ratio = _number(metric.get("peExclExtraTTM"))
        if not year_low:
            raise ValidationError(symbol, "52WeekLow")
        if not year_high:
            raise ValidationError(symbol, "52WeekHigh")
        if not pe_ratio:
            raise ValidationError(symbol, "peExclExtraTTM")

        return Metrics(year_low=year_low, year_high=year_high, pe_ratio=pe_ratio)

    async def logo_url(self, symbol: str) -> Optional[str]:
        """Company logo from stock/profile2. ETFs have none."""
        profile = await self._get("/stock/profile2", {"symbol": symbol}, self.api_key)
        logo = profile.get("logo") if isinstance(profile, dict) else None
        return str(logo) if logo else None
