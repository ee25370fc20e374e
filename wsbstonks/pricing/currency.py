from __future__ import annotations

from typing import Mapping, Optional

from wsbstonks.errors import ConfigurationError

BASE_CURRENCY = "EUR"

# Currencies a holding may be quoted in
SUPPORTED_CURRENCIES = ("EUR", "USD", "CAD")


def convert(price: float, currency: str, rates: Mapping[str, Optional[float]]) -> float:
    """
    Convert `price` from `currency` into the base currency.

    rates maps currency -> units per 1 EUR. A currency without a usable rate
    is treated as rate 1, i.e. the price is returned unchanged.
    """
    if currency == BASE_CURRENCY:
        return price

    rate = rates.get(currency)
    if not rate or rate <= 0:
        rate = 1.0
    return price / rate


def check_currency(code: str) -> str:
    """Normalize a currency code and make sure holdings may use it."""
    normalized = (code or "").strip().upper()
    if normalized not in SUPPORTED_CURRENCIES:
        raise ConfigurationError(
            f"unsupported currency '{code}', expected one of {', '.join(SUPPORTED_CURRENCIES)}",
            value=code,
        )
    return normalized
