from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class Holding:
    """
    Holding = one tracked equity/ETF position.

    buyin: purchase price per share (EUR)
    price: last synced price in EUR, 0 until the first sync cycle ran
    currency: currency the provider quotes this symbol in
    """
    symbol: str
    name: str
    buyin: float
    quantity: float
    price: float
    currency: str


@dataclass(frozen=True)
class PortfolioTotals:
    buyin: float
    value: float
    diff_euro: float
    diff_percent: float


class AddHoldingRequest(BaseModel):
    """Body of POST /stonks."""

    symbol: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    price: float = Field(..., gt=0)
    currency: str = Field(..., min_length=1)
