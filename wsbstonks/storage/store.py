"""
SQLite storage layer.

Holds the portfolio (holdings), the last-success time per sync cycle
(timestamps, unix seconds) and stored daily candles.

Every public method is a coroutine: the blocking sqlite3 call runs in a
worker thread on its own connection, so several queries can be in flight
while the event loop keeps serving.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, TypeVar

from wsbstonks.errors import PersistenceError
from wsbstonks.models.market import CandlePoint
from wsbstonks.models.portfolio import Holding

log = logging.getLogger("store")

T = TypeVar("T")

SCHEMA = """
CREATE TABLE IF NOT EXISTS holdings (
    symbol   TEXT PRIMARY KEY,
    name     TEXT NOT NULL,
    buyin    REAL NOT NULL,
    quantity REAL NOT NULL CHECK (quantity > 0),
    price    REAL NOT NULL DEFAULT 0 CHECK (price >= 0),
    currency TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS timestamps (
    name      TEXT PRIMARY KEY,
    timestamp INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS candles (
    symbol    TEXT NOT NULL,
    timestamp INTEGER NOT NULL,
    open      REAL NOT NULL,
    high      REAL NOT NULL,
    low       REAL NOT NULL,
    close     REAL NOT NULL,
    PRIMARY KEY (symbol, timestamp)
);
"""


class PortfolioStore:
    """SQLite backed store with async accessors."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    async def _run(self, op: str, fn: Callable[[sqlite3.Connection], T]) -> T:
        def work() -> T:
            with closing(self._connect()) as conn:
                with conn:  # commit on success, rollback on error
                    return fn(conn)

        try:
            return await asyncio.to_thread(work)
        except sqlite3.Error as e:
            raise PersistenceError(f"{op} failed: {e}") from e

    # -------------------------
    # Schema
    # -------------------------
    async def init_schema(self) -> None:
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        await self._run("init_schema", lambda conn: conn.executescript(SCHEMA))
        log.info("Store initialized at %s", self.db_path)

    # -------------------------
    # Holdings
    # -------------------------
    async def all_holdings(self) -> List[Holding]:
        def fn(conn: sqlite3.Connection) -> List[Holding]:
            rows = conn.execute(
                "SELECT symbol, name, buyin, quantity, price, currency FROM holdings ORDER BY rowid"
            ).fetchall()
            return [
                Holding(
                    symbol=r["symbol"],
                    name=r["name"],
                    buyin=r["buyin"],
                    quantity=r["quantity"],
                    price=r["price"],
                    currency=r["currency"],
                )
                for r in rows
            ]

        return await self._run("all_holdings", fn)

    async def insert_holding(self, holding: Holding) -> None:
        await self._run(
            "insert_holding",
            lambda conn: conn.execute(
                "INSERT INTO holdings (symbol, name, buyin, quantity, price, currency) VALUES (?, ?, ?, ?, ?, ?)",
                (holding.symbol, holding.name, holding.buyin, holding.quantity, holding.price, holding.currency),
            ),
        )

    async def update_holding_price(self, symbol: str, price: float) -> int:
        """Set the current price of exactly one symbol. Returns the number of rows touched."""
        return await self._run(
            "update_holding_price",
            lambda conn: conn.execute("UPDATE holdings SET price = ? WHERE symbol = ?", (price, symbol)).rowcount,
        )

    async def delete_holding(self, symbol: str) -> int:
        return await self._run(
            "delete_holding",
            lambda conn: conn.execute("DELETE FROM holdings WHERE symbol = ?", (symbol,)).rowcount,
        )

    # -------------------------
    # Timestamps (unix seconds)
    # -------------------------
    async def all_timestamps(self) -> Dict[str, int]:
        def fn(conn: sqlite3.Connection) -> Dict[str, int]:
            rows = conn.execute("SELECT name, timestamp FROM timestamps").fetchall()
            return {r["name"]: int(r["timestamp"]) for r in rows}

        return await self._run("all_timestamps", fn)

    async def save_timestamp(self, name: str, seconds: int) -> None:
        await self._run(
            "save_timestamp",
            lambda conn: conn.execute(
                "INSERT INTO timestamps (name, timestamp) VALUES (?, ?) "
                "ON CONFLICT(name) DO UPDATE SET timestamp = excluded.timestamp",
                (name, int(seconds)),
            ),
        )

    # -------------------------
    # Candles (read side; rows are seeded externally)
    # -------------------------
    async def all_candle_rows(self) -> List[CandlePoint]:
        def fn(conn: sqlite3.Connection) -> List[CandlePoint]:
            rows = conn.execute(
                "SELECT symbol, timestamp, open, high, low, close FROM candles ORDER BY symbol, timestamp ASC"
            ).fetchall()
            return [
                CandlePoint(
                    symbol=r["symbol"],
                    timestamp=int(r["timestamp"]),
                    open=r["open"],
                    high=r["high"],
                    low=r["low"],
                    close=r["close"],
                )
                for r in rows
            ]

        return await self._run("all_candle_rows", fn)

    async def insert_candle_rows(self, rows: Iterable[CandlePoint]) -> int:
        params: List[Any] = [(r.symbol, r.timestamp, r.open, r.high, r.low, r.close) for r in rows]
        if not params:
            return 0

        await self._run(
            "insert_candle_rows",
            lambda conn: conn.executemany(
                "INSERT OR REPLACE INTO candles (symbol, timestamp, open, high, low, close) VALUES (?, ?, ?, ?, ?, ?)",
                params,
            ),
        )
        log.info("Upserted %d candle rows", len(params))
        return len(params)
