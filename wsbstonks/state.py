from __future__ import annotations

import asyncio
import logging
import traceback
from dataclasses import dataclass, field
from typing import Dict, Optional

from wsbstonks.config import Settings
from wsbstonks.providers.base import MarketDataProvider
from wsbstonks.storage.store import PortfolioStore

log = logging.getLogger("sync_state")

# Cycle names, also the keys of the timestamps table
ALL_STONKS = "allstonks"
ALL_STONK_CANDLES = "allstonkcandles"


@dataclass
class SyncContext:
    """
    Last successful completion time per sync cycle, in unix ms.

    The store keeps seconds; load() and record() convert. Values only move
    forward, so a late load() never undoes a cycle that finished first.

    ready is set once the initial load from the store finished (or failed),
    readers of timestamps wait on it.
    """
    timestamps: Dict[str, int] = field(default_factory=dict)
    ready: asyncio.Event = field(default_factory=asyncio.Event)

    def get(self, name: str) -> Optional[int]:
        return self.timestamps.get(name)

    def _advance(self, name: str, ms: int) -> int:
        current = self.timestamps.get(name)
        if current is None or ms > current:
            self.timestamps[name] = ms
        return self.timestamps[name]

    async def load(self, store: PortfolioStore) -> None:
        try:
            stored = await store.all_timestamps()
            for name, seconds in stored.items():
                self._advance(name, int(seconds) * 1000)
            log.info("Loaded %d sync timestamps", len(stored))
        except Exception as e:
            log.error("Loading sync timestamps failed error=%s", repr(e))
            log.error(traceback.format_exc())
        finally:
            self.ready.set()

    async def record(self, name: str, ms: int, store: PortfolioStore) -> int:
        """Advance `name` in memory, then mirror it to the store as seconds."""
        value = self._advance(name, ms)
        await store.save_timestamp(name, value // 1000)
        return value

    async def wait_ready(self, timeout: float) -> bool:
        if self.ready.is_set():
            return True
        try:
            await asyncio.wait_for(self.ready.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return False
        return True


@dataclass
class Services:
    """Everything the API process shares: attached to app.state.services."""
    settings: Settings
    store: PortfolioStore
    provider: MarketDataProvider
    context: SyncContext = field(default_factory=SyncContext)
