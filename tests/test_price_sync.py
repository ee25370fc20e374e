import unittest

from fakes import FakeProvider, FakeStore, make_quote

from wsbstonks.errors import ProviderError, ValidationError
from wsbstonks.jobs.price_sync import run_price_cycle
from wsbstonks.models.portfolio import Holding
from wsbstonks.state import ALL_STONKS, SyncContext

NOW_MS = 1_700_000_123_456


def holdings():
    return [
        Holding("SAP", "SAP SE", 100.0, 2, 0.0, "EUR"),
        Holding("AAPL", "Apple Inc", 120.0, 1, 0.0, "USD"),
        Holding("SHOP", "Shopify Inc", 50.0, 4, 0.0, "CAD"),
    ]


class TestPriceCycle(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = FakeStore(holdings=holdings())
        self.provider = FakeProvider(
            quotes={
                "SAP": make_quote("SAP", 110.0),
                "AAPL": make_quote("AAPL", 300.0),
                "SHOP": make_quote("SHOP", 80.0),
            },
            rates={"USD": 2.0, "CAD": 4.0},
        )
        self.context = SyncContext()

    async def test_converts_writes_and_advances_timestamp(self):
        result = await run_price_cycle(self.context, self.store, self.provider, now_ms=NOW_MS)

        self.assertIs(result, self.context)
        prices = {h.symbol: h.price for h in self.store.holdings}
        self.assertEqual(prices, {"SAP": 110.0, "AAPL": 150.0, "SHOP": 20.0})
        self.assertEqual(self.context.get(ALL_STONKS), NOW_MS)
        self.assertEqual(self.store.timestamps[ALL_STONKS], NOW_MS // 1000)

    async def test_fx_failure_aborts_before_writes(self):
        self.provider.rates = ProviderError("forex down")

        await run_price_cycle(self.context, self.store, self.provider, now_ms=NOW_MS)

        self.assertEqual(self.store.price_writes, [])
        self.assertIsNone(self.context.get(ALL_STONKS))
        self.assertNotIn(ALL_STONKS, self.store.timestamps)

    async def test_one_bad_quote_voids_the_whole_batch(self):
        self.provider.quotes["AAPL"] = ValidationError("AAPL", "current")

        await run_price_cycle(self.context, self.store, self.provider, now_ms=NOW_MS)

        self.assertEqual(self.store.price_writes, [])
        self.assertIsNone(self.context.get(ALL_STONKS))

    async def test_holdings_read_failure_aborts(self):
        self.store.fail_holdings = True

        await run_price_cycle(self.context, self.store, self.provider, now_ms=NOW_MS)

        self.assertEqual(self.provider.calls, [])
        self.assertIsNone(self.context.get(ALL_STONKS))

    async def test_write_failure_does_not_affect_siblings_or_timestamp(self):
        self.store.failing_writes = {"AAPL"}

        await run_price_cycle(self.context, self.store, self.provider, now_ms=NOW_MS)

        self.assertEqual(len(self.store.price_writes), 3)
        prices = {h.symbol: h.price for h in self.store.holdings}
        self.assertEqual(prices, {"SAP": 110.0, "AAPL": 0.0, "SHOP": 20.0})
        self.assertEqual(self.context.get(ALL_STONKS), NOW_MS)

    async def test_timestamp_save_failure_still_writes_prices(self):
        self.store.fail_timestamps = True

        await run_price_cycle(self.context, self.store, self.provider, now_ms=NOW_MS)

        self.assertEqual(self.context.get(ALL_STONKS), NOW_MS)
        self.assertEqual(len(self.store.price_writes), 3)

    async def test_empty_portfolio_still_advances(self):
        self.store.holdings = []

        await run_price_cycle(self.context, self.store, self.provider, now_ms=NOW_MS)

        self.assertEqual(self.context.get(ALL_STONKS), NOW_MS)
        self.assertEqual(self.store.price_writes, [])

    async def test_failed_cycle_keeps_previous_timestamp(self):
        await run_price_cycle(self.context, self.store, self.provider, now_ms=NOW_MS)
        self.provider.rates = ProviderError("forex down")

        await run_price_cycle(self.context, self.store, self.provider, now_ms=NOW_MS + 300_000)

        self.assertEqual(self.context.get(ALL_STONKS), NOW_MS)
