import unittest

from wsbstonks.candles.aggregator import aggregate_candle_rows, merge_series
from wsbstonks.models.market import CandlePoint, CandleSeries


def row(symbol, ts, base):
    return CandlePoint(symbol=symbol, timestamp=ts, open=base, high=base + 2, low=base - 2, close=base + 1)


class TestAggregateCandleRows(unittest.TestCase):
    def test_single_symbol_keeps_row_order_and_converts_to_ms(self):
        rows = [row("AAPL", 1_700_000_000 + i * 86_400, 100.0 + i) for i in range(5)]

        result = aggregate_candle_rows(rows)

        self.assertEqual(list(result), ["AAPL"])
        series = result["AAPL"]
        self.assertEqual(len(series), 5)
        for i, r in enumerate(rows):
            self.assertEqual(series.times[i], r.timestamp * 1000)
            self.assertEqual(series.opens[i], r.open)
            self.assertEqual(series.highs[i], r.high)
            self.assertEqual(series.lows[i], r.low)
            self.assertEqual(series.closes[i], r.close)

    def test_groups_by_key_not_adjacency(self):
        rows = [
            row("AAPL", 100, 1.0),
            row("MSFT", 100, 10.0),
            row("AAPL", 200, 2.0),
            row("MSFT", 200, 20.0),
            row("AAPL", 300, 3.0),
        ]

        result = aggregate_candle_rows(rows)

        self.assertEqual(result["AAPL"].times, [100_000, 200_000, 300_000])
        self.assertEqual(result["AAPL"].opens, [1.0, 2.0, 3.0])
        self.assertEqual(result["MSFT"].times, [100_000, 200_000])
        self.assertEqual(result["MSFT"].opens, [10.0, 20.0])

    def test_series_lists_have_equal_length(self):
        rows = [row("A", t, 1.0) for t in (1, 2, 3)] + [row("B", t, 1.0) for t in (1, 2)]
        for series in aggregate_candle_rows(rows).values():
            lengths = {len(series.opens), len(series.highs), len(series.lows), len(series.closes), len(series.times)}
            self.assertEqual(len(lengths), 1)

    def test_empty_input(self):
        self.assertEqual(aggregate_candle_rows([]), {})


class TestMergeSeries(unittest.TestCase):
    def test_appends_only_newer_fresh_candles(self):
        stored = CandleSeries(opens=[1, 2], highs=[1, 2], lows=[1, 2], closes=[1, 2], times=[1000, 2000])
        fresh = CandleSeries(opens=[9, 3, 4], highs=[9, 3, 4], lows=[9, 3, 4], closes=[9, 3, 4], times=[2000, 3000, 4000])

        merged = merge_series(stored, fresh)

        self.assertEqual(merged.times, [1000, 2000, 3000, 4000])
        self.assertEqual(merged.opens, [1, 2, 3, 4])
        # inputs untouched
        self.assertEqual(stored.times, [1000, 2000])

    def test_no_stored_history(self):
        fresh = CandleSeries(opens=[1], highs=[2], lows=[0], closes=[1.5], times=[1000])
        self.assertEqual(merge_series(None, fresh).to_dict(), fresh.to_dict())
        self.assertEqual(merge_series(CandleSeries(), fresh).to_dict(), fresh.to_dict())
