from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo
import unittest

from tsengine.services import generator


class TestGenerator(unittest.TestCase):
    def test_same_timestamp_gives_same_value(self) -> None:
        ts = datetime(2024, 1, 1, 7, tzinfo=timezone.utc)
        self.assertEqual(generator.value(ts), generator.value(ts))
        self.assertEqual(
            generator.value(ts),
            generator.value(datetime(2024, 1, 1, 7, tzinfo=timezone.utc)),
        )

    def test_values_stay_within_base_range_plus_trend(self) -> None:
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for h in range(24 * 60):
            v = generator.value(start + timedelta(hours=h))
            self.assertIsInstance(v, int)
            self.assertGreaterEqual(v, 30)
            self.assertLessEqual(v, 1020)

    def test_series_is_not_constant(self) -> None:
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        values = {generator.value(start + timedelta(hours=h)) for h in range(48)}
        self.assertGreater(len(values), 10)

    def test_naive_timestamp_is_read_as_utc(self) -> None:
        naive = datetime(2024, 3, 10, 15)
        self.assertEqual(
            generator.value(naive),
            generator.value(naive.replace(tzinfo=timezone.utc)),
        )

    def test_day_trend_follows_local_wall_hour(self) -> None:
        # Same instant: 00:00 in UTC (trend 0) vs 05:30 in Kolkata (hour 5,
        # trend 20*sin(75deg) ~ 19.3). Only the trend term differs.
        utc = datetime(2024, 1, 1, 0, tzinfo=timezone.utc)
        kolkata = utc.astimezone(ZoneInfo("Asia/Kolkata"))
        diff = generator.value(kolkata) - generator.value(utc)
        self.assertIn(diff, (19, 20))

    def test_round_half_up(self) -> None:
        self.assertEqual(generator.round_half_up(10.5), 11)
        self.assertEqual(generator.round_half_up(11.5), 12)
        self.assertEqual(generator.round_half_up(10.49), 10)


if __name__ == "__main__":
    unittest.main()
