"""Hourly sampling + aggregation into resolution buckets."""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo
import unittest

from tsengine.core.instants import to_epoch_ms, to_iso
from tsengine.core.resolution import bucket_label
from tsengine.errors import (
    InvalidInstantError,
    InvalidRangeError,
    InvalidResolutionError,
    InvalidTimezoneError,
    MissingParameterError,
    UnsupportedResolutionError,
)
from tsengine.services import generator
from tsengine.services.bucketing import (
    aggregate,
    aggregate_points,
    align_window,
    locate_bucket,
    run_query,
    sample_hourly,
    validate_request,
)

UTC = timezone.utc
MADRID = ZoneInfo("Europe/Madrid")


def _ascending(buckets) -> bool:
    stamps = [to_epoch_ms(b.timestamp) for b in buckets]
    return all(a < b for a, b in zip(stamps, stamps[1:]))


class TestHourlyScenario(unittest.TestCase):
    def test_one_day_at_hour_resolution(self) -> None:
        window = validate_request(
            "2024-01-01T00:00:00Z", "2024-01-01T23:00:00Z", "hour", "UTC",
        )
        result = run_query(window)

        self.assertEqual(len(result.buckets), 24)
        self.assertEqual(result.total_hourly_points, 24)
        for hour, bucket in enumerate(result.buckets):
            expected_ts = datetime(2024, 1, 1, hour, tzinfo=UTC)
            self.assertEqual(bucket.timestamp, expected_ts)
            self.assertEqual(bucket.samples, 1)
            self.assertEqual(bucket.value, generator.value(expected_ts))
        self.assertEqual(result.buckets[0].label, "2024-01-01 00:00")

    def test_metadata_shape(self) -> None:
        window = validate_request(
            "2024-01-01T00:00:00Z", "2024-01-01T23:00:00Z", "hour", "UTC",
        )
        meta = run_query(window).metadata
        self.assertEqual(meta, {
            "startDate": "2024-01-01T00:00:00.000+00:00",
            "endDate": "2024-01-01T23:00:00.000+00:00",
            "resolution": "hour",
            "totalBuckets": 24,
            "totalHourlyPoints": 24,
        })


class TestAggregation(unittest.TestCase):
    def test_every_sample_lands_in_exactly_one_bucket(self) -> None:
        start = datetime(2024, 5, 20, 7, 30, tzinfo=UTC)
        end = datetime(2024, 8, 3, 18, tzinfo=UTC)
        points = sample_hourly(start, end)

        for res in ("hour", "day", "week", "month", "year"):
            buckets = aggregate_points(points, res)
            self.assertEqual(sum(b.samples for b in buckets), len(points))
            distinct = {bucket_label(p.timestamp, res) for p in points}
            self.assertEqual(len(buckets), len(distinct))
            self.assertEqual({b.label for b in buckets}, distinct)
            self.assertTrue(_ascending(buckets))

    def test_sampling_starts_at_hour_floor_and_includes_end(self) -> None:
        points = sample_hourly(
            datetime(2024, 1, 1, 0, 40, tzinfo=UTC),
            datetime(2024, 1, 1, 3, 0, tzinfo=UTC),
        )
        self.assertEqual(
            [p.timestamp.hour for p in points], [0, 1, 2, 3],
        )

    def test_day_buckets_average_24_samples(self) -> None:
        buckets = aggregate(
            datetime(2024, 6, 10, tzinfo=UTC),
            datetime(2024, 6, 16, 23, 59, 59, 999000, tzinfo=UTC),
            "day",
        )
        self.assertEqual([b.label for b in buckets], [f"2024-06-{d}" for d in range(10, 17)])
        self.assertTrue(all(b.samples == 24 for b in buckets))

        first_day = [
            generator.value(datetime(2024, 6, 10, h, tzinfo=UTC)) for h in range(24)
        ]
        self.assertEqual(buckets[0].value, generator.round_half_up(sum(first_day) / 24))

    def test_weekly_buckets_across_new_year(self) -> None:
        buckets = aggregate(
            datetime(2024, 12, 23, tzinfo=UTC),
            datetime(2025, 1, 12, 23, 59, 59, 999000, tzinfo=UTC),
            "week",
        )
        self.assertEqual([b.label for b in buckets], ["2024-W52", "2025-W01", "2025-W02"])
        self.assertEqual(
            [b.timestamp.date().isoformat() for b in buckets],
            ["2024-12-23", "2024-12-30", "2025-01-06"],
        )
        self.assertTrue(all(b.samples == 168 for b in buckets))

    def test_monthly_and_yearly_buckets(self) -> None:
        start = datetime(2023, 11, 15, tzinfo=UTC)
        end = datetime(2024, 2, 10, tzinfo=UTC)
        months = aggregate(start, end, "month")
        self.assertEqual([b.label for b in months], ["2023-11", "2023-12", "2024-01", "2024-02"])
        self.assertEqual(months[0].timestamp, datetime(2023, 11, 1, tzinfo=UTC))
        years = aggregate(start, end, "year")
        self.assertEqual([b.label for b in years], ["2023", "2024"])

    def test_dst_days_have_23_and_25_samples(self) -> None:
        spring = aggregate(
            datetime(2024, 3, 31, tzinfo=MADRID),
            datetime(2024, 3, 31, 23, 59, 59, 999000, tzinfo=MADRID),
            "day",
        )
        self.assertEqual(len(spring), 1)
        self.assertEqual(spring[0].samples, 23)

        points = sample_hourly(
            datetime(2024, 10, 27, tzinfo=MADRID),
            datetime(2024, 10, 27, 23, 59, 59, 999000, tzinfo=MADRID),
        )
        self.assertEqual(len(points), 25)

        hours = aggregate_points(points, "hour")
        self.assertEqual(len(hours), 24)
        repeated = [b for b in hours if b.label == "2024-10-27 02:00"]
        self.assertEqual(repeated[0].samples, 2)
        self.assertEqual(to_iso(repeated[0].timestamp), "2024-10-27T02:00:00.000+02:00")
        self.assertTrue(_ascending(hours))

    def test_sampling_reaches_last_hour_of_calendar(self) -> None:
        points = sample_hourly(
            datetime(9999, 12, 31, 20, tzinfo=UTC),
            datetime(9999, 12, 31, 23, tzinfo=UTC),
        )
        self.assertEqual([p.timestamp.hour for p in points], [20, 21, 22, 23])
        self.assertEqual(len(aggregate_points(points, "year")), 1)

    def test_samples_follow_zone_of_start(self) -> None:
        points = sample_hourly(
            datetime(2024, 6, 1, tzinfo=MADRID),
            datetime(2024, 6, 1, 2, tzinfo=MADRID),
        )
        self.assertEqual([to_iso(p.timestamp)[:19] for p in points], [
            "2024-06-01T00:00:00", "2024-06-01T01:00:00", "2024-06-01T02:00:00",
        ])

    def test_invalid_window_is_rejected(self) -> None:
        a = datetime(2024, 1, 2, tzinfo=UTC)
        b = datetime(2024, 1, 1, tzinfo=UTC)
        with self.assertRaises(InvalidRangeError):
            aggregate(a, b, "day")
        with self.assertRaises(InvalidRangeError):
            aggregate(a, a, "day")

    def test_unsupported_resolution(self) -> None:
        with self.assertRaises(UnsupportedResolutionError):
            aggregate(
                datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 1, 2, tzinfo=UTC), "quarter",
            )

    def test_empty_points(self) -> None:
        self.assertEqual(aggregate_points([], "day"), [])


class TestValidateRequest(unittest.TestCase):
    def test_missing_parameters(self) -> None:
        for args in (
            (None, "2024-01-02", "day"),
            ("2024-01-01", "", "day"),
            ("2024-01-01", "2024-01-02", None),
        ):
            with self.assertRaises(MissingParameterError):
                validate_request(*args, "UTC")

    def test_unparsable_dates(self) -> None:
        with self.assertRaises(InvalidInstantError) as ctx:
            validate_request("yesterday", "2024-01-02", "day", "UTC")
        self.assertIn("startDate", str(ctx.exception))
        with self.assertRaises(InvalidInstantError) as ctx:
            validate_request("2024-01-01", "2024-02-30", "day", "UTC")
        self.assertIn("endDate", str(ctx.exception))

    def test_start_must_precede_end(self) -> None:
        with self.assertRaises(InvalidRangeError):
            validate_request("2024-01-02", "2024-01-01", "day", "UTC")
        with self.assertRaises(InvalidRangeError):
            validate_request("2024-01-01T00:00:00Z", "2024-01-01T01:00:00+01:00", "day", "UTC")

    def test_bad_resolution_and_zone(self) -> None:
        with self.assertRaises(InvalidResolutionError):
            validate_request("2024-01-01", "2024-01-02", "weekly", "UTC")
        with self.assertRaises(InvalidTimezoneError):
            validate_request("2024-01-01", "2024-01-02", "day", "Nowhere/Land")

    def test_offsets_are_converted_to_request_zone(self) -> None:
        window = validate_request("2024-06-01T00:00:00+02:00", "2024-06-02T00:00:00+02:00", "day", "UTC")
        self.assertEqual(window.start, datetime(2024, 5, 31, 22, tzinfo=UTC))
        self.assertEqual(window.timezone, "UTC")


class TestHelpers(unittest.TestCase):
    def test_align_window(self) -> None:
        start, end = align_window(
            datetime(2024, 6, 12, 9, 15, tzinfo=UTC),
            datetime(2024, 6, 19, 3, tzinfo=UTC),
            "week",
        )
        self.assertEqual(start, datetime(2024, 6, 10, tzinfo=UTC))
        self.assertEqual(end, datetime(2024, 6, 23, 23, 59, 59, 999000, tzinfo=UTC))

    def test_locate_bucket(self) -> None:
        window = validate_request(
            "2024-06-10T00:00:00Z", "2024-06-16T23:59:59.999Z", "day", "UTC",
        )
        buckets = run_query(window).buckets
        self.assertEqual(locate_bucket(buckets, datetime(2024, 6, 12, 15, tzinfo=UTC), window), 2)
        self.assertIsNone(locate_bucket(buckets, datetime(2024, 6, 20, tzinfo=UTC), window))


if __name__ == "__main__":
    unittest.main()
