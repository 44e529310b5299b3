"""
Hourly sampling and aggregation into resolution buckets.

Pipeline per request:
  1. validate_request()  raw strings -> QueryWindow (or a TimeSeriesError)
  2. sample_hourly()     one TimePoint per absolute hour in [floor(start), end]
  3. aggregate()         group by bucket label, rounded mean per group

Cost is linear in the number of hours in the window. Nothing here reads
the clock or keeps state between calls, so concurrent requests are safe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import pandas as pd

from tsengine.core.instants import elapsed, parse_instant, resolve_zone, to_epoch_ms, to_iso
from tsengine.core.resolution import (
    VALID_RESOLUTIONS,
    bucket_label,
    ceil,
    ensure_aware,
    floor,
    parse_resolution,
)
from tsengine.errors import (
    InvalidRangeError,
    MissingParameterError,
    UnsupportedResolutionError,
)
from tsengine.services import generator

_log = logging.getLogger(__name__)

_ONE_HOUR = timedelta(hours=1)
_ZERO = timedelta(0)


@dataclass(frozen=True)
class TimePoint:
    timestamp: datetime
    value: int


@dataclass(frozen=True)
class Bucket:
    timestamp: datetime     # resolution floor of every contributing sample
    value: int              # rounded mean of the samples
    label: str              # grouping key, e.g. "2024-W24"
    samples: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": to_iso(self.timestamp),
            "value": self.value,
            "label": self.label,
        }


@dataclass(frozen=True)
class QueryWindow:
    """Validated input of one aggregation request."""
    start: datetime
    end: datetime
    resolution: str
    timezone: str


@dataclass(frozen=True)
class AggregationResult:
    window: QueryWindow
    buckets: list[Bucket]
    total_hourly_points: int

    @property
    def metadata(self) -> dict[str, Any]:
        return {
            "startDate": to_iso(self.window.start),
            "endDate": to_iso(self.window.end),
            "resolution": self.window.resolution,
            "totalBuckets": len(self.buckets),
            "totalHourlyPoints": self.total_hourly_points,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "buckets": [b.to_dict() for b in self.buckets],
            "metadata": self.metadata,
        }


# ── Validation ──────────────────────────────────────────────────────────────

def validate_request(
    start_date: str | None,
    end_date: str | None,
    resolution: str | None,
    timezone_name: str,
) -> QueryWindow:
    """Apply the request contract to raw query-string values."""
    if not start_date or not end_date or not resolution:
        raise MissingParameterError(
            "Missing required parameters: startDate, endDate, resolution"
        )

    zone = resolve_zone(timezone_name)
    start = parse_instant(start_date, zone, field="startDate")
    end = parse_instant(end_date, zone, field="endDate")

    if elapsed(start, end) <= _ZERO:
        raise InvalidRangeError("startDate must be before endDate")

    return QueryWindow(
        start=start,
        end=end,
        resolution=parse_resolution(resolution),
        timezone=zone.key,
    )


def align_window(start: datetime, end: datetime, resolution: str) -> tuple[datetime, datetime]:
    """Snap a loose window outward to *resolution* boundaries."""
    return floor(start, resolution), ceil(end, resolution)


# ── Sampling & aggregation ──────────────────────────────────────────────────

def sample_hourly(start: datetime, end: datetime) -> list[TimePoint]:
    """One generated sample per absolute hour from floor(start, hour) to end inclusive.

    Steps are taken in UTC so DST days yield 23 or 25 samples; each sample
    is presented in the zone of *start*.
    """
    start = ensure_aware(start)
    end = ensure_aware(end)
    if elapsed(start, end) <= _ZERO:
        raise InvalidRangeError("startDate must be before endDate")

    zone = start.tzinfo
    current = floor(start, "hour").astimezone(timezone.utc)
    stop = end.astimezone(timezone.utc)

    points: list[TimePoint] = []
    while current <= stop:
        local = current.astimezone(zone)
        points.append(TimePoint(timestamp=local, value=generator.value(local)))
        # Stop before stepping past the last representable hour.
        if stop - current < _ONE_HOUR:
            break
        current = current + _ONE_HOUR
    return points


def aggregate_points(points: list[TimePoint], resolution: str) -> list[Bucket]:
    """Fold hourly samples into buckets, ordered by bucket start."""
    if resolution not in VALID_RESOLUTIONS:
        raise UnsupportedResolutionError(f"Unsupported resolution: {resolution!r}")
    if not points:
        return []

    labels = [bucket_label(p.timestamp, resolution) for p in points]

    # Samples arrive in ascending order, so the first floor seen per label is
    # the earliest. Labels only repeat with different floors inside a DST
    # fall-back hour, which is folded into the first occurrence.
    floors: dict[str, datetime] = {}
    for label, point in zip(labels, points):
        if label not in floors:
            floors[label] = floor(point.timestamp, resolution)

    frame = pd.DataFrame({"label": labels, "value": [p.value for p in points]})
    stats = frame.groupby("label", sort=False)["value"].agg(["mean", "size"])

    buckets = [
        Bucket(
            timestamp=floors[label],
            value=generator.round_half_up(float(row["mean"])),
            label=str(label),
            samples=int(row["size"]),
        )
        for label, row in stats.iterrows()
    ]
    return sorted(buckets, key=lambda b: to_epoch_ms(b.timestamp))


def aggregate(start: datetime, end: datetime, resolution: str) -> list[Bucket]:
    """Buckets for the window [start, end] at *resolution*."""
    return aggregate_points(sample_hourly(start, end), resolution)


def run_query(window: QueryWindow) -> AggregationResult:
    points = sample_hourly(window.start, window.end)
    buckets = aggregate_points(points, window.resolution)
    _log.debug(
        "Aggregated %d hourly points into %d %s buckets",
        len(points), len(buckets), window.resolution,
    )
    return AggregationResult(window=window, buckets=buckets, total_hourly_points=len(points))


def locate_bucket(buckets: list[Bucket], now: datetime, window: QueryWindow) -> int | None:
    """Index of the bucket containing *now*, or None when *now* is outside the window."""
    now = ensure_aware(now).astimezone(window.start.tzinfo)
    now_ms = to_epoch_ms(now)
    if now_ms < to_epoch_ms(window.start) or now_ms > to_epoch_ms(window.end):
        return None
    target_ms = to_epoch_ms(floor(now, window.resolution))
    for idx, bucket in enumerate(buckets):
        if to_epoch_ms(bucket.timestamp) == target_ms:
            return idx
    return None
