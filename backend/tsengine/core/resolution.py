"""Resolution units: validation, floor/ceiling snapping and bucket labels.

All snapping happens on the wall clock of the timestamp's own zone, the
same way a calendar user reads it. Week units start on Monday (ISO 8601).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from dateutil.relativedelta import relativedelta

from tsengine.errors import (
    InvalidRangeError,
    InvalidResolutionError,
    UnsupportedResolutionError,
)


VALID_RESOLUTIONS: tuple[str, ...] = ("hour", "day", "week", "month", "year")

_ONE_MS = timedelta(milliseconds=1)

# Calendar step used to reach the next unit boundary (hour is absolute).
_NEXT_UNIT = {
    "day": relativedelta(days=1),
    "week": relativedelta(weeks=1),
    "month": relativedelta(months=1),
    "year": relativedelta(years=1),
}


def parse_resolution(value: object) -> str:
    """Return *value* as a validated resolution unit."""
    token = str(value).strip() if value is not None else ""
    if token not in VALID_RESOLUTIONS:
        raise InvalidResolutionError(
            f"Invalid resolution. Must be one of: {', '.join(VALID_RESOLUTIONS)}"
        )
    return token


def ensure_aware(ts: datetime) -> datetime:
    """Naive datetimes are read as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def normalize(ts: datetime) -> datetime:
    """Round-trip through UTC so wall times inside a DST gap become real instants."""
    ts = ensure_aware(ts)
    return ts.astimezone(timezone.utc).astimezone(ts.tzinfo)


def outside_calendar(ts: datetime) -> InvalidRangeError:
    """Error for arithmetic that leaves datetime's year 1..9999 range."""
    return InvalidRangeError(f"Date {ts.isoformat()} is outside the supported calendar")


def floor(ts: datetime, resolution: str) -> datetime:
    """Start of the *resolution* unit that contains *ts*."""
    ts = ensure_aware(ts)
    try:
        return _floor(ts, resolution)
    except (OverflowError, ValueError) as exc:
        raise outside_calendar(ts) from exc


def _floor(ts: datetime, resolution: str) -> datetime:
    if resolution == "hour":
        return ts.replace(minute=0, second=0, microsecond=0)
    midnight = ts.replace(hour=0, minute=0, second=0, microsecond=0, fold=0)
    if resolution == "day":
        return normalize(midnight)
    if resolution == "week":
        return normalize(midnight - timedelta(days=midnight.weekday()))
    if resolution == "month":
        return normalize(midnight.replace(day=1))
    if resolution == "year":
        return normalize(midnight.replace(month=1, day=1))
    raise UnsupportedResolutionError(f"Unsupported resolution: {resolution!r}")


def next_boundary(ts: datetime, resolution: str) -> datetime:
    """Start of the unit following the one that contains *ts*."""
    start = floor(ts, resolution)
    try:
        if resolution == "hour":
            nxt = start.astimezone(timezone.utc) + timedelta(hours=1)
            return nxt.astimezone(start.tzinfo)
        return normalize(start + _NEXT_UNIT[resolution])
    except (OverflowError, ValueError) as exc:
        raise outside_calendar(start) from exc


def ceil(ts: datetime, resolution: str) -> datetime:
    """Last millisecond of the *resolution* unit that contains *ts*."""
    nxt = next_boundary(ts, resolution)
    try:
        return (nxt.astimezone(timezone.utc) - _ONE_MS).astimezone(nxt.tzinfo)
    except (OverflowError, ValueError) as exc:
        raise outside_calendar(nxt) from exc


def bucket_label(ts: datetime, resolution: str) -> str:
    """Grouping key of the bucket *ts* belongs to."""
    if resolution == "hour":
        return ts.strftime("%Y-%m-%d %H:00")
    if resolution == "day":
        return ts.strftime("%Y-%m-%d")
    if resolution == "week":
        # ISO week-numbering year, so 2024-12-30 is "2025-W01" like 2025-01-01.
        iso_year, iso_week, _ = ts.isocalendar()
        return f"{iso_year:04d}-W{iso_week:02d}"
    if resolution == "month":
        return ts.strftime("%Y-%m")
    if resolution == "year":
        return ts.strftime("%Y")
    raise UnsupportedResolutionError(f"Unsupported resolution: {resolution!r}")


def display_label(ts: datetime, resolution: str) -> str:
    """Short human label for chart axes and range summaries."""
    if resolution == "hour":
        return ts.strftime("%b %d %H:%M")
    if resolution in ("day", "week"):
        return ts.strftime("%b %d")
    if resolution == "month":
        return ts.strftime("%b %Y")
    if resolution == "year":
        return ts.strftime("%Y")
    raise UnsupportedResolutionError(f"Unsupported resolution: {resolution!r}")
