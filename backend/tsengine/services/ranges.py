"""
Range resolution: preset/custom selections -> resolution-snapped windows.

Every function takes the timezone (and, where relevant, the anchor) as an
explicit argument and never reads the clock, so replaying the same inputs
always yields the same window.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from tsengine.config.presets import get_preset
from tsengine.core.durations import shift, weeks_in
from tsengine.core.instants import as_zone, elapsed, parse_instant, resolve_zone, to_iso
from tsengine.core.resolution import ceil, floor, normalize, outside_calendar, parse_resolution
from tsengine.errors import InvalidRangeError, TimeSeriesError


DIRECTIONS = ("prev", "next")


@dataclass(frozen=True)
class Window:
    start: datetime
    end: datetime

    def to_dict(self) -> dict[str, str]:
        return {"startDate": to_iso(self.start), "endDate": to_iso(self.end)}


def coerce_instant(value: str | datetime, zone, *, field: str) -> datetime:
    if isinstance(value, datetime):
        return as_zone(value, zone)
    return parse_instant(value, zone, field=field)


def direction_sign(direction: str) -> int:
    if direction == "next":
        return 1
    if direction == "prev":
        return -1
    raise TimeSeriesError(f"Invalid direction: {direction!r}. Must be one of: prev, next")


# ── Preset windows ──────────────────────────────────────────────────────────

def compute_range_from_preset(
    preset_key: str,
    end_anchor: str | datetime,
    resolution: str,
    tz: str,
) -> Window:
    """Window of one preset duration ending at *end_anchor*.

    Week-denominated presets viewed by day are a special case: the window
    is exactly 7*N whole days, the last one being the anchor's day.
    Otherwise the calendar-shifted start is floored and the anchor is
    ceiled to *resolution*.
    """
    preset = get_preset(preset_key)
    resolution = parse_resolution(resolution)
    zone = resolve_zone(tz)
    anchor = coerce_instant(end_anchor, zone, field="endAnchor")

    weeks = weeks_in(preset.duration)
    if weeks and resolution == "day":
        days = 7 * weeks
        end_bucket_start = floor(anchor, "day")
        try:
            first_day = normalize(end_bucket_start - timedelta(days=days - 1))
        except (OverflowError, ValueError) as exc:
            raise outside_calendar(end_bucket_start) from exc
        start = floor(first_day, "day")
        return Window(start=start, end=ceil(end_bucket_start, "day"))

    semantic_start = shift(anchor, preset.duration, -1)
    return Window(start=floor(semantic_start, resolution), end=ceil(anchor, resolution))


def step_preset_anchor(
    preset_key: str,
    end_anchor: str | datetime,
    direction: str,
    tz: str,
) -> datetime:
    """Anchor moved by one calendar-aware preset duration."""
    preset = get_preset(preset_key)
    zone = resolve_zone(tz)
    anchor = coerce_instant(end_anchor, zone, field="endAnchor")
    return shift(anchor, preset.duration, direction_sign(direction))


# ── Custom windows ──────────────────────────────────────────────────────────

def compute_range_from_custom(
    from_value: str | datetime,
    to_value: str | datetime,
    resolution: str,
    tz: str,
) -> Window:
    """Snap an explicit [from, to] outward to *resolution* boundaries."""
    resolution = parse_resolution(resolution)
    zone = resolve_zone(tz)
    start = floor(coerce_instant(from_value, zone, field="from"), resolution)
    end = ceil(coerce_instant(to_value, zone, field="to"), resolution)
    if elapsed(start, end) <= timedelta(0):
        raise InvalidRangeError("Custom range must end after it starts")
    return Window(start=start, end=end)


def step_custom_bounds(
    from_value: str | datetime,
    to_value: str | datetime,
    direction: str,
    tz: str,
) -> tuple[datetime, datetime]:
    """Shift [from, to] by its own length.

    A custom span has no calendar meaning, so the shift is a fixed amount
    of absolute time.
    """
    zone = resolve_zone(tz)
    range_from = coerce_instant(from_value, zone, field="from")
    range_to = coerce_instant(to_value, zone, field="to")
    offset = elapsed(range_from, range_to) * direction_sign(direction)
    return _move(range_from, offset), _move(range_to, offset)


def recenter_custom_bounds(
    from_value: str | datetime,
    to_value: str | datetime,
    now: datetime,
    tz: str,
) -> tuple[datetime, datetime]:
    """Keep the span of [from, to] but make it end at *now*."""
    zone = resolve_zone(tz)
    span = elapsed(
        coerce_instant(from_value, zone, field="from"),
        coerce_instant(to_value, zone, field="to"),
    )
    new_to = as_zone(now, zone)
    return _move(new_to, -span), new_to


def _move(ts: datetime, offset: timedelta) -> datetime:
    try:
        return (ts.astimezone(timezone.utc) + offset).astimezone(ts.tzinfo)
    except (OverflowError, ValueError) as exc:
        raise outside_calendar(ts) from exc
