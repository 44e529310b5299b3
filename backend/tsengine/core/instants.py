"""Parsing and formatting of zoned instants."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.parser import isoparse

from tsengine.errors import InvalidInstantError, InvalidTimezoneError, MissingParameterError


def resolve_zone(name: str | None) -> ZoneInfo:
    """Return the tz database zone for *name* ('UTC', 'Europe/Madrid', ...)."""
    if name is None or not str(name).strip():
        raise MissingParameterError("Missing required parameter: timezone")
    try:
        return ZoneInfo(str(name).strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidTimezoneError(f"Unknown timezone: {name}") from exc


def parse_instant(value: str | None, zone: ZoneInfo, *, field: str = "date") -> datetime:
    """Parse an ISO-8601 string and express it in *zone*.

    Strings without an offset are wall times in *zone*; strings with an
    offset (or 'Z') are converted to *zone*.
    """
    if value is None or not str(value).strip():
        raise MissingParameterError(f"Missing required parameter: {field}")
    text = str(value).strip()
    try:
        parsed = isoparse(text)
        if parsed.tzinfo is None:
            local = parsed.replace(tzinfo=zone)
            # Wall times inside a DST gap resolve forward, as a calendar would.
            return local.astimezone(timezone.utc).astimezone(zone)
        return parsed.astimezone(zone)
    except (ValueError, OverflowError) as exc:
        raise InvalidInstantError(f"Invalid {field}: {text}") from exc


def as_zone(ts: datetime, zone: ZoneInfo) -> datetime:
    if ts.tzinfo is None:
        return parse_instant(ts.isoformat(), zone)
    return ts.astimezone(zone)


def to_iso(ts: datetime) -> str:
    """ISO-8601 with millisecond precision and explicit offset."""
    return ts.isoformat(timespec="milliseconds")


def to_epoch_ms(ts: datetime) -> int:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    delta = ts - datetime(1970, 1, 1, tzinfo=timezone.utc)
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def elapsed(start: datetime, end: datetime) -> timedelta:
    """Absolute time from *start* to *end*.

    Subtracting two datetimes that share a tzinfo compares wall clocks and
    ignores DST offsets, so both sides go through UTC first.
    """
    return end.astimezone(timezone.utc) - start.astimezone(timezone.utc)
