"""Duration tokens ('2D', '1W', '3M', '1Y') and calendar-aware shifting."""

from __future__ import annotations

import re
from datetime import datetime

from dateutil.relativedelta import relativedelta

from tsengine.core.resolution import ensure_aware, normalize, outside_calendar


_TOKEN_RE = re.compile(r"^(\d+)([HDWMY])$")


def parse_duration_token(value: object) -> tuple[int, str]:
    """Parse a token like '3M' into ``(3, 'M')``.

    Units: H (hours), D (days), W (weeks), M (months), Y (years).
    """
    token = str(value).strip().upper().replace(" ", "")
    m = _TOKEN_RE.match(token)
    if not m:
        raise ValueError(f"Unsupported duration token: {value!r}")
    n = int(m.group(1))
    if n <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return n, m.group(2)


def to_relativedelta(duration: tuple[int, str]) -> relativedelta:
    n, unit = duration
    if unit == "H":
        return relativedelta(hours=n)
    if unit == "D":
        return relativedelta(days=n)
    if unit == "W":
        return relativedelta(weeks=n)
    if unit == "M":
        return relativedelta(months=n)
    if unit == "Y":
        return relativedelta(years=n)
    raise ValueError(f"Unsupported duration unit: {unit!r}")


def shift(ts: datetime, token: str, sign: int = 1) -> datetime:
    """Move *ts* by *token* on the zoned wall clock (``sign`` = +1 or -1).

    Month and year steps clamp the day of month to the target month's
    length: 2024-03-31 minus '1M' is 2024-02-29 and 2023-03-31 minus '1M'
    is 2023-02-28. Because of that clamp, a '-1M' followed by '+1M' only
    returns to the starting day when it is the 28th or earlier.
    """
    delta = to_relativedelta(parse_duration_token(token))
    ts = ensure_aware(ts)
    try:
        moved = ts + delta if sign >= 0 else ts - delta
        return normalize(moved)
    except (OverflowError, ValueError) as exc:
        raise outside_calendar(ts) from exc


def weeks_in(token: str) -> int | None:
    """Number of weeks for a week-denominated token, otherwise None."""
    n, unit = parse_duration_token(token)
    return n if unit == "W" else None
