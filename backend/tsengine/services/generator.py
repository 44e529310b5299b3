"""
Synthetic hourly series.

Stands in for a real backing store: any hourly timestamp maps to a
plausible integer in roughly [30, 1020]. The value depends only on the
timestamp (epoch milliseconds plus its wall-clock hour), never on the
clock or on mutable state, so the same timestamp always yields the same
number.
"""

from __future__ import annotations

import math
from datetime import datetime

from tsengine.core.instants import to_epoch_ms
from tsengine.core.resolution import ensure_aware


BASE_MIN = 50.0
BASE_SPAN = 950.0
DAY_TREND_AMPLITUDE = 20.0

_SEED_SCALE = 0.0001
_NOISE_SCALE = 10000.0


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def value(timestamp: datetime) -> int:
    """Deterministic value for *timestamp*."""
    ts = ensure_aware(timestamp)
    seed = to_epoch_ms(ts)

    x = math.sin(seed * _SEED_SCALE) * _NOISE_SCALE
    x = x - math.floor(x)
    base_value = BASE_MIN + x * BASE_SPAN

    # Diurnal cycle on the timestamp's own wall clock.
    day_trend = math.sin((ts.hour / 24.0) * math.pi * 2.0) * DAY_TREND_AMPLITUDE

    return round_half_up(base_value + day_trend)
