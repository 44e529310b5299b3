"""
Preset registry for the range selector.

Declarative on purpose: each preset is a frozen record keyed by a short
code. Durations and default-window offsets are duration tokens (see
``tsengine.core.durations``) so month and year presets step by real
calendar months instead of fixed hour counts.

To add a preset: append a ``PresetDefinition`` to ``_PRESETS``. Keys must
stay unique and ``custom`` is reserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from tsengine.core.durations import shift
from tsengine.core.instants import elapsed
from tsengine.core.resolution import VALID_RESOLUTIONS
from tsengine.errors import UnknownPresetError


CUSTOM = "custom"
DEFAULT_PRESET = "1w"
FALLBACK_RESOLUTION = "day"


@dataclass(frozen=True)
class PresetDefinition:
    """One named window configuration (e.g. '1 Month')."""
    key: str
    label: str
    description: str
    duration: str | None                  # None only for the custom entry
    default_resolution: str
    allowed_resolutions: tuple[str, ...]
    window_back: str | None = None        # default window = now - back ...
    window_ahead: str | None = None       # ... now + ahead

    @property
    def is_custom(self) -> bool:
        return self.duration is None

    def default_window(self, now: datetime) -> tuple[datetime, datetime]:
        """Unsnapped default (start, end) around *now*."""
        if self.window_back is None or self.window_ahead is None:
            raise UnknownPresetError(f"Preset '{self.key}' has no default window")
        return shift(now, self.window_back, -1), shift(now, self.window_ahead, +1)


_PRESETS: tuple[PresetDefinition, ...] = (
    PresetDefinition(
        key="1w", label="1 Week", description="2 days past, 5 days future",
        duration="1W", default_resolution="day",
        allowed_resolutions=("day", "hour"),
        window_back="2D", window_ahead="5D",
    ),
    PresetDefinition(
        key="1m", label="1 Month", description="6 days past, 24 days future",
        duration="1M", default_resolution="day",
        allowed_resolutions=("day", "week", "hour"),
        window_back="6D", window_ahead="24D",
    ),
    PresetDefinition(
        key="3m", label="3 Months", description="2 weeks past, 10 weeks future",
        duration="3M", default_resolution="week",
        allowed_resolutions=("week", "day", "month"),
        window_back="2W", window_ahead="10W",
    ),
    PresetDefinition(
        key="6m", label="6 Months", description="2 months past, 4 months future",
        duration="6M", default_resolution="month",
        allowed_resolutions=("week", "month", "day"),
        window_back="2M", window_ahead="4M",
    ),
    PresetDefinition(
        key="1y", label="1 Year", description="2 months past, 10 months future",
        duration="12M", default_resolution="month",
        allowed_resolutions=("month", "week", "day"),
        window_back="2M", window_ahead="10M",
    ),
)

CUSTOM_PRESET = PresetDefinition(
    key=CUSTOM, label="Custom", description="Explicit from/to range",
    duration=None, default_resolution=FALLBACK_RESOLUTION,
    allowed_resolutions=VALID_RESOLUTIONS,
)

PRESETS: dict[str, PresetDefinition] = {p.key: p for p in _PRESETS}


def preset_keys() -> list[str]:
    """Registered preset codes, in display order."""
    return [p.key for p in _PRESETS]


def get_preset(key: str | None) -> PresetDefinition:
    """Return the preset for *key*; ``custom`` is not a duration preset."""
    preset = PRESETS.get(key or "")
    if preset is None:
        raise UnknownPresetError(f"Unknown preset: {key}")
    return preset


def is_known_selection(key: str | None) -> bool:
    return key == CUSTOM or key in PRESETS


def available_resolutions(key: str | None) -> tuple[str, ...]:
    preset = PRESETS.get(key or "")
    return preset.allowed_resolutions if preset else VALID_RESOLUTIONS


def default_resolution(key: str | None) -> str:
    preset = PRESETS.get(key or "")
    return preset.default_resolution if preset else FALLBACK_RESOLUTION


def preset_matching_span(start: datetime, end: datetime, now: datetime) -> str | None:
    """Key of the first preset whose default window is as long as [start, end].

    Lengths are compared to within one hour, which absorbs DST shifts.
    """
    span_hours = elapsed(start, end).total_seconds() / 3600.0
    for preset in _PRESETS:
        p_start, p_end = preset.default_window(now)
        preset_hours = elapsed(p_start, p_end).total_seconds() / 3600.0
        if abs(span_hours - preset_hours) < 1:
            return preset.key
    return None
