"""
Navigation state for the range selector.

States:
  no-selection       preset is None (initial, until a default is applied)
  preset-active      preset is a registry key; window derived from anchor
  custom-active      preset == "custom"; window derived from [from, to]

Each transition takes the current state plus explicit inputs (``now``,
timezone) and returns a new frozen state; nothing is mutated in place.
``to_params`` / ``from_params`` flatten a state into the string mapping a
caller keeps in shareable URL state and rebuild the identical window from it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import datetime

from tsengine.config.presets import (
    CUSTOM,
    DEFAULT_PRESET,
    PRESETS,
    available_resolutions,
    default_resolution,
    get_preset,
    is_known_selection,
    preset_matching_span,
)
from tsengine.core.instants import as_zone, elapsed, parse_instant, resolve_zone, to_iso
from tsengine.core.resolution import parse_resolution
from tsengine.errors import InvalidRangeError, InvalidResolutionError
from tsengine.services import ranges


NO_SELECTION = "no-selection"
PRESET_ACTIVE = "preset-active"
CUSTOM_ACTIVE = "custom-active"


@dataclass(frozen=True)
class NavigationState:
    preset: str | None
    anchor: datetime | None
    resolution: str
    range_from: datetime | None = None
    range_to: datetime | None = None
    start: datetime | None = None
    end: datetime | None = None

    @property
    def kind(self) -> str:
        if self.preset == CUSTOM:
            return CUSTOM_ACTIVE
        if self.preset is None:
            return NO_SELECTION
        return PRESET_ACTIVE

    @property
    def has_custom_bounds(self) -> bool:
        return self.preset == CUSTOM and self.range_from is not None and self.range_to is not None

    @property
    def available_resolutions(self) -> tuple[str, ...]:
        return available_resolutions(self.preset)


def initial_state(resolution: str | None = None) -> NavigationState:
    return NavigationState(
        preset=None,
        anchor=None,
        resolution=parse_resolution(resolution) if resolution else default_resolution(DEFAULT_PRESET),
    )


def ensure_default(state: NavigationState, now: datetime, tz: str) -> NavigationState:
    """Apply the default preset once, when no window has been chosen yet."""
    if state.start is not None and state.end is not None:
        return state
    return select_preset(state, DEFAULT_PRESET, now, tz)


def select_preset(state: NavigationState, key: str, now: datetime, tz: str) -> NavigationState:
    """Switch to preset *key* at its default resolution, anchored on its default window end."""
    preset = get_preset(key)
    zone = resolve_zone(tz)
    _, anchor = preset.default_window(as_zone(now, zone))
    window = ranges.compute_range_from_preset(key, anchor, preset.default_resolution, tz)
    return NavigationState(
        preset=key,
        anchor=anchor,
        resolution=preset.default_resolution,
        start=window.start,
        end=window.end,
    )


def apply_custom(
    state: NavigationState,
    from_value: str | datetime,
    to_value: str | datetime,
    tz: str,
) -> NavigationState:
    """Switch to an explicit range; rejected unless from < to."""
    zone = resolve_zone(tz)
    range_from = ranges.coerce_instant(from_value, zone, field="from")
    range_to = ranges.coerce_instant(to_value, zone, field="to")
    if elapsed(range_from, range_to).total_seconds() <= 0:
        raise InvalidRangeError("Custom range requires from < to")

    window = ranges.compute_range_from_custom(range_from, range_to, state.resolution, tz)
    return NavigationState(
        preset=CUSTOM,
        anchor=range_to,
        resolution=state.resolution,
        range_from=range_from,
        range_to=range_to,
        start=window.start,
        end=window.end,
    )


def step(state: NavigationState, direction: str, tz: str) -> NavigationState:
    """Move the window back ("prev") or forward ("next") by one increment."""
    ranges.direction_sign(direction)

    if state.has_custom_bounds:
        new_from, new_to = ranges.step_custom_bounds(state.range_from, state.range_to, direction, tz)
        window = ranges.compute_range_from_custom(new_from, new_to, state.resolution, tz)
        return replace(
            state, range_from=new_from, range_to=new_to, anchor=new_to,
            start=window.start, end=window.end,
        )

    if state.kind == PRESET_ACTIVE and state.anchor is not None:
        anchor = ranges.step_preset_anchor(state.preset, state.anchor, direction, tz)
        window = ranges.compute_range_from_preset(state.preset, anchor, state.resolution, tz)
        return replace(state, anchor=anchor, start=window.start, end=window.end)

    return state


def jump_to_today(state: NavigationState, now: datetime, tz: str) -> NavigationState:
    """Re-anchor the window on *now*.

    Custom ranges keep their length and end at *now*. From no-selection the
    default preset is selected, keeping the current resolution when that
    preset allows it.
    """
    zone = resolve_zone(tz)
    now = as_zone(now, zone)

    if state.has_custom_bounds:
        new_from, new_to = ranges.recenter_custom_bounds(state.range_from, state.range_to, now, tz)
        window = ranges.compute_range_from_custom(new_from, new_to, state.resolution, tz)
        return replace(
            state, range_from=new_from, range_to=new_to, anchor=new_to,
            start=window.start, end=window.end,
        )

    if state.kind == PRESET_ACTIVE:
        key, resolution = state.preset, state.resolution
    else:
        key = DEFAULT_PRESET
        resolution = state.resolution
        if resolution not in available_resolutions(key):
            resolution = default_resolution(key)

    window = ranges.compute_range_from_preset(key, now, resolution, tz)
    return replace(
        state, preset=key, anchor=now, resolution=resolution,
        start=window.start, end=window.end,
    )


def change_resolution(state: NavigationState, resolution: str, tz: str) -> NavigationState:
    """Recompute the window for *resolution* under the same anchor or range."""
    resolution = parse_resolution(resolution)

    if state.has_custom_bounds:
        window = ranges.compute_range_from_custom(state.range_from, state.range_to, resolution, tz)
        return replace(state, resolution=resolution, start=window.start, end=window.end)

    if state.kind == PRESET_ACTIVE and state.anchor is not None:
        allowed = available_resolutions(state.preset)
        if resolution not in allowed:
            raise InvalidResolutionError(
                f"Resolution '{resolution}' is not available for preset '{state.preset}'. "
                f"Must be one of: {', '.join(allowed)}"
            )
        window = ranges.compute_range_from_preset(state.preset, state.anchor, resolution, tz)
        return replace(state, resolution=resolution, start=window.start, end=window.end)

    return replace(state, resolution=resolution)


# ── Shareable state ─────────────────────────────────────────────────────────

def to_params(state: NavigationState) -> dict[str, str]:
    params: dict[str, str] = {"resolution": state.resolution}
    if state.start is not None:
        params["startDate"] = to_iso(state.start)
    if state.end is not None:
        params["endDate"] = to_iso(state.end)
    if state.preset:
        params["preset"] = state.preset
    if state.anchor is not None:
        params["endAnchor"] = to_iso(state.anchor)
    if state.range_from is not None:
        params["from"] = to_iso(state.range_from)
    if state.range_to is not None:
        params["to"] = to_iso(state.range_to)
    return params


def from_params(params: Mapping[str, str], now: datetime, tz: str) -> NavigationState:
    """Rebuild a state from persisted parameters.

    The window is recomputed from preset/anchor or from/to rather than
    trusted, so a replay always reproduces the window those inputs define.
    When ``preset`` is absent it is inferred from the window length and,
    without a saved ``endAnchor``, the saved window is kept as-is and
    anchored on its end. With no window at all the default preset is
    applied.
    """
    zone = resolve_zone(tz)
    now = as_zone(now, zone)

    def _opt(key: str) -> datetime | None:
        raw = params.get(key)
        return parse_instant(raw, zone, field=key) if raw else None

    resolution = (
        parse_resolution(params["resolution"]) if params.get("resolution")
        else default_resolution(DEFAULT_PRESET)
    )
    start, end = _opt("startDate"), _opt("endDate")
    saved_anchor = _opt("endAnchor")
    range_from, range_to = _opt("from"), _opt("to")

    preset = params.get("preset")
    preset_saved = is_known_selection(preset)
    if not preset_saved:
        preset = preset_matching_span(start, end, now) if start and end else None

    if start is None or end is None:
        return ensure_default(initial_state(resolution), now, tz)

    anchor = saved_anchor or (now if preset_saved else end)

    if preset == CUSTOM and range_from is not None and range_to is not None:
        window = ranges.compute_range_from_custom(range_from, range_to, resolution, tz)
        start, end = window.start, window.end
    elif preset in PRESETS and (preset_saved or saved_anchor is not None):
        window = ranges.compute_range_from_preset(preset, anchor, resolution, tz)
        start, end = window.start, window.end

    return NavigationState(
        preset=preset,
        anchor=anchor,
        resolution=resolution,
        range_from=range_from,
        range_to=range_to,
        start=start,
        end=end,
    )
