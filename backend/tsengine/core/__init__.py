"""Core domain helpers: resolution snapping, duration tokens, zoned instants."""

from tsengine.core.durations import parse_duration_token, shift, weeks_in
from tsengine.core.instants import parse_instant, resolve_zone, to_iso
from tsengine.core.resolution import (
    VALID_RESOLUTIONS,
    bucket_label,
    ceil,
    display_label,
    floor,
    parse_resolution,
)

__all__ = [
    "VALID_RESOLUTIONS",
    "bucket_label",
    "ceil",
    "display_label",
    "floor",
    "parse_duration_token",
    "parse_instant",
    "parse_resolution",
    "resolve_zone",
    "shift",
    "to_iso",
    "weeks_in",
]
