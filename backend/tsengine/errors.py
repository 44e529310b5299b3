"""Error taxonomy for the time-series engine.

Every class derives from ``ValueError`` so callers that only know the
builtin keep working. ``UnsupportedResolutionError`` is the odd one out:
it signals a programming error (an unvalidated resolution reached a
branch with no handling) and must never be reported as bad user input.
"""

from __future__ import annotations


class TimeSeriesError(ValueError):
    """Base class for user-input errors raised by the engine."""


class MissingParameterError(TimeSeriesError):
    """A required input is absent or blank."""


class InvalidInstantError(TimeSeriesError):
    """A date string could not be parsed as an ISO-8601 instant."""


class InvalidRangeError(TimeSeriesError):
    """start >= end, or a custom span that is not positive."""


class InvalidResolutionError(TimeSeriesError):
    """Resolution outside the five supported units (or the preset's subset)."""


class InvalidTimezoneError(TimeSeriesError):
    """Timezone name unknown to the tz database."""


class UnknownPresetError(TimeSeriesError):
    """Preset key not present in the registry."""


class UnsupportedResolutionError(RuntimeError):
    """Internal: a resolution value reached code that cannot handle it."""
