"""Pydantic models defining the REST contract between frontend and backend.

Field names are camelCase because the frontend reads them as-is.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# ── Time series ─────────────────────────────────────────────────────────────

class TimeSeriesBucket(BaseModel):
    timestamp: str          # bucket start, ISO-8601 with offset
    value: int
    label: str


class TimeSeriesMetadata(BaseModel):
    startDate: str
    endDate: str
    resolution: str
    totalBuckets: int
    totalHourlyPoints: int
    timezone: str
    todayIndex: int | None = None   # bucket containing "now", if in range


class TimeSeriesData(BaseModel):
    buckets: list[TimeSeriesBucket]
    metadata: TimeSeriesMetadata


class TimeSeriesResponse(BaseModel):
    success: bool
    data: TimeSeriesData | None = None
    error: str | None = None


# ── Presets ─────────────────────────────────────────────────────────────────

class PresetItem(BaseModel):
    key: str
    label: str
    description: str
    duration: str | None = None      # None for "custom"
    defaultResolution: str
    allowedResolutions: list[str]


class PresetsResponse(BaseModel):
    presets: list[PresetItem]
    defaultPreset: str
    resolutions: list[str]


# ── Range computation ───────────────────────────────────────────────────────

class PresetRangeRequest(BaseModel):
    preset: str
    endAnchor: str
    resolution: str
    timezone: str | None = None


class CustomRangeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    range_from: str = Field(alias="from")
    range_to: str = Field(alias="to")
    resolution: str
    timezone: str | None = None


class RangeResponse(BaseModel):
    success: bool
    startDate: str | None = None
    endDate: str | None = None
    error: str | None = None


# ── Navigation ──────────────────────────────────────────────────────────────

class NavigationStateModel(BaseModel):
    """Wire form of the selector state; instants are ISO-8601 strings."""
    model_config = ConfigDict(populate_by_name=True)

    preset: str | None = None        # preset key, "custom", or None
    endAnchor: str | None = None
    resolution: str = "day"
    range_from: str | None = Field(default=None, alias="from")
    range_to: str | None = Field(default=None, alias="to")
    startDate: str | None = None
    endDate: str | None = None
    kind: str | None = None          # output only: no-selection | preset-active | custom-active


class NavigationRequest(BaseModel):
    state: NavigationStateModel = Field(default_factory=NavigationStateModel)
    timezone: str | None = None
    now: str | None = None           # overrides the server clock when given


class SelectPresetRequest(NavigationRequest):
    preset: str


class ApplyCustomRequest(NavigationRequest):
    model_config = ConfigDict(populate_by_name=True)

    range_from: str = Field(alias="from")
    range_to: str = Field(alias="to")


class StepRequest(NavigationRequest):
    direction: Literal["prev", "next"]


class ChangeResolutionRequest(NavigationRequest):
    resolution: str


class RestoreRequest(BaseModel):
    params: dict[str, str] = Field(default_factory=dict)
    timezone: str | None = None
    now: str | None = None


class NavigationResponse(BaseModel):
    success: bool
    state: NavigationStateModel | None = None
    params: dict[str, str] | None = None
    availableResolutions: list[str] | None = None
    error: str | None = None
