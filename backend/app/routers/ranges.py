"""Preset catalog and one-shot range computation routes."""

from __future__ import annotations

from fastapi import APIRouter

from app.routers._common import failure, request_timezone
from app.schemas import (
    CustomRangeRequest,
    PresetItem,
    PresetRangeRequest,
    PresetsResponse,
    RangeResponse,
)
from tsengine.config.presets import CUSTOM_PRESET, DEFAULT_PRESET, PRESETS, PresetDefinition
from tsengine.core.resolution import VALID_RESOLUTIONS
from tsengine.errors import TimeSeriesError
from tsengine.services.ranges import compute_range_from_custom, compute_range_from_preset

router = APIRouter()


def _preset_item(preset: PresetDefinition) -> PresetItem:
    return PresetItem(
        key=preset.key,
        label=preset.label,
        description=preset.description,
        duration=preset.duration,
        defaultResolution=preset.default_resolution,
        allowedResolutions=list(preset.allowed_resolutions),
    )


@router.get("/api/presets", response_model=PresetsResponse)
def list_presets() -> PresetsResponse:
    items = [_preset_item(p) for p in PRESETS.values()]
    items.append(_preset_item(CUSTOM_PRESET))
    return PresetsResponse(
        presets=items,
        defaultPreset=DEFAULT_PRESET,
        resolutions=list(VALID_RESOLUTIONS),
    )


@router.post("/api/ranges/preset", response_model=RangeResponse)
def range_from_preset(req: PresetRangeRequest):
    try:
        tz = request_timezone(req.timezone)
        window = compute_range_from_preset(req.preset, req.endAnchor, req.resolution, tz)
    except TimeSeriesError as exc:
        return failure(exc, route="ranges/preset")
    return RangeResponse(success=True, **window.to_dict())


@router.post("/api/ranges/custom", response_model=RangeResponse)
def range_from_custom(req: CustomRangeRequest):
    try:
        tz = request_timezone(req.timezone)
        window = compute_range_from_custom(req.range_from, req.range_to, req.resolution, tz)
    except TimeSeriesError as exc:
        return failure(exc, route="ranges/custom")
    return RangeResponse(success=True, **window.to_dict())
