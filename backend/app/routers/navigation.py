"""Navigation routes: preset/custom selection, stepping, today, resolution.

The frontend sends its current state with every call and stores the
returned ``params`` in the URL; the server keeps nothing between requests.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from fastapi import APIRouter

from app.routers._common import failure, request_now, request_timezone
from app.schemas import (
    ApplyCustomRequest,
    ChangeResolutionRequest,
    NavigationRequest,
    NavigationResponse,
    NavigationStateModel,
    RestoreRequest,
    SelectPresetRequest,
    StepRequest,
)
from tsengine.config.presets import is_known_selection
from tsengine.core.instants import parse_instant, resolve_zone, to_iso
from tsengine.core.resolution import parse_resolution
from tsengine.errors import TimeSeriesError, UnknownPresetError
from tsengine.services import navigation
from tsengine.services.navigation import NavigationState

router = APIRouter()

Transition = Callable[[NavigationState, datetime, str], NavigationState]


# ── Wire <-> engine state ───────────────────────────────────────────────────

def _to_state(model: NavigationStateModel, tz: str) -> NavigationState:
    zone = resolve_zone(tz)

    def _opt(value: str | None, field: str) -> datetime | None:
        return parse_instant(value, zone, field=field) if value else None

    preset = model.preset or None
    if preset is not None and not is_known_selection(preset):
        raise UnknownPresetError(f"Unknown preset: {preset}")

    return NavigationState(
        preset=preset,
        anchor=_opt(model.endAnchor, "endAnchor"),
        resolution=parse_resolution(model.resolution),
        range_from=_opt(model.range_from, "from"),
        range_to=_opt(model.range_to, "to"),
        start=_opt(model.startDate, "startDate"),
        end=_opt(model.endDate, "endDate"),
    )


def _to_model(state: NavigationState) -> NavigationStateModel:
    def _iso(value: datetime | None) -> str | None:
        return to_iso(value) if value is not None else None

    return NavigationStateModel(
        preset=state.preset,
        endAnchor=_iso(state.anchor),
        resolution=state.resolution,
        range_from=_iso(state.range_from),
        range_to=_iso(state.range_to),
        startDate=_iso(state.start),
        endDate=_iso(state.end),
        kind=state.kind,
    )


def _respond(state: NavigationState) -> NavigationResponse:
    return NavigationResponse(
        success=True,
        state=_to_model(state),
        params=navigation.to_params(state),
        availableResolutions=list(state.available_resolutions),
    )


def _run(req: NavigationRequest, route: str, transition: Transition):
    try:
        tz = request_timezone(req.timezone)
        now = request_now(req.now, tz)
        state = _to_state(req.state, tz)
        return _respond(transition(state, now, tz))
    except TimeSeriesError as exc:
        return failure(exc, route=route)


# ── Routes ──────────────────────────────────────────────────────────────────

@router.post("/api/navigation/init", response_model=NavigationResponse)
def init_navigation(req: NavigationRequest):
    return _run(req, "navigation/init", navigation.ensure_default)


@router.post("/api/navigation/preset", response_model=NavigationResponse)
def select_preset(req: SelectPresetRequest):
    return _run(
        req, "navigation/preset",
        lambda state, now, tz: navigation.select_preset(state, req.preset, now, tz),
    )


@router.post("/api/navigation/custom", response_model=NavigationResponse)
def apply_custom(req: ApplyCustomRequest):
    return _run(
        req, "navigation/custom",
        lambda state, now, tz: navigation.apply_custom(state, req.range_from, req.range_to, tz),
    )


@router.post("/api/navigation/step", response_model=NavigationResponse)
def step(req: StepRequest):
    return _run(
        req, "navigation/step",
        lambda state, now, tz: navigation.step(state, req.direction, tz),
    )


@router.post("/api/navigation/today", response_model=NavigationResponse)
def today(req: NavigationRequest):
    return _run(req, "navigation/today", navigation.jump_to_today)


@router.post("/api/navigation/resolution", response_model=NavigationResponse)
def change_resolution(req: ChangeResolutionRequest):
    return _run(
        req, "navigation/resolution",
        lambda state, now, tz: navigation.change_resolution(state, req.resolution, tz),
    )


@router.post("/api/navigation/restore", response_model=NavigationResponse)
def restore(req: RestoreRequest):
    try:
        tz = request_timezone(req.timezone)
        now = request_now(req.now, tz)
        return _respond(navigation.from_params(req.params, now, tz))
    except TimeSeriesError as exc:
        return failure(exc, route="navigation/restore")
