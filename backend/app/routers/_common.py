"""Helpers shared by the routers: structured failures, zone and clock inputs."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi.responses import JSONResponse

import app.config as config
from tsengine.core.instants import parse_instant, resolve_zone
from tsengine.errors import TimeSeriesError

_log = logging.getLogger(__name__)


def failure(exc: TimeSeriesError, *, route: str) -> JSONResponse:
    """HTTP 400 with ``{"success": false, "error": ...}``; never retried."""
    _log.warning("Rejected %s request: %s", route, exc)
    return JSONResponse(status_code=400, content={"success": False, "error": str(exc)})


def request_timezone(name: str | None) -> str:
    tz = name or config.DEFAULT_TIMEZONE
    resolve_zone(tz)
    return tz


def request_now(raw: str | None, tz: str) -> datetime:
    """The only place the wall clock is read; *raw* overrides it."""
    zone = resolve_zone(tz)
    if raw:
        return parse_instant(raw, zone, field="now")
    return datetime.now(timezone.utc).astimezone(zone)
