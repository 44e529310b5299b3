"""
Time-series explorer backend – FastAPI app.

=== ROLE IN THE SYSTEM ===
Serves the browser chart. The frontend owns presentation and keeps the
selector state in its URL; this API turns that state into concrete,
resolution-aligned windows and returns the aggregated series for them.
All computation lives in ``tsengine`` and is pure; this layer only parses
requests, reads the clock, and shapes responses.

=== ENDPOINTS ===
  GET  /api/health                   → liveness
  GET  /api/time-series              → buckets + metadata for a window
  GET  /api/presets                  → preset registry (incl. "custom")
  POST /api/ranges/preset            → window for preset + anchor
  POST /api/ranges/custom            → window for explicit from/to
  POST /api/navigation/init          → apply the default preset once
  POST /api/navigation/preset        → select a preset
  POST /api/navigation/custom        → apply a custom range
  POST /api/navigation/step          → prev / next
  POST /api/navigation/today         → re-anchor on now
  POST /api/navigation/resolution    → change resolution, recompute window
  POST /api/navigation/restore       → rebuild state from URL params

=== ERRORS ===
User-input problems come back as HTTP 400 ``{"success": false, "error"}``.
Anything else is a bug and surfaces as a 500.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import app.config as config
from app.routers.navigation import router as navigation_router
from app.routers.ranges import router as ranges_router
from app.routers.time_series import router as time_series_router

app = FastAPI(title="Time-Series Explorer", version="1.0.0")

# ---------------------------------------------------------------------------
# CORS: localhost dev servers plus TSEXPLORER_CORS_ORIGINS.
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_origin_regex=config.CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(time_series_router)
app.include_router(ranges_router)
app.include_router(navigation_router)
