"""Runtime configuration read from the environment at import time."""

from __future__ import annotations

import os

# Zone used for requests that do not pass ``timezone`` explicitly.
DEFAULT_TIMEZONE = os.environ.get("TSEXPLORER_TIMEZONE", "UTC")

# Local dev origins (Vite / Next dev servers). Deployed frontends are added
# through TSEXPLORER_CORS_ORIGINS as a comma-separated list.
_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
_extra_origins = os.environ.get("TSEXPLORER_CORS_ORIGINS", "")
CORS_ORIGINS = _DEV_ORIGINS + [o.strip() for o in _extra_origins.split(",") if o.strip()]
CORS_ORIGIN_REGEX = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"

# Launcher settings (see sidecar_main.py). Port 0 = pick a free port.
HOST = os.environ.get("TSEXPLORER_HOST", "127.0.0.1")
PORT = int(os.environ.get("TSEXPLORER_PORT", "0"))
LOG_LEVEL = os.environ.get("TSEXPLORER_LOG_LEVEL", "info").lower()
