"""
Time-series explorer backend – standalone launcher.

During development run ``uvicorn app.main:app --reload`` instead; this
entry point is what the packaged build and the ``tsexplorer-server``
console script start.

Startup protocol:
  1. Host/port come from TSEXPLORER_HOST / TSEXPLORER_PORT. Port 0 asks
     the OS for a free port by binding to it first.
  2. "PORT:{port}" is printed to stdout (flushed) so a parent process can
     read where to poll /api/health.
  3. App and engine loggers, and uvicorn, log at TSEXPLORER_LOG_LEVEL
     while uvicorn serves the FastAPI app on that port.
"""

from __future__ import annotations

import logging
import socket

import app.config as config
from app.main import app as _fastapi_app

# Loggers of our own packages; uvicorn's log_level only covers uvicorn.*.
_APP_LOGGERS = ("app", "tsengine")


def configure_logging(level: str) -> None:
    """Route app/engine log records to stderr at *level* ('debug', 'info', ...)."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.DEBUG   # uvicorn's "trace"
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    for name in _APP_LOGGERS:
        logging.getLogger(name).setLevel(numeric)


def _find_free_port(host: str) -> int:
    """Bind to port 0, let the OS assign a free port, return it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((host, 0))
        return s.getsockname()[1]


def main() -> None:
    configure_logging(config.LOG_LEVEL)
    port = config.PORT or _find_free_port(config.HOST)

    # Signal the parent process with the chosen port before uvicorn blocks.
    print(f"PORT:{port}", flush=True)

    import uvicorn

    # Pass the app object (not "app.main:app") so no string import is needed
    # inside a frozen bundle.
    uvicorn.run(
        _fastapi_app,
        host=config.HOST,
        port=port,
        log_level=config.LOG_LEVEL,
        workers=1,
    )


if __name__ == "__main__":
    main()
