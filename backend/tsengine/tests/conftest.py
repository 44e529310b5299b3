"""Shared pytest fixtures for engine and API integration tests.

Provides:
- test_client: session-scoped FastAPI TestClient
- FIXED_NOW / FIXED_NOW_ISO: the "current time" every navigation test passes
  explicitly, so no test depends on the real clock
- get_json / post_json: request helpers that return (status, body)
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest
from starlette.testclient import TestClient

from app.main import app


FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
FIXED_NOW_ISO = "2024-06-15T12:00:00Z"


# ── TestClient ─────────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def test_client():
    with TestClient(app) as client:
        yield client


# ── Helpers ────────────────────────────────────────────────────────────────

def get_json(client: TestClient, url: str, **params: Any) -> tuple[int, dict[str, Any]]:
    resp = client.get(url, params={k: v for k, v in params.items() if v is not None})
    return resp.status_code, resp.json()


def post_json(client: TestClient, url: str, payload: dict[str, Any]) -> tuple[int, dict[str, Any]]:
    resp = client.post(url, json=payload)
    return resp.status_code, resp.json()
