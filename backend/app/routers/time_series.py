"""Aggregated time-series route."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query

import app.config as config
from app.routers._common import failure, request_now
from app.schemas import (
    TimeSeriesBucket,
    TimeSeriesData,
    TimeSeriesMetadata,
    TimeSeriesResponse,
)
from tsengine.errors import TimeSeriesError
from tsengine.services.bucketing import locate_bucket, run_query, validate_request

_log = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/time-series", response_model=TimeSeriesResponse)
def get_time_series(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    resolution: str | None = None,
    tz: str | None = Query(None, alias="timezone"),
    now: str | None = None,
):
    try:
        window = validate_request(start_date, end_date, resolution, tz or config.DEFAULT_TIMEZONE)
        current = request_now(now, window.timezone)
    except TimeSeriesError as exc:
        return failure(exc, route="time-series")

    result = run_query(window)
    _log.info(
        "Served %d %s buckets (%d hourly points) for %s .. %s",
        len(result.buckets), window.resolution, result.total_hourly_points,
        start_date, end_date,
    )

    meta = result.metadata
    return TimeSeriesResponse(
        success=True,
        data=TimeSeriesData(
            buckets=[TimeSeriesBucket(**b.to_dict()) for b in result.buckets],
            metadata=TimeSeriesMetadata(
                **meta,
                timezone=window.timezone,
                todayIndex=locate_bucket(result.buckets, current, window),
            ),
        ),
    )
