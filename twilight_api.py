"""FastAPI application exposing civil twilight computations."""

from __future__ import annotations

import json
import logging
import os
import time
from datetime import UTC, datetime, timedelta, timezone
from typing import Annotated, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from models import ErrorResponse, HealthResponse, TwilightQueryParams, TwilightResponse
from twilight import State, Twilight, __version__
from twilight.times import from_millis

logging.basicConfig(level=logging.INFO, format="%(message)s")
LOGGER = logging.getLogger("twilight-api")

APP_DESCRIPTION = "Civil twilight (sunrise/sunset) state for a time and location"

DEFAULT_CORS_ORIGINS = "*"

app = FastAPI(
    title="Twilight API",
    description=APP_DESCRIPTION,
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        origin.strip()
        for origin in os.environ.get("TWILIGHT_CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
        if origin.strip()
    ],
    allow_methods=["GET"],
    allow_headers=["*"],
)


def _format_utc(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _format_local(dt: Optional[datetime], offset_hours: Optional[float]) -> Optional[str]:
    if dt is None or offset_hours is None:
        return None
    offset = timezone(timedelta(hours=offset_hours))
    return dt.astimezone(offset).isoformat()


def _status(twilight: Twilight) -> str:
    if not twilight.result.is_polar:
        return "ok"
    return "polar_day" if twilight.state is State.DAY else "polar_night"


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        message = detail.get("error") or detail.get("message") or str(detail)
    elif isinstance(detail, list):
        message = ", ".join(str(item) for item in detail)
    else:
        message = str(detail)
    return _error_response(exc.status_code, f"http_{exc.status_code}", message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(ok=True, version=__version__)


@app.get(
    "/twilight",
    response_model=TwilightResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def twilight_endpoint(params: Annotated[TwilightQueryParams, Query()]) -> TwilightResponse:
    start_time = time.perf_counter()
    when = params.time if params.time is not None else datetime.now(UTC)
    try:
        twilight = Twilight.calculate(when, params.lat, params.lon)
        instant = when if isinstance(when, datetime) else from_millis(when)
        times = twilight.twilight_times()
        sunrise = times.sunrise_time() if times is not None else None
        sunset = times.sunset_time() if times is not None else None
        transition = twilight.transition_time()
    except (ValueError, OverflowError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    duration_ms = (time.perf_counter() - start_time) * 1000.0

    response = TwilightResponse(
        status=_status(twilight),
        state=twilight.state,
        time_utc=_format_utc(instant),
        latitude=params.lat,
        longitude=params.lon,
        transition_time_ms=twilight.result.transition_time,
        transition_utc=_format_utc(transition),
        sunrise_utc=_format_utc(sunrise),
        sunset_utc=_format_utc(sunset),
        offset_hours=params.offset_hours,
        transition_local=_format_local(transition, params.offset_hours),
        sunrise_local=_format_local(sunrise, params.offset_hours),
        sunset_local=_format_local(sunset, params.offset_hours),
    )

    LOGGER.info(
        json.dumps(
            {
                "event": "twilight",
                "lat": params.lat,
                "lon": params.lon,
                "time": response.time_utc,
                "state": response.state.value,
                "status": response.status,
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return response
