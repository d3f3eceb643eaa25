"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from twilight import State


class TwilightQueryParams(BaseModel):
    """Validated query parameters for the ``/twilight`` endpoint."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")
    time: Optional[Union[int, datetime]] = Field(
        None,
        description="Instant to evaluate: epoch milliseconds or ISO-8601 with offset; defaults to now",
    )
    offset_hours: Optional[float] = Field(
        None,
        description="Optional fixed offset in hours applied to derive local times",
    )

    @field_validator("time")
    def validate_time(cls, value: Optional[Union[int, datetime]]) -> Optional[Union[int, datetime]]:
        if isinstance(value, datetime) and value.tzinfo is None:
            raise ValueError("time must include a UTC offset")
        return value

    @field_validator("offset_hours")
    def validate_offset_hours(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return value
        if not -24.0 < value < 24.0:
            raise ValueError("offset_hours must be strictly within ±24 hours")
        return value


class TwilightResponse(BaseModel):
    """Successful twilight response payload."""

    ok: bool = True
    status: Literal["ok", "polar_day", "polar_night"] = Field(
        ..., description="Computation status"
    )
    state: State = Field(..., description="Day or night at the requested instant")
    time_utc: str = Field(..., description="Requested instant in UTC (ISO-8601)")
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    transition_time_ms: int = Field(
        ..., description="Epoch milliseconds of the associated crossing, -1 if none"
    )
    transition_utc: Optional[str] = Field(
        None, description="Associated sunrise or sunset in UTC (ISO-8601)"
    )
    sunrise_utc: Optional[str] = Field(
        None, description="Civil dawn in UTC (ISO-8601)"
    )
    sunset_utc: Optional[str] = Field(
        None, description="Civil dusk in UTC (ISO-8601)"
    )
    offset_hours: Optional[float] = Field(
        None, description="User-specified offset in hours"
    )
    transition_local: Optional[str] = Field(
        None, description="Associated crossing expressed in local time when offset provided"
    )
    sunrise_local: Optional[str] = Field(
        None, description="Civil dawn expressed in local time when offset provided"
    )
    sunset_local: Optional[str] = Field(
        None, description="Civil dusk expressed in local time when offset provided"
    )


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    version: str


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
