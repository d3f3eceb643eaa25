"""Resolution of the observer location for twilight calculations."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

import httpx

LOGGER = logging.getLogger(__name__)

DEFAULT_GEOLOCATE_URL = "https://location.services.mozilla.com/v1/geolocate?key=geoclue"
DEFAULT_GEOLOCATE_TIMEOUT = 10.0


class LocationError(RuntimeError):
    """Raised when no usable location can be determined."""


@dataclass(frozen=True)
class Location:
    """Geographic coordinates in degrees, north and east positive."""

    latitude: float
    longitude: float

    def __str__(self) -> str:
        sign_lat = "N" if self.latitude >= 0.0 else "S"
        sign_lng = "E" if self.longitude >= 0.0 else "W"
        return f"({self.latitude}°{sign_lat}, {self.longitude}°{sign_lng})"


def _location_from_env() -> Optional[Location]:
    lat = os.environ.get("TWILIGHT_LAT")
    lon = os.environ.get("TWILIGHT_LON")
    if lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise LocationError("TWILIGHT_LAT and TWILIGHT_LON must be set together")
    try:
        return Location(latitude=float(lat), longitude=float(lon))
    except ValueError as exc:
        raise LocationError(f"Invalid location override: {lat!r}, {lon!r}") from exc


def _geolocate(url: str, timeout: float) -> Location:
    try:
        response = httpx.post(url, json={}, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise LocationError(f"Failed to geolocate via {url}: {exc}") from exc

    try:
        location = payload["location"]
        result = Location(latitude=float(location["lat"]), longitude=float(location["lng"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise LocationError(f"Unexpected geolocation payload: {payload!r}") from exc

    LOGGER.info(
        json.dumps(
            {
                "event": "geolocated",
                "url": url,
                "latitude": result.latitude,
                "longitude": result.longitude,
                "accuracy": payload.get("accuracy"),
            }
        )
    )
    return result


def resolve_location() -> Location:
    """Return the configured location, geolocating over HTTP if none is set.

    ``TWILIGHT_LAT``/``TWILIGHT_LON`` take precedence. Otherwise the
    Mozilla-compatible endpoint in ``TWILIGHT_GEOLOCATE_URL`` is queried.
    """

    override = _location_from_env()
    if override is not None:
        return override

    url = os.environ.get("TWILIGHT_GEOLOCATE_URL", DEFAULT_GEOLOCATE_URL)
    try:
        timeout = float(os.environ.get("TWILIGHT_GEOLOCATE_TIMEOUT", DEFAULT_GEOLOCATE_TIMEOUT))
    except ValueError as exc:
        raise LocationError("TWILIGHT_GEOLOCATE_TIMEOUT must be a number") from exc
    return _geolocate(url, timeout)
