from __future__ import annotations

from pathlib import Path
from typing import Iterable

import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from fastapi.testclient import TestClient

from twilight import __version__

SF_PARAMS = {"lat": 37.7749, "lon": -122.4194}


@pytest.fixture(scope="module")
def api_client() -> Iterable[TestClient]:
    from twilight_api import app

    with TestClient(app) as client:
        yield client


def test_health_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["version"] == __version__


def test_twilight_with_epoch_millis(api_client: TestClient) -> None:
    response = api_client.get("/twilight", params={**SF_PARAMS, "time": 1710964800000})
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["status"] == "ok"
    assert payload["state"] == "day"
    assert payload["time_utc"] == "2024-03-20T20:00:00Z"
    assert payload["sunrise_utc"].startswith("2024-03-20T13:4")
    assert payload["sunset_utc"].startswith("2024-03-21T02:")
    assert payload["transition_utc"] == payload["sunset_utc"]
    assert payload["sunrise_local"] is None


def test_twilight_with_iso_time_and_offset(api_client: TestClient) -> None:
    response = api_client.get(
        "/twilight",
        params={**SF_PARAMS, "time": "2024-03-20T03:00:00-07:00", "offset_hours": -7},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["state"] == "night"
    assert payload["transition_utc"] == payload["sunrise_utc"]
    assert payload["sunrise_local"].startswith("2024-03-20T06:")
    assert payload["sunrise_local"].endswith("-07:00")
    assert payload["transition_local"] == payload["sunrise_local"]


def test_twilight_defaults_to_now(api_client: TestClient) -> None:
    response = api_client.get("/twilight", params=SF_PARAMS)
    assert response.status_code == 200
    assert response.json()["state"] in ("day", "night")


@pytest.mark.parametrize(
    "lat, status, state",
    [(89.0, "polar_day", "day"), (-89.0, "polar_night", "night")],
)
def test_twilight_polar(api_client: TestClient, lat: float, status: str, state: str) -> None:
    response = api_client.get(
        "/twilight", params={"lat": lat, "lon": 0, "time": "2024-06-20T12:00:00Z"}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == status
    assert payload["state"] == state
    assert payload["transition_time_ms"] == -1
    assert payload["transition_utc"] is None
    assert payload["sunrise_utc"] is None
    assert payload["sunset_utc"] is None


@pytest.mark.parametrize(
    "params",
    [
        {"lat": 95, "lon": 0},
        {"lat": 0, "lon": 181},
        {"lat": 0, "lon": 0, "time": "2024-03-20T12:00:00"},
        {"lat": 0, "lon": 0, "offset_hours": 30},
        {"lat": 0, "lon": 0, "offset_hours": 24},
        {"lat": 0, "lon": 0, "offset_hours": -24},
        {"lon": 0},
    ],
)
def test_validation_error(api_client: TestClient, params: dict) -> None:
    response = api_client.get("/twilight", params=params)
    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "validation_error"
    assert payload["ok"] is False


def test_out_of_range_time(api_client: TestClient) -> None:
    response = api_client.get("/twilight", params={**SF_PARAMS, "time": 10**18})
    assert response.status_code == 400
    payload = response.json()
    assert payload["code"] == "http_400"
    assert payload["ok"] is False

