"""Civil twilight computations based on a low-precision solar model."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Tuple

__all__ = [
    "State",
    "SolarCoordinates",
    "TwilightResult",
    "calculate_twilight",
    "civil_from_days",
    "julian_day_from_civil",
    "julian_day_number",
    "solar_coordinates",
    "MAX_TIME_MILLIS",
    "MIN_TIME_MILLIS",
    "NO_TRANSITION",
]

J2000_JULIAN_DAY = 2451545  # Julian day number of 2000-01-01T12:00Z.
UNIX_EPOCH_JULIAN_DAY = 2440588  # Julian day number of 1970-01-01.
UTC_2000_MILLIS = 946728000000  # Epoch milliseconds of 2000-01-01T12:00Z.
DAY_IN_MILLIS = 1000 * 60 * 60 * 24

OBLIQUITY_DEGREES = 23.439
CIVIL_TWILIGHT_ALTITUDE_DEGREES = -6.0

# Offset of the solar transit from the mean-noon cycle, in days.
SOLAR_TRANSIT_J0 = 0.0009

# Reported for sunrise/sunset when the day or night never ends.
NO_TRANSITION = -1

# Supported instants; anything outside is clamped to the nearest bound.
MIN_TIME_MILLIS = -(2**63)
MAX_TIME_MILLIS = 2**63 - 1

_OBLIQUITY = math.radians(OBLIQUITY_DEGREES)
_SIN_TWILIGHT_ALTITUDE = math.sin(math.radians(CIVIL_TWILIGHT_ALTITUDE_DEGREES))


class State(str, Enum):
    """Whether the sun is above the civil twilight threshold."""

    DAY = "day"
    NIGHT = "night"


class SolarCoordinates(NamedTuple):
    """Solar position for a given day.

    ``mean_longitude`` is kept in degrees; the remaining angles are radians.
    """

    mean_longitude: float
    mean_anomaly: float
    ecliptic_longitude: float
    declination: float


@dataclass(frozen=True)
class TwilightResult:
    """Outcome of a single twilight calculation.

    ``sunrise`` and ``sunset`` bracket the solar day containing the queried
    instant. Both are :data:`NO_TRANSITION` under polar day or polar night,
    and so is ``transition_time``.
    """

    state: State
    transition_time: int
    sunrise: int
    sunset: int

    @property
    def is_polar(self) -> bool:
        return self.sunrise == NO_TRANSITION and self.sunset == NO_TRANSITION


def civil_from_days(days: int) -> Tuple[int, int, int]:
    """Return the proleptic Gregorian ``(year, month, day)`` of a day count.

    *days* counts from 1970-01-01 and may be negative. Only integer
    arithmetic is used, so every integer maps to a date.
    """

    z = days + 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def julian_day_from_civil(year: int, month: int, day: int) -> int:
    """Fliegel-Van Flandern Julian day number of a Gregorian calendar date."""

    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3
    return day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045


def julian_day_number(time_millis: int) -> int:
    """Julian day number of the UTC calendar date containing *time_millis*.

    The time of day is discarded: any instant on 2000-01-01 (UTC) maps to
    2451545.
    """

    year, month, day = civil_from_days(time_millis // DAY_IN_MILLIS)
    return julian_day_from_civil(year, month, day)


def _normalize_degrees(angle: float) -> float:
    return angle % 360.0


def solar_coordinates(days_since_2000: float) -> SolarCoordinates:
    """Compute the sun's position *days_since_2000* days after J2000.0.

    Parameters
    ----------
    days_since_2000:
        Days elapsed since 2000-01-01T12:00Z.

    Returns
    -------
    SolarCoordinates
        Mean longitude (degrees), mean anomaly, ecliptic longitude and
        declination (radians).
    """

    mean_longitude = _normalize_degrees(280.461 + 0.9856474 * days_since_2000)
    mean_anomaly = math.radians(_normalize_degrees(357.528 + 0.9856003 * days_since_2000))
    ecliptic_longitude = math.radians(
        _normalize_degrees(
            mean_longitude
            + 1.915 * math.sin(mean_anomaly)
            + 0.020 * math.sin(2 * mean_anomaly)
        )
    )
    declination = math.asin(math.sin(_OBLIQUITY) * math.sin(ecliptic_longitude))
    return SolarCoordinates(mean_longitude, mean_anomaly, ecliptic_longitude, declination)


def _cos_hour_angle(latitude: float, declination: float) -> float:
    lat_rad = math.radians(latitude)
    return (_SIN_TWILIGHT_ALTITUDE - math.sin(lat_rad) * math.sin(declination)) / (
        math.cos(lat_rad) * math.cos(declination)
    )


def calculate_twilight(time_millis: int, latitude: float, longitude: float) -> TwilightResult:
    """Calculate the civil twilight state for an instant and location.

    Parameters
    ----------
    time_millis:
        Milliseconds since 1970-01-01T00:00Z.
    latitude, longitude:
        Geographic coordinates in degrees (north and east positive). Ranges
        are not validated.

    Returns
    -------
    TwilightResult
        ``DAY`` when the instant lies strictly between sunrise and sunset of
        its solar day. ``transition_time`` is the sunset during the day, the
        upcoming sunrise before dawn and the past sunset after dusk.

    Notes
    -----
    Instants outside the signed 64-bit millisecond range are clamped to it.
    The solar position is taken for the UTC calendar date while the solar day
    is chosen from the instant itself, so near 00:00 UTC a query at a
    reported sunset may land on a neighbouring day and still read ``DAY``.
    """

    time_millis = min(max(time_millis, MIN_TIME_MILLIS), MAX_TIME_MILLIS)
    days_since_2000 = float(julian_day_number(time_millis) - J2000_JULIAN_DAY)
    coords = solar_coordinates(days_since_2000)

    cos_hour_angle = _cos_hour_angle(latitude, coords.declination)
    # The day or night never ends for the given date and location.
    if cos_hour_angle >= 1.0:
        return TwilightResult(State.NIGHT, NO_TRANSITION, NO_TRANSITION, NO_TRANSITION)
    if cos_hour_angle <= -1.0:
        return TwilightResult(State.DAY, NO_TRANSITION, NO_TRANSITION, NO_TRANSITION)

    hour_angle = math.acos(cos_hour_angle) / (2 * math.pi)

    # Solar transit of the cycle nearest the queried instant, in days since J2000.
    elapsed_days = (time_millis - UTC_2000_MILLIS) / DAY_IN_MILLIS
    arc_longitude = -longitude / 360.0
    cycle = round(elapsed_days - SOLAR_TRANSIT_J0 - arc_longitude)
    solar_transit = (
        cycle
        + SOLAR_TRANSIT_J0
        + arc_longitude
        + 0.0053 * math.sin(coords.mean_anomaly)
        - 0.0069 * math.sin(2 * coords.ecliptic_longitude)
    )

    # round() breaks exact .5 ms ties to even.
    sunrise = round((solar_transit - hour_angle) * DAY_IN_MILLIS) + UTC_2000_MILLIS
    sunset = round((solar_transit + hour_angle) * DAY_IN_MILLIS) + UTC_2000_MILLIS

    if sunrise < time_millis < sunset:
        return TwilightResult(State.DAY, sunset, sunrise, sunset)
    transition = sunrise if time_millis <= sunrise else sunset
    return TwilightResult(State.NIGHT, transition, sunrise, sunset)
