"""Conversions between :mod:`datetime` values and twilight calculations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, tzinfo
from typing import Optional, Union

from .calc import State, TwilightResult, calculate_twilight

__all__ = ["Twilight", "TwilightTimes", "from_millis", "to_millis"]

Timestamp = Union[int, datetime]

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def to_millis(value: Timestamp) -> int:
    """Return *value* as milliseconds since the Unix epoch.

    Integers are taken to already be epoch milliseconds. Datetimes must be
    timezone-aware.
    """

    if isinstance(value, datetime):
        if value.tzinfo is None:
            raise ValueError("datetime must be timezone-aware")
        return (value - _EPOCH) // timedelta(milliseconds=1)
    return int(value)


def from_millis(millis: int, tz: Optional[tzinfo] = None) -> datetime:
    """Convert epoch milliseconds to an aware datetime in *tz* (UTC by default)."""

    dt = _EPOCH + timedelta(milliseconds=millis)
    return dt.astimezone(tz) if tz is not None else dt


@dataclass(frozen=True)
class TwilightTimes:
    """Civil twilight crossings of one solar day, in epoch milliseconds."""

    sunrise: int
    sunset: int

    def sunrise_time(self, tz: Optional[tzinfo] = None) -> datetime:
        return from_millis(self.sunrise, tz)

    def sunset_time(self, tz: Optional[tzinfo] = None) -> datetime:
        return from_millis(self.sunset, tz)


@dataclass(frozen=True)
class Twilight:
    """Twilight state of a location at a given time."""

    result: TwilightResult

    @classmethod
    def calculate(cls, time_of_day: Timestamp, latitude: float, longitude: float) -> "Twilight":
        """Calculate civil twilight for *time_of_day* at the given location."""

        return cls(calculate_twilight(to_millis(time_of_day), latitude, longitude))

    @classmethod
    def now(cls, latitude: float, longitude: float) -> "Twilight":
        return cls.calculate(datetime.now(UTC), latitude, longitude)

    @property
    def state(self) -> State:
        return self.result.state

    def transition_time(self, tz: Optional[tzinfo] = None) -> Optional[datetime]:
        if self.result.is_polar:
            return None
        return from_millis(self.result.transition_time, tz)

    def twilight_times(self) -> Optional[TwilightTimes]:
        """Return the crossings, or ``None`` under polar day/night."""

        if self.result.is_polar:
            return None
        return TwilightTimes(sunrise=self.result.sunrise, sunset=self.result.sunset)
