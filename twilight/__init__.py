"""Civil twilight (sunrise/sunset) calculations."""

from .calc import NO_TRANSITION, State, TwilightResult, calculate_twilight
from .location import Location, LocationError, resolve_location
from .times import Twilight, TwilightTimes

__all__ = [
    "calculate_twilight",
    "resolve_location",
    "Location",
    "LocationError",
    "NO_TRANSITION",
    "State",
    "Twilight",
    "TwilightResult",
    "TwilightTimes",
]

__version__ = "1.0.0"
