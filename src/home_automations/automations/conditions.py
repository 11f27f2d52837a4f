"""
Predicate helpers for conditional automations.

Each helper returns a callable that receives the tick time.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Optional

from home_automations.errors import DataUnavailableError

from .models import parse_time_of_day

if TYPE_CHECKING:
    from home_automations.services import DaylightService, WeatherService

Predicate = Callable[[datetime], bool]


def time_range(start: Any, end: Any, daylight: Optional["DaylightService"] = None) -> Predicate:
    """
    True while the time of day is within [start, end).

    Windows may span midnight (e.g., 22:00 to 06:00).

    Args:
        start: Window start ("HH:MM", time, or timedelta)
        end: Window end ("HH:MM", time, or timedelta)
        daylight: Service whose local time the window is given in; without
            one the tick time is compared as is

    Raises:
        ConfigurationError: If either bound is malformed
    """
    start_time = parse_time_of_day(start)
    end_time = parse_time_of_day(end)

    def predicate(now: datetime) -> bool:
        if daylight is not None:
            now = daylight.localize(now)
        current = now.time()
        if start_time <= end_time:
            # Normal window (e.g., 08:00 to 18:00)
            return start_time <= current < end_time
        # Spans midnight (e.g., 22:00 to 06:00)
        return current >= start_time or current < end_time

    return predicate


def is_daytime(daylight: "DaylightService") -> Predicate:
    """True between sunrise and sunset."""
    return lambda now: daylight.is_daytime(now)


def is_night(daylight: "DaylightService") -> Predicate:
    """True between sunset and sunrise."""
    return lambda now: not daylight.is_daytime(now)


def _read(weather: "WeatherService") -> Optional[float]:
    try:
        return weather.current_outside_temperature()
    except DataUnavailableError:
        return None


def outside_temperature_above(weather: "WeatherService", threshold: float) -> Predicate:
    """True while the outside temperature is above the threshold (False without a reading)."""

    def predicate(now: datetime) -> bool:
        temperature = _read(weather)
        return temperature is not None and temperature > threshold

    return predicate


def outside_temperature_below(weather: "WeatherService", threshold: float) -> Predicate:
    """True while the outside temperature is below the threshold (False without a reading)."""

    def predicate(now: datetime) -> bool:
        temperature = _read(weather)
        return temperature is not None and temperature < threshold

    return predicate


def all_of(*predicates: Predicate) -> Predicate:
    """True if every predicate is true (AND logic)."""
    return lambda now: all(p(now) for p in predicates)


def any_of(*predicates: Predicate) -> Predicate:
    """True if at least one predicate is true."""
    return lambda now: any(p(now) for p in predicates)


def negate(predicate: Predicate) -> Predicate:
    return lambda now: not predicate(now)
