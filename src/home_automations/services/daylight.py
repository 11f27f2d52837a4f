"""
Daylight services: sunrise/sunset prediction and "is it daytime?".

Lookups are expected to be cheap. ``AstralDaylightService`` computes each
date once and serves later lookups from its cache.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, time
from typing import Dict, Optional, Tuple
import logging
import zoneinfo

from astral import LocationInfo
from astral import sun as astral_sun

logger = logging.getLogger(__name__)


class DaylightService(ABC):
    """
    Abstract interface for daylight prediction.

    Times returned by ``sunrise``/``sunset`` are local wall-clock times in the
    zone ``localize`` converts to.
    """

    @abstractmethod
    def is_daytime(self, moment: datetime) -> bool:
        """
        Check whether the sun is up.

        Args:
            moment: Point in time to check

        Returns:
            True between sunrise and sunset
        """
        pass

    @abstractmethod
    def sunrise(self, day: date) -> Optional[time]:
        """
        Get the sunrise time for a date.

        Returns:
            Local time of sunrise, or None if the sun does not rise that day
        """
        pass

    @abstractmethod
    def sunset(self, day: date) -> Optional[time]:
        """
        Get the sunset time for a date.

        Returns:
            Local time of sunset, or None if the sun does not set that day
        """
        pass

    def localize(self, moment: datetime) -> datetime:
        """
        Convert a moment to the local zone the daylight times refer to.

        Default implementation returns the moment unchanged.
        """
        return moment


class StaticDaylightService(DaylightService):
    """
    Daylight service with fixed sunrise and sunset times.

    Used by tests and by hosts that already know today's times.
    """

    def __init__(
        self,
        sunrise: Optional[time] = time(6, 30),
        sunset: Optional[time] = time(20, 0),
        is_daytime_fallback: bool = False,
    ) -> None:
        self._sunrise = sunrise
        self._sunset = sunset
        self._fallback = is_daytime_fallback

    def set_times(self, sunrise: Optional[time], sunset: Optional[time]) -> None:
        """Set sunrise and sunset for testing."""
        self._sunrise = sunrise
        self._sunset = sunset

    def set_daytime_fallback(self, is_daytime: bool) -> None:
        """Set the answer used when sunrise or sunset is unknown."""
        self._fallback = is_daytime

    def is_daytime(self, moment: datetime) -> bool:
        if self._sunrise is None or self._sunset is None:
            return self._fallback
        return self._sunrise <= moment.time() < self._sunset

    def sunrise(self, day: date) -> Optional[time]:
        return self._sunrise

    def sunset(self, day: date) -> Optional[time]:
        return self._sunset


class AstralDaylightService(DaylightService):
    """
    Daylight service computed from the observer's position with astral.

    Each date is computed once; lookups for a known date are dictionary hits.
    """

    CACHE_SIZE = 8  # Number of dates to keep

    def __init__(
        self,
        latitude: float,
        longitude: float,
        timezone: str,
        name: str = "Home",
        region: str = "",
    ) -> None:
        """
        Initialize the service.

        Args:
            latitude: Observer latitude in degrees
            longitude: Observer longitude in degrees
            timezone: IANA time zone name (e.g., "Europe/Berlin")
            name: Location name (informational)
            region: Region name (informational)

        Raises:
            ValueError: If the coordinates are out of range
            zoneinfo.ZoneInfoNotFoundError: If the time zone is unknown
        """
        if not -90.0 <= latitude <= 90.0:
            raise ValueError(f"Latitude must be within -90..90, got {latitude}")
        if not -180.0 <= longitude <= 180.0:
            raise ValueError(f"Longitude must be within -180..180, got {longitude}")

        self._tz = zoneinfo.ZoneInfo(timezone)
        self._location = LocationInfo(
            name=name,
            region=region,
            timezone=timezone,
            latitude=latitude,
            longitude=longitude,
        )
        self._cache: Dict[date, Tuple[Optional[time], Optional[time]]] = {}

    @property
    def timezone(self) -> zoneinfo.ZoneInfo:
        return self._tz

    def localize(self, moment: datetime) -> datetime:
        if moment.tzinfo is None:
            return moment.replace(tzinfo=self._tz)
        return moment.astimezone(self._tz)

    def is_daytime(self, moment: datetime) -> bool:
        local = self.localize(moment)
        rise, set_ = self._times_for(local.date())
        if rise is not None and set_ is not None:
            return rise <= local.time() < set_
        # Polar day or night: decide by the sun's elevation
        return astral_sun.elevation(self._location.observer, local) > 0.0

    def sunrise(self, day: date) -> Optional[time]:
        return self._times_for(day)[0]

    def sunset(self, day: date) -> Optional[time]:
        return self._times_for(day)[1]

    def _times_for(self, day: date) -> Tuple[Optional[time], Optional[time]]:
        cached = self._cache.get(day)
        if cached is not None:
            return cached

        times = (
            self._compute(astral_sun.sunrise, day),
            self._compute(astral_sun.sunset, day),
        )
        if len(self._cache) >= self.CACHE_SIZE:
            self._cache.pop(next(iter(self._cache)))
        self._cache[day] = times
        logger.debug(f"Daylight for {day.isoformat()}: sunrise={times[0]}, sunset={times[1]}")
        return times

    def _compute(self, func, day: date) -> Optional[time]:
        try:
            event = func(self._location.observer, date=day, tzinfo=self._tz)
        except ValueError:
            # astral raises when the sun never reaches the horizon that day
            return None
        if event.date() != day:
            # Event falls on a neighbouring local date (e.g., sunset after midnight)
            logger.debug(f"{func.__name__} for {day.isoformat()} falls on {event.date().isoformat()}")
            return None
        return event.time()
