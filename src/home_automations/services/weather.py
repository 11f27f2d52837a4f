"""
Weather services: the current outside temperature.

A reading may be absent. Remote fetches happen outside tick evaluation; the
host injects the result into ``CachedWeatherService``.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional
import logging
import math

if TYPE_CHECKING:
    from home_automations.core.timer import Timer

logger = logging.getLogger(__name__)


class WeatherService(ABC):
    """Abstract interface for weather readings."""

    @abstractmethod
    def current_outside_temperature(self) -> Optional[float]:
        """
        Get the current outside temperature.

        Returns:
            Temperature in °C, or None if no reading is available
        """
        pass


class StaticWeatherService(WeatherService):
    """Weather service returning a settable reading."""

    def __init__(self, temperature: Optional[float] = None) -> None:
        self._temperature = temperature

    def set_temperature(self, temperature: Optional[float]) -> None:
        """Set the reading (None = unavailable)."""
        self._temperature = temperature

    def current_outside_temperature(self) -> Optional[float]:
        return self._temperature


class CachedWeatherService(WeatherService):
    """
    Holds the last reading pushed by the host.

    Readings older than ``max_age`` are treated as unavailable.
    """

    def __init__(self, timer: "Timer", max_age: timedelta = timedelta(minutes=30)) -> None:
        """
        Initialize the cache.

        Args:
            timer: Timer used to judge reading age
            max_age: Age after which a reading is discarded
        """
        if max_age <= timedelta(0):
            raise ValueError(f"max_age must be positive, got {max_age}")
        self._timer = timer
        self._max_age = max_age
        self._temperature: Optional[float] = None
        self._updated_at: Optional[datetime] = None

    @property
    def updated_at(self) -> Optional[datetime]:
        return self._updated_at

    def update(self, temperature: Optional[float], at: Optional[datetime] = None) -> None:
        """
        Store a new reading.

        Args:
            temperature: Reading in °C (None or NaN clears the cache)
            at: When the reading was taken (defaults to timer.now())
        """
        if temperature is not None and math.isnan(temperature):
            temperature = None
        self._temperature = temperature
        self._updated_at = at or self._timer.now()
        logger.debug(f"Outside temperature updated: {temperature}")

    def current_outside_temperature(self) -> Optional[float]:
        if self._temperature is None or self._updated_at is None:
            return None

        age = self._timer.now() - self._updated_at
        if age > self._max_age:
            logger.warning(f"Outside temperature reading is stale ({age} old), ignoring it")
            return None

        return self._temperature
