"""
Services consumed by automations.

- daylight: sunrise/sunset prediction (static or computed with astral)
- weather: outside temperature (static or host-fed cache)
"""

from home_automations.services.daylight import (
    DaylightService,
    StaticDaylightService,
    AstralDaylightService,
)
from home_automations.services.weather import (
    WeatherService,
    StaticWeatherService,
    CachedWeatherService,
)

__all__ = [
    "DaylightService",
    "StaticDaylightService",
    "AstralDaylightService",
    "WeatherService",
    "StaticWeatherService",
    "CachedWeatherService",
]
