"""
Explicit collaborator context handed to every automation at construction.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from home_automations.core.bus import EventBus

if TYPE_CHECKING:
    from home_automations.core.timer import Timer
    from home_automations.services.daylight import DaylightService
    from home_automations.services.weather import WeatherService


@dataclass(frozen=True)
class AutomationContext:
    """
    The services an automation may read from.

    Attributes:
        timer: Timer supplying the current time and ticks
        daylight: Daylight service (sunrise/sunset prediction)
        weather: Weather service (outside temperature)
        bus: Event bus for outbound state reporting
    """

    timer: "Timer"
    daylight: "DaylightService"
    weather: "WeatherService"
    bus: EventBus = field(default_factory=EventBus)
