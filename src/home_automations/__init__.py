"""
home-automations: a rule-evaluation engine for home actuators.

This library decides what state an actuator should be in and when to
command it:
- Areas holding automations, evaluated once per timer tick
- Roller shutter automation combining daylight, time and temperature
- Edge-triggered conditional automations
- Event Bus for outbound state reporting
"""

from home_automations.core.bus import Event, EventBus, EventFilter
from home_automations.core.timer import Timer, ManualTimer
from home_automations.core.context import AutomationContext
from home_automations.core.area import Area, AutomationHandle
from home_automations.core.controller import Controller
from home_automations.errors import (
    AutomationError,
    ConfigurationError,
    LifecycleError,
    EvaluationError,
    DataUnavailableError,
    ActuatorCommandFailure,
)

__version__ = "0.1.0"

__all__ = [
    "Event",
    "EventBus",
    "EventFilter",
    "Timer",
    "ManualTimer",
    "AutomationContext",
    "Area",
    "AutomationHandle",
    "Controller",
    "AutomationError",
    "ConfigurationError",
    "LifecycleError",
    "EvaluationError",
    "DataUnavailableError",
    "ActuatorCommandFailure",
]
