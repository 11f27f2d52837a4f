"""
Core components of the home-automations engine.

This package contains:
- bus: Event Bus implementation
- timer: Timer service and tick dispatch
- area: Area container and registration handles
- controller: Controller owning areas and actuator ownership
- context: Collaborator context passed to automations
"""

from home_automations.core.bus import Event, EventBus, EventFilter
from home_automations.core.timer import Timer, ManualTimer
from home_automations.core.context import AutomationContext
from home_automations.core.area import Area, AreaTickResult, AutomationHandle
from home_automations.core.controller import Controller

__all__ = [
    "Event",
    "EventBus",
    "EventFilter",
    "Timer",
    "ManualTimer",
    "AutomationContext",
    "Area",
    "AreaTickResult",
    "AutomationHandle",
    "Controller",
]
