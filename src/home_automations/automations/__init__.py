"""
Automations for home-automations.

Provides the automation lifecycle contract and the rule engines built on it.

Features:
- Explicit lifecycle (created → activated → deactivated)
- Roller shutter rule engine (heat protection, frost suppression,
  daylight schedule, debouncing)
- Edge-triggered conditional automation with predicate helpers
- Setup helpers that build and register automations in an area

Architecture:
    Controller ─ tick ─▶ Area ─▶ Automation.evaluate(now)
                                   │
                                   ├─ reads Daylight / Weather / Actuator
                                   └─ commands Actuator, publishes events
"""

from .base import Automation, AutomationState
from .models import (
    SpecialSettings,
    Decision,
    DecisionReason,
    CommandRecord,
    parse_time_of_day,
)
from .conditional import ConditionalAutomation
from .roller_shutter import RollerShutterAutomation
from .conditions import (
    time_range,
    is_daytime,
    is_night,
    outside_temperature_above,
    outside_temperature_below,
    all_of,
    any_of,
    negate,
)
from .setup import (
    automation_id_for,
    setup_roller_shutter_automation,
    setup_conditional_automation,
)

__all__ = [
    # Base
    "Automation",
    "AutomationState",
    # Models
    "SpecialSettings",
    "Decision",
    "DecisionReason",
    "CommandRecord",
    "parse_time_of_day",
    # Automations
    "ConditionalAutomation",
    "RollerShutterAutomation",
    # Conditions
    "time_range",
    "is_daytime",
    "is_night",
    "outside_temperature_above",
    "outside_temperature_below",
    "all_of",
    "any_of",
    "negate",
    # Setup
    "automation_id_for",
    "setup_roller_shutter_automation",
    "setup_conditional_automation",
]
