"""
Actuator capabilities commanded by automations.
"""

from home_automations.actuators.base import ActuatorState, Actuator, MockActuator

__all__ = ["ActuatorState", "Actuator", "MockActuator"]
