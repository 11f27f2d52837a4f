"""
Error taxonomy for home-automations.

Configuration problems surface synchronously at setup time. Everything that
goes wrong while a tick is evaluated is contained by the area dispatcher.
"""

from typing import Optional


class AutomationError(Exception):
    """Base class for all home-automations errors."""


class ConfigurationError(AutomationError, ValueError):
    """Invalid automation parameters, rejected before activation."""


class LifecycleError(AutomationError, RuntimeError):
    """An automation was used outside the state that allows the operation."""


class EvaluationError(AutomationError):
    """
    A failure raised while an automation evaluated a tick.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, automation_id: str, message: str) -> None:
        super().__init__(f"Evaluation of '{automation_id}' failed: {message}")
        self.automation_id = automation_id


class DataUnavailableError(AutomationError):
    """A dependent service has no current reading."""


class ActuatorCommandFailure(AutomationError):
    """An actuator did not carry out an open/close command."""

    def __init__(self, actuator_id: str, command: str, reason: Optional[str] = None) -> None:
        message = f"Actuator '{actuator_id}' failed to {command}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.actuator_id = actuator_id
        self.command = command
