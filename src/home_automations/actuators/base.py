"""
Actuator capability interface.

The host provides concrete actuators that translate ``open``/``close`` into
device commands. How a binary output is toggled is not this library's
concern.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional

from home_automations.errors import ActuatorCommandFailure


class ActuatorState(Enum):
    """Reported or commanded position of an actuator."""

    OPEN = "open"
    CLOSED = "closed"
    UNKNOWN = "unknown"


class Actuator(ABC):
    """
    Open/close control surface of one physical device.

    Implementations raise ActuatorCommandFailure when a command does not
    succeed.
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """Unique identifier of the device."""
        pass

    @abstractmethod
    def open(self) -> None:
        """Command the device to open (or turn on)."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Command the device to close (or turn off)."""
        pass

    @abstractmethod
    def current_state(self) -> ActuatorState:
        """Get the device's current state."""
        pass


class MockActuator(Actuator):
    """
    Mock actuator for testing.

    Records commands and can be told to fail.
    """

    def __init__(self, id: str, state: ActuatorState = ActuatorState.UNKNOWN) -> None:
        self._id = id
        self._state = state
        self._commands: List[ActuatorState] = []
        self._failure: Optional[str] = None

    @property
    def id(self) -> str:
        return self._id

    def set_state(self, state: ActuatorState) -> None:
        """Set the reported state for testing (e.g., a manual change)."""
        self._state = state

    def set_failing(self, reason: Optional[str] = "simulated failure") -> None:
        """Make subsequent commands fail (None = succeed again)."""
        self._failure = reason

    def get_commands(self) -> List[ActuatorState]:
        """Get the successfully executed commands."""
        return self._commands.copy()

    def clear_commands(self) -> None:
        """Clear recorded commands."""
        self._commands.clear()

    # Actuator implementation

    def open(self) -> None:
        self._execute(ActuatorState.OPEN)

    def close(self) -> None:
        self._execute(ActuatorState.CLOSED)

    def current_state(self) -> ActuatorState:
        return self._state

    def _execute(self, target: ActuatorState) -> None:
        if self._failure is not None:
            raise ActuatorCommandFailure(self._id, target.value, self._failure)
        self._commands.append(target)
        self._state = target
