"""
Base class for automations.

An automation observes state and commands actuators. It is created by a
setup routine, activated once when its area registers it, evaluated once
per tick while active, and deactivated at most once.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional
import logging

from home_automations.core.bus import Event
from home_automations.core.context import AutomationContext
from home_automations.errors import ConfigurationError, LifecycleError

if TYPE_CHECKING:
    from home_automations.actuators import Actuator

logger = logging.getLogger(__name__)


class AutomationState(Enum):
    """Lifecycle of an automation. DEACTIVATED is terminal."""

    CREATED = "created"
    ACTIVATED = "activated"
    DEACTIVATED = "deactivated"


class Automation(ABC):
    """
    Base class for automations.

    Subclasses implement ``_evaluate``. Everything else (lifecycle
    bookkeeping, identity, state export) lives here.
    """

    KIND = "Automation"  # Used when deriving automation IDs

    def __init__(self, id: str, area_id: str, context: AutomationContext) -> None:
        """
        Initialize an automation.

        Args:
            id: Unique identifier within the area
            area_id: ID of the owning area
            context: Services this automation reads from

        Raises:
            ConfigurationError: If id or area_id is empty or context is missing
        """
        if not id:
            raise ConfigurationError("Automation id must not be empty")
        if not area_id:
            raise ConfigurationError(f"Automation '{id}' needs an area id")
        if context is None:
            raise ConfigurationError(f"Automation '{id}' needs an automation context")

        self._id = id
        self._area_id = area_id
        self._context = context
        self._state = AutomationState.CREATED

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id!r}, state={self._state.value})"

    @property
    def id(self) -> str:
        return self._id

    @property
    def area_id(self) -> str:
        return self._area_id

    @property
    def context(self) -> AutomationContext:
        return self._context

    @property
    def state(self) -> AutomationState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state == AutomationState.ACTIVATED

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def activate(self) -> None:
        """
        Activate the automation so it receives ticks.

        Raises:
            LifecycleError: If already activated or deactivated
        """
        if self._state != AutomationState.CREATED:
            raise LifecycleError(
                f"Automation '{self._id}' cannot be activated from state {self._state.value}"
            )
        self._state = AutomationState.ACTIVATED
        logger.debug(f"Activated automation {self._id}")

    def deactivate(self) -> None:
        """
        Deactivate the automation. No-op if already deactivated.

        Safe before activation: the automation then can never be activated.
        """
        if self._state == AutomationState.DEACTIVATED:
            return
        self._state = AutomationState.DEACTIVATED
        logger.debug(f"Deactivated automation {self._id}")

    def evaluate(self, now: datetime) -> None:
        """
        Evaluate one tick.

        Args:
            now: Tick time

        Raises:
            LifecycleError: If the automation is not activated
        """
        if self._state != AutomationState.ACTIVATED:
            raise LifecycleError(
                f"Automation '{self._id}' is {self._state.value}, cannot evaluate"
            )
        self._evaluate(now)

    @abstractmethod
    def _evaluate(self, now: datetime) -> None:
        """Evaluate one tick (called only while activated)."""
        pass

    # =========================================================================
    # Introspection
    # =========================================================================

    def actuators(self) -> List["Actuator"]:
        """
        Get the actuators this automation controls.

        Used by areas to guarantee one owner per actuator.
        """
        return []

    def default_config(self) -> Dict:
        """
        Get the default tunables for this automation type.

        Returns:
            Default configuration dict
        """
        return {}

    def config_schema(self) -> Dict:
        """
        Get a JSON-schema-like description of the tunables.

        Returns:
            Schema dict that UIs can use to render configuration forms
        """
        return {"type": "object", "properties": {}}

    def export_state(self) -> Dict[str, Any]:
        """
        Serialize identity and runtime state for state-reporting layers.

        Returns:
            State dict
        """
        return {
            "id": self._id,
            "area_id": self._area_id,
            "kind": self.KIND,
            "state": self._state.value,
        }

    def _publish(
        self,
        event_type: str,
        payload: Dict[str, Any],
        timestamp: Optional[datetime] = None,
    ) -> None:
        event = Event(
            type=event_type,
            source=self.KIND,
            area_id=self._area_id,
            automation_id=self._id,
            payload=payload,
        )
        if timestamp is not None:
            event.timestamp = timestamp
        self._context.bus.publish(event)
