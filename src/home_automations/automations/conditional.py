"""
Conditional automation: runs actions on edges of a boolean predicate.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Optional
import logging

from home_automations.core.context import AutomationContext
from home_automations.errors import ConfigurationError

from .base import Automation

logger = logging.getLogger(__name__)

Predicate = Callable[[datetime], bool]
Action = Callable[[], None]


class ConditionalAutomation(Automation):
    """
    Edge-triggered automation.

    On a rising edge (False → True) the on-action runs; on a falling edge
    (True → False) the optional off-action runs. While the predicate holds
    steady nothing runs. The last observed value starts out False.
    """

    KIND = "ConditionalAutomation"

    def __init__(
        self,
        id: str,
        area_id: str,
        context: AutomationContext,
        predicate: Predicate,
        on_action: Action,
        off_action: Optional[Action] = None,
    ) -> None:
        """
        Initialize the automation.

        Args:
            id: Unique identifier within the area
            area_id: ID of the owning area
            context: Services (timer, daylight, weather, bus)
            predicate: Callable receiving the tick time, returning the condition
            on_action: Runs on a rising edge
            off_action: Runs on a falling edge (optional)

        Raises:
            ConfigurationError: If predicate or actions are not callable
        """
        super().__init__(id, area_id, context)

        if not callable(predicate):
            raise ConfigurationError(f"Automation '{id}': predicate must be callable")
        if not callable(on_action):
            raise ConfigurationError(f"Automation '{id}': on_action must be callable")
        if off_action is not None and not callable(off_action):
            raise ConfigurationError(f"Automation '{id}': off_action must be callable")

        self._predicate = predicate
        self._on_action = on_action
        self._off_action = off_action
        self._last_value = False
        self._rising_count = 0
        self._falling_count = 0

    @property
    def last_value(self) -> bool:
        return self._last_value

    def _evaluate(self, now: datetime) -> None:
        value = bool(self._predicate(now))
        previous = self._last_value
        self._last_value = value

        if value == previous:
            return

        if value:
            edge = "rising"
            action = self._on_action
            self._rising_count += 1
        else:
            edge = "falling"
            action = self._off_action
            self._falling_count += 1

        if action is None:
            logger.debug(f"{self._id}: {edge} edge, no action configured")
            return

        logger.info(f"{self._id}: {edge} edge, running action")
        action()
        self._publish("conditional.fired", {"edge": edge, "value": value}, timestamp=now)

    def export_state(self) -> Dict[str, Any]:
        """Export identity and edge-detection state."""
        state = super().export_state()
        state.update(
            {
                "last_value": self._last_value,
                "rising_edges": self._rising_count,
                "falling_edges": self._falling_count,
                "has_off_action": self._off_action is not None,
            }
        )
        return state
