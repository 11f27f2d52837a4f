"""
Area: an ordered container of automations.

An Area routes ticks to its automations but owns no rule logic itself.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Dict, List, Optional
import logging

from home_automations.core.bus import Event
from home_automations.errors import ConfigurationError, EvaluationError

if TYPE_CHECKING:
    from home_automations.automations.base import Automation
    from home_automations.core.controller import Controller

logger = logging.getLogger(__name__)


@dataclass
class AreaTickResult:
    """Result of dispatching one tick to an area."""

    area_id: str
    evaluated: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)


@dataclass
class AutomationHandle:
    """
    Returned by ``Area.register``; used later to unregister.

    Attributes:
        automation: The registered automation
        area: The area it was registered in
    """

    automation: "Automation"
    area: "Area"

    @property
    def active(self) -> bool:
        """True while the automation is registered and activated."""
        return self.area.get_automation(self.automation.id) is self.automation and (
            self.automation.is_active
        )

    def unregister(self) -> bool:
        """Unregister (and deactivate) the automation."""
        return self.area.unregister(self.automation)


class Area:
    """
    A logical container of automations.

    Automations are evaluated in registration order, synchronously, once per
    tick. A failing automation is logged and skipped; it never stops the
    remaining automations or future ticks.
    """

    def __init__(self, id: str, controller: "Controller", name: Optional[str] = None) -> None:
        """
        Initialize an area.

        Args:
            id: Unique area identifier
            controller: Owning controller (supplies the automation context)
            name: Human-readable name (defaults to id)
        """
        self.id = id
        self.name = name or id
        self.controller = controller
        self._automations: Dict[str, "Automation"] = {}

    def __repr__(self) -> str:
        return f"Area(id={self.id!r}, automations={len(self._automations)})"

    # =========================================================================
    # Registry
    # =========================================================================

    def automations(self) -> List["Automation"]:
        """Get registered automations in evaluation order."""
        return list(self._automations.values())

    def get_automation(self, automation_id: str) -> Optional["Automation"]:
        """Get a registered automation by ID."""
        return self._automations.get(automation_id)

    def register(self, automation: "Automation") -> AutomationHandle:
        """
        Register and activate an automation.

        Args:
            automation: A freshly constructed automation for this area

        Returns:
            Handle that can later unregister the automation

        Raises:
            ConfigurationError: If the automation belongs to another area, its
                ID is already registered, or one of its actuators is owned by
                another automation
            LifecycleError: If the automation was already activated or deactivated
        """
        if automation.area_id != self.id:
            raise ConfigurationError(
                f"Automation '{automation.id}' belongs to area '{automation.area_id}', "
                f"not '{self.id}'"
            )
        if automation.id in self._automations:
            raise ConfigurationError(
                f"Automation '{automation.id}' is already registered in area '{self.id}'"
            )

        claimed: List[str] = []
        try:
            for actuator in automation.actuators():
                self.controller.claim_actuator(actuator.id, automation.id)
                claimed.append(actuator.id)
            automation.activate()
        except Exception:
            for actuator_id in claimed:
                self.controller.release_actuator(actuator_id, automation.id)
            raise

        self._automations[automation.id] = automation
        logger.info(f"Registered automation {automation.id} in area {self.id}")
        self._publish("automation.registered", automation.id)

        return AutomationHandle(automation=automation, area=self)

    def unregister(self, automation: "Automation") -> bool:
        """
        Deactivate and remove an automation.

        Args:
            automation: The automation to remove

        Returns:
            True if it was removed, False if it was not registered here
        """
        if self._automations.get(automation.id) is not automation:
            return False

        del self._automations[automation.id]
        automation.deactivate()
        for actuator in automation.actuators():
            self.controller.release_actuator(actuator.id, automation.id)

        logger.info(f"Unregistered automation {automation.id} from area {self.id}")
        self._publish("automation.unregistered", automation.id)
        return True

    # =========================================================================
    # Tick dispatch
    # =========================================================================

    def evaluate(self, now: datetime) -> AreaTickResult:
        """
        Evaluate every active automation once.

        Args:
            now: Tick time

        Returns:
            Counts of evaluated and failed automations
        """
        result = AreaTickResult(area_id=self.id)

        for automation in list(self._automations.values()):
            if not automation.is_active:
                continue

            result.evaluated += 1
            try:
                automation.evaluate(now)
            except Exception as e:
                if isinstance(e, EvaluationError):
                    error = e
                else:
                    error = EvaluationError(automation.id, f"{type(e).__name__}: {e}")
                    error.__cause__ = e

                result.failed += 1
                result.errors.append(str(error))
                logger.error(f"Error evaluating automation {automation.id}: {e}", exc_info=True)
                self._publish(
                    "automation.error",
                    automation.id,
                    {"error": str(error), "error_type": type(e).__name__},
                    timestamp=now,
                )

        return result

    def _publish(
        self,
        event_type: str,
        automation_id: str,
        payload: Optional[Dict] = None,
        timestamp: Optional[datetime] = None,
    ) -> None:
        event = Event(
            type=event_type,
            source="area",
            area_id=self.id,
            automation_id=automation_id,
            payload=payload or {},
        )
        if timestamp is not None:
            event.timestamp = timestamp
        self.controller.context.bus.publish(event)
