"""
Controller: owns the areas and routes timer ticks to them.

The Controller owns the topology and the automation context, not the
behavior.
"""

from datetime import datetime
from typing import Dict, List, Optional
import logging

from home_automations.core.area import Area, AreaTickResult
from home_automations.core.context import AutomationContext
from home_automations.errors import ConfigurationError

logger = logging.getLogger(__name__)


class Controller:
    """
    Holds the areas of a home and dispatches ticks to them.

    Responsibilities:
    - Store areas in creation order
    - Subscribe to the timer and evaluate every area per tick
    - Track which automation owns which actuator

    Does NOT implement any rule logic.
    """

    def __init__(self, context: AutomationContext) -> None:
        """
        Initialize a controller.

        Args:
            context: Services handed to every automation created in its areas
        """
        self._context = context
        self._areas: Dict[str, Area] = {}
        self._actuator_owners: Dict[str, str] = {}
        self._attached = False

    @property
    def context(self) -> AutomationContext:
        return self._context

    # =========================================================================
    # Areas
    # =========================================================================

    def create_area(self, id: str, name: Optional[str] = None) -> Area:
        """
        Create a new area.

        Args:
            id: Unique identifier
            name: Human-readable name

        Returns:
            The created Area

        Raises:
            ValueError: If an area with this ID already exists
        """
        if id in self._areas:
            raise ValueError(f"Area with id '{id}' already exists")

        area = Area(id=id, controller=self, name=name)
        self._areas[id] = area
        logger.info(f"Created area: {id} ({area.name})")

        return area

    def get_area(self, area_id: str) -> Optional[Area]:
        """Get an area by ID, or None if not found."""
        return self._areas.get(area_id)

    def all_areas(self) -> List[Area]:
        """Get all areas in creation order."""
        return list(self._areas.values())

    # =========================================================================
    # Actuator ownership
    # =========================================================================

    def claim_actuator(self, actuator_id: str, automation_id: str) -> None:
        """
        Record that an automation controls an actuator.

        Raises:
            ConfigurationError: If another automation already owns the actuator
        """
        owner = self._actuator_owners.get(actuator_id)
        if owner is not None and owner != automation_id:
            raise ConfigurationError(
                f"Actuator '{actuator_id}' is already controlled by automation '{owner}'"
            )
        self._actuator_owners[actuator_id] = automation_id

    def release_actuator(self, actuator_id: str, automation_id: str) -> None:
        """Release an actuator claimed by an automation."""
        if self._actuator_owners.get(actuator_id) == automation_id:
            del self._actuator_owners[actuator_id]

    def actuator_owner(self, actuator_id: str) -> Optional[str]:
        """Get the ID of the automation controlling an actuator."""
        return self._actuator_owners.get(actuator_id)

    # =========================================================================
    # Tick dispatch
    # =========================================================================

    def attach(self) -> None:
        """Start receiving ticks from the context's timer."""
        if self._attached:
            return
        self._context.timer.on_tick(self.evaluate)
        self._attached = True
        logger.info("Controller attached to timer")

    def detach(self) -> None:
        """Stop receiving ticks."""
        if not self._attached:
            return
        self._context.timer.remove_tick_handler(self.evaluate)
        self._attached = False
        logger.info("Controller detached from timer")

    def evaluate(self, now: datetime) -> List[AreaTickResult]:
        """
        Dispatch one tick to every area, in creation order.

        Args:
            now: Tick time

        Returns:
            Per-area results
        """
        logger.debug(f"Dispatching tick {now.isoformat()} to {len(self._areas)} areas")
        return [area.evaluate(now) for area in list(self._areas.values())]
