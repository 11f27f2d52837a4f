"""
Setup helpers: build an automation from an area's context and register it.
"""

from datetime import timedelta
from typing import TYPE_CHECKING, Optional

from home_automations.actuators import Actuator

from .conditional import Action, ConditionalAutomation, Predicate
from .models import SpecialSettings
from .roller_shutter import RollerShutterAutomation

if TYPE_CHECKING:
    from home_automations.core.area import Area, AutomationHandle


def automation_id_for(area: "Area", kind: str) -> str:
    """
    Derive a unique automation ID within an area.

    The first automation of a kind gets "<area>.<kind>", later ones
    "<area>.<kind>.2", "<area>.<kind>.3", ...
    """
    base = f"{area.id}.{kind}"
    if area.get_automation(base) is None:
        return base

    n = 2
    while area.get_automation(f"{base}.{n}") is not None:
        n += 1
    return f"{base}.{n}"


def setup_roller_shutter_automation(
    area: "Area",
    actuator: Actuator,
    settings: Optional[SpecialSettings] = None,
    *,
    min_transition_interval: timedelta = RollerShutterAutomation.DEFAULT_MIN_TRANSITION_INTERVAL,
    trust_actuator_state: bool = True,
    automation_id: Optional[str] = None,
) -> "AutomationHandle":
    """
    Create a roller shutter automation in an area and register it.

    Args:
        area: Area to register in
        actuator: The shutter to command
        settings: Override settings (validated before registration)
        min_transition_interval: Minimum time between two issued commands
        trust_actuator_state: Skip commands when already in the target state
        automation_id: Explicit ID (derived from the area if omitted)

    Returns:
        Handle of the registered automation

    Raises:
        ConfigurationError: If parameters are invalid or the actuator is
            already controlled by another automation

    Example:
        handle = setup_roller_shutter_automation(
            bedroom,
            shutter,
            SpecialSettings().with_do_not_open_before("08:00"),
        )
    """
    automation = RollerShutterAutomation(
        automation_id or automation_id_for(area, RollerShutterAutomation.KIND),
        area.id,
        area.controller.context,
        actuator,
        settings,
        min_transition_interval=min_transition_interval,
        trust_actuator_state=trust_actuator_state,
    )
    return area.register(automation)


def setup_conditional_automation(
    area: "Area",
    predicate: Predicate,
    on_action: Action,
    off_action: Optional[Action] = None,
    *,
    automation_id: Optional[str] = None,
) -> "AutomationHandle":
    """
    Create a conditional automation in an area and register it.

    Args:
        area: Area to register in
        predicate: Callable receiving the tick time
        on_action: Runs when the predicate becomes true
        off_action: Runs when the predicate becomes false (optional)
        automation_id: Explicit ID (derived from the area if omitted)

    Returns:
        Handle of the registered automation

    Example:
        handle = setup_conditional_automation(
            garden,
            all_of(is_night(daylight), time_range("18:00", "23:00", daylight)),
            on_action=lamp.open,
            off_action=lamp.close,
        )
    """
    automation = ConditionalAutomation(
        automation_id or automation_id_for(area, ConditionalAutomation.KIND),
        area.id,
        area.controller.context,
        predicate,
        on_action,
        off_action,
    )
    return area.register(automation)
