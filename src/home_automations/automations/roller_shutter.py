"""
Roller shutter automation: opens and closes one shutter by daylight, time
and outside temperature.

Rules, highest precedence first:

1. Heat protection: too hot outside → Closed.
2. Frost suppression: too cold outside → keep the current state.
3. Schedule: Open from max(sunrise, skip-before time), Closed from sunset.

Rules 1 and 2 need a temperature reading and are skipped without one.
The schedule only takes control once a daylight boundary has been crossed
after activation (or the automation has commanded the shutter), so
activation alone never moves the shutter.
"""

from collections import deque
from dataclasses import replace
from datetime import datetime, time, timedelta
from typing import TYPE_CHECKING, Any, Deque, Dict, List, Optional
import logging
import math

from home_automations.actuators import Actuator, ActuatorState
from home_automations.core.context import AutomationContext
from home_automations.errors import ConfigurationError, DataUnavailableError

from .base import Automation
from .models import CommandRecord, Decision, DecisionReason, SpecialSettings

if TYPE_CHECKING:
    from home_automations.services import DaylightService

logger = logging.getLogger(__name__)


class RollerShutterAutomation(Automation):
    """
    Core rule engine for one roller shutter.

    Responsibilities:
    - Combine temperature overrides and the daylight schedule into a target
    - Debounce commands (minimum interval, no repeats of the last command)
    - Issue at most one actuator command per tick
    - Keep the last decision and a command history for state reporting
    """

    KIND = "RollerShutterAutomation"
    HISTORY_SIZE = 50  # Number of issued commands to keep in history
    DEFAULT_MIN_TRANSITION_INTERVAL = timedelta(minutes=5)

    def __init__(
        self,
        id: str,
        area_id: str,
        context: AutomationContext,
        actuator: Actuator,
        settings: Optional[SpecialSettings] = None,
        *,
        min_transition_interval: timedelta = DEFAULT_MIN_TRANSITION_INTERVAL,
        trust_actuator_state: bool = True,
    ) -> None:
        """
        Initialize the automation.

        Args:
            id: Unique identifier within the area
            area_id: ID of the owning area
            context: Services (timer, daylight, weather, bus)
            actuator: The shutter to command
            settings: Override settings (defaults: all overrides disabled)
            min_transition_interval: Minimum time between two issued commands
            trust_actuator_state: Skip commands when the actuator already
                reports the target state

        Raises:
            ConfigurationError: If any argument is invalid
        """
        super().__init__(id, area_id, context)

        if actuator is None:
            raise ConfigurationError(f"Automation '{id}' needs an actuator")
        if settings is None:
            settings = SpecialSettings()
        if not isinstance(settings, SpecialSettings):
            raise ConfigurationError(f"settings must be SpecialSettings, got {type(settings).__name__}")
        if not isinstance(min_transition_interval, timedelta):
            raise ConfigurationError(
                f"min_transition_interval must be a timedelta, got {min_transition_interval!r}"
            )
        if min_transition_interval < timedelta(0):
            raise ConfigurationError(
                f"min_transition_interval must not be negative, got {min_transition_interval}"
            )

        self._actuator = actuator
        self._settings = settings
        self._min_transition_interval = min_transition_interval
        self._trust_actuator_state = trust_actuator_state

        # Debounce bookkeeping
        self._last_commanded_target: Optional[ActuatorState] = None
        self._last_transition_at: Optional[datetime] = None

        # Schedule engagement
        self._last_phase: Optional[ActuatorState] = None
        self._engaged = False

        self._temperature_available = True
        self._last_decision: Optional[Decision] = None
        self._history: Deque[CommandRecord] = deque(maxlen=self.HISTORY_SIZE)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def actuator(self) -> Actuator:
        return self._actuator

    @property
    def settings(self) -> SpecialSettings:
        return self._settings

    @property
    def min_transition_interval(self) -> timedelta:
        return self._min_transition_interval

    @property
    def last_commanded_target(self) -> Optional[ActuatorState]:
        return self._last_commanded_target

    @property
    def last_transition_at(self) -> Optional[datetime]:
        return self._last_transition_at

    @property
    def last_decision(self) -> Optional[Decision]:
        return self._last_decision

    def actuators(self) -> List[Actuator]:
        return [self._actuator]

    # =========================================================================
    # Evaluation
    # =========================================================================

    def _evaluate(self, now: datetime) -> None:
        daylight = self._context.daylight
        local_now = daylight.localize(now)
        temperature = self._read_temperature()
        current = self._actuator.current_state()

        decision = self._decide(local_now, temperature, current, daylight)
        decision = self._apply(decision, now, current)

        self._last_decision = decision
        logger.debug(
            f"{self._id}: target={decision.target.value} reason={decision.reason.value} "
            f"temperature={temperature} commanded={decision.commanded} "
            f"suppressed_by={decision.suppressed_by}"
        )

    def _decide(
        self,
        local_now: datetime,
        temperature: Optional[float],
        current: ActuatorState,
        daylight: "DaylightService",
    ) -> Decision:
        """Compute the candidate target; first matching rule wins."""
        settings = self._settings

        # The phase is tracked every tick so boundaries crossed during an
        # override still engage the schedule.
        phase = self._schedule_phase(local_now, daylight)
        if self._last_phase is not None and phase != self._last_phase:
            if not self._engaged:
                logger.debug(f"{self._id}: schedule engaged at {local_now.isoformat()}")
            self._engaged = True
        self._last_phase = phase

        if temperature is not None:
            if (
                settings.auto_close_if_too_hot_enabled
                and temperature > settings.auto_close_if_too_hot_temperature
            ):
                return Decision(ActuatorState.CLOSED, DecisionReason.HEAT_PROTECTION, temperature)

            if (
                settings.skip_if_frozen_enabled
                and temperature < settings.skip_if_frozen_temperature
            ):
                return Decision(current, DecisionReason.FROST_SUPPRESSION, temperature)

        if not self._engaged:
            return Decision(current, DecisionReason.WAITING_FOR_BOUNDARY, temperature)

        return Decision(phase, DecisionReason.SCHEDULE, temperature)

    def _schedule_phase(self, local_now: datetime, daylight: "DaylightService") -> ActuatorState:
        """Get the state the daylight schedule asks for at this moment."""
        day = local_now.date()
        current_time = local_now.time()
        sunrise = daylight.sunrise(day)
        sunset = daylight.sunset(day)

        if sunrise is None or sunset is None:
            # No sunrise or sunset today (polar day/night)
            if not daylight.is_daytime(local_now):
                return ActuatorState.CLOSED
            if self._is_before_skip_time(current_time):
                return ActuatorState.CLOSED
            return ActuatorState.OPEN

        open_at = sunrise
        if self._settings.skip_before_timestamp_enabled:
            open_at = max(sunrise, self._settings.skip_before_timestamp)

        if current_time >= sunset:
            return ActuatorState.CLOSED
        if current_time >= open_at:
            return ActuatorState.OPEN
        return ActuatorState.CLOSED

    def _is_before_skip_time(self, current_time: time) -> bool:
        return (
            self._settings.skip_before_timestamp_enabled
            and current_time < self._settings.skip_before_timestamp
        )

    def _read_temperature(self) -> Optional[float]:
        """Read the outside temperature; unavailable readings become None."""
        try:
            temperature = self._context.weather.current_outside_temperature()
        except DataUnavailableError as e:
            logger.debug(f"{self._id}: temperature unavailable: {e}")
            temperature = None

        if temperature is not None and math.isnan(temperature):
            temperature = None

        needs_temperature = (
            self._settings.skip_if_frozen_enabled or self._settings.auto_close_if_too_hot_enabled
        )
        if temperature is None and needs_temperature and self._temperature_available:
            logger.warning(
                f"{self._id}: no outside temperature, temperature rules skipped "
                f"until a reading is available"
            )
        self._temperature_available = temperature is not None

        return None if temperature is None else float(temperature)

    # =========================================================================
    # Commanding
    # =========================================================================

    def _apply(self, decision: Decision, now: datetime, current: ActuatorState) -> Decision:
        """Debounce the candidate and issue the command if it survives."""
        if decision.reason.retains_state:
            return replace(decision, suppressed_by="retain")

        target = decision.target

        if target == self._last_commanded_target:
            return replace(decision, suppressed_by="already_commanded")

        if (
            self._last_transition_at is not None
            and now - self._last_transition_at < self._min_transition_interval
        ):
            logger.debug(
                f"{self._id}: {target.value} suppressed, last transition at "
                f"{self._last_transition_at.isoformat()}"
            )
            return replace(decision, suppressed_by="debounce")

        if self._trust_actuator_state and current == target:
            # Already there: becomes the last target, without a transition
            self._last_commanded_target = target
            return replace(decision, suppressed_by="already_in_state")

        try:
            if target == ActuatorState.OPEN:
                self._actuator.open()
            else:
                self._actuator.close()
        except Exception as e:
            logger.error(
                f"{self._id}: failed to {target.value} {self._actuator.id}: {e}",
                exc_info=True,
            )
            self._publish(
                "roller_shutter.command_failed",
                {
                    "actuator_id": self._actuator.id,
                    "target": target.value,
                    "reason": decision.reason.value,
                    "error": str(e),
                },
                timestamp=now,
            )
            return replace(decision, suppressed_by="command_failed")

        self._last_commanded_target = target
        self._last_transition_at = now
        self._engaged = True
        self._history.append(
            CommandRecord(
                target=target,
                reason=decision.reason,
                temperature=decision.temperature,
                timestamp=now,
            )
        )

        logger.info(
            f"{self._id}: commanded {self._actuator.id} -> {target.value} ({decision.reason.value})"
        )
        self._publish(
            "roller_shutter.command_issued",
            {
                "actuator_id": self._actuator.id,
                "target": target.value,
                "reason": decision.reason.value,
                "temperature": decision.temperature,
            },
            timestamp=now,
        )
        return replace(decision, commanded=True)

    # =========================================================================
    # History / State
    # =========================================================================

    def get_history(self, limit: int = 20) -> List[CommandRecord]:
        """
        Get issued commands.

        Args:
            limit: Maximum entries to return

        Returns:
            Command records (newest first)
        """
        return list(reversed(self._history))[:limit]

    def default_config(self) -> Dict:
        """Get default roller shutter configuration."""
        config = SpecialSettings().to_dict()
        config["min_transition_interval_seconds"] = int(
            self.DEFAULT_MIN_TRANSITION_INTERVAL.total_seconds()
        )
        config["trust_actuator_state"] = True
        return config

    def config_schema(self) -> Dict:
        """
        Get configuration schema for the roller shutter automation.

        Returns a JSON-schema-like structure for UI rendering.
        """
        return {
            "type": "object",
            "properties": {
                "skip_before_timestamp_enabled": {
                    "type": "boolean",
                    "title": "Do not open before",
                    "default": False,
                },
                "skip_before_timestamp": {
                    "type": "string",
                    "title": "Earliest opening time",
                    "description": "Time of day (HH:MM) before which the shutter stays closed",
                    "default": "07:15:00",
                },
                "skip_if_frozen_enabled": {
                    "type": "boolean",
                    "title": "Do not open when frozen",
                    "default": False,
                },
                "skip_if_frozen_temperature": {
                    "type": "number",
                    "title": "Frost threshold (°C)",
                    "description": "Below this outside temperature the shutter is not moved",
                    "minimum": 0,
                    "default": 2.0,
                },
                "auto_close_if_too_hot_enabled": {
                    "type": "boolean",
                    "title": "Close when too hot",
                    "default": False,
                },
                "auto_close_if_too_hot_temperature": {
                    "type": "number",
                    "title": "Heat threshold (°C)",
                    "description": "Above this outside temperature the shutter is closed",
                    "minimum": 0,
                    "default": 25.0,
                },
                "min_transition_interval_seconds": {
                    "type": "integer",
                    "title": "Minimum interval between movements (s)",
                    "minimum": 0,
                    "default": int(self.DEFAULT_MIN_TRANSITION_INTERVAL.total_seconds()),
                },
                "trust_actuator_state": {
                    "type": "boolean",
                    "title": "Trust actuator state",
                    "description": "Skip commands when the shutter already reports the target state",
                    "default": True,
                },
            },
        }

    def export_state(self) -> Dict[str, Any]:
        """Export identity, decision and debounce state."""
        state = super().export_state()
        state.update(
            {
                "actuator_id": self._actuator.id,
                "actuator_state": self._actuator.current_state().value,
                "last_commanded_target": (
                    self._last_commanded_target.value if self._last_commanded_target else None
                ),
                "last_transition_at": (
                    self._last_transition_at.isoformat() if self._last_transition_at else None
                ),
                "engaged": self._engaged,
                "last_decision": self._last_decision.to_dict() if self._last_decision else None,
                "settings": self._settings.to_dict(),
                "min_transition_interval_seconds": self._min_transition_interval.total_seconds(),
            }
        )
        return state
