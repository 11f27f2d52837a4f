"""
Data models for the roller shutter automation.

Defines the special settings value object, decisions, and command records.
"""

from dataclasses import dataclass, replace
from datetime import datetime, time, timedelta
from enum import Enum
from typing import Any, Dict, Optional
import math

from home_automations.actuators import ActuatorState
from home_automations.errors import ConfigurationError


# =============================================================================
# Special Settings
# =============================================================================


def parse_time_of_day(value: Any) -> time:
    """
    Parse a time-of-day value.

    Accepts a ``time``, an "HH:MM"/"HH:MM:SS" string, or a ``timedelta`` in
    [0, 24h).

    Raises:
        ConfigurationError: If the value is not a valid time of day
    """
    if isinstance(value, time):
        return value.replace(tzinfo=None)

    if isinstance(value, timedelta):
        if value < timedelta(0) or value >= timedelta(days=1):
            raise ConfigurationError(f"Time of day must be within 00:00-23:59, got {value}")
        seconds = int(value.total_seconds())
        return time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)

    if isinstance(value, str):
        text = value.strip()
        parts = text.split(":")
        if len(parts) not in (2, 3) or not all(p.isdigit() and len(p) == 2 for p in parts):
            raise ConfigurationError(f"Malformed time of day: {value!r} (expected HH:MM)")
        try:
            return time.fromisoformat(text)
        except ValueError as e:
            raise ConfigurationError(f"Time of day out of range: {value!r}") from e

    raise ConfigurationError(f"Unsupported time of day value: {value!r}")


def _check_threshold(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        raise ConfigurationError(f"{name} must be finite, got {value}")
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {value}")
    return value


@dataclass(frozen=True)
class SpecialSettings:
    """
    Override settings of a roller shutter automation.

    A threshold only affects decisions while its ``*_enabled`` flag is set.
    Instances are validated on construction and never change afterwards;
    the ``with_*`` helpers return new instances.
    """

    skip_before_timestamp_enabled: bool = False
    skip_before_timestamp: time = time(7, 15)
    skip_if_frozen_enabled: bool = False
    skip_if_frozen_temperature: float = 2.0
    auto_close_if_too_hot_enabled: bool = False
    auto_close_if_too_hot_temperature: float = 25.0

    def __post_init__(self) -> None:
        for flag in (
            "skip_before_timestamp_enabled",
            "skip_if_frozen_enabled",
            "auto_close_if_too_hot_enabled",
        ):
            if not isinstance(getattr(self, flag), bool):
                raise ConfigurationError(f"{flag} must be a bool, got {getattr(self, flag)!r}")

        # Frozen dataclass: normalized values are written through object.__setattr__
        object.__setattr__(
            self, "skip_before_timestamp", parse_time_of_day(self.skip_before_timestamp)
        )
        object.__setattr__(
            self,
            "skip_if_frozen_temperature",
            _check_threshold("skip_if_frozen_temperature", self.skip_if_frozen_temperature),
        )
        object.__setattr__(
            self,
            "auto_close_if_too_hot_temperature",
            _check_threshold(
                "auto_close_if_too_hot_temperature", self.auto_close_if_too_hot_temperature
            ),
        )

    def with_do_not_open_before(self, minimum: Any) -> "SpecialSettings":
        """Enable the skip-before rule at the given time of day."""
        return replace(self, skip_before_timestamp_enabled=True, skip_before_timestamp=minimum)

    def with_do_not_open_if_outside_temperature_below(self, minimum: float) -> "SpecialSettings":
        """Enable frost suppression below the given temperature."""
        return replace(self, skip_if_frozen_enabled=True, skip_if_frozen_temperature=minimum)

    def with_close_if_outside_temperature_above(self, maximum: float) -> "SpecialSettings":
        """Enable heat protection above the given temperature."""
        return replace(
            self,
            auto_close_if_too_hot_enabled=True,
            auto_close_if_too_hot_temperature=maximum,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "skip_before_timestamp_enabled": self.skip_before_timestamp_enabled,
            "skip_before_timestamp": self.skip_before_timestamp.strftime("%H:%M:%S"),
            "skip_if_frozen_enabled": self.skip_if_frozen_enabled,
            "skip_if_frozen_temperature": self.skip_if_frozen_temperature,
            "auto_close_if_too_hot_enabled": self.auto_close_if_too_hot_enabled,
            "auto_close_if_too_hot_temperature": self.auto_close_if_too_hot_temperature,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SpecialSettings":
        """Deserialize from dict (missing keys take defaults)."""
        defaults = cls()
        return cls(
            skip_before_timestamp_enabled=data.get(
                "skip_before_timestamp_enabled", defaults.skip_before_timestamp_enabled
            ),
            skip_before_timestamp=data.get(
                "skip_before_timestamp", defaults.skip_before_timestamp
            ),
            skip_if_frozen_enabled=data.get(
                "skip_if_frozen_enabled", defaults.skip_if_frozen_enabled
            ),
            skip_if_frozen_temperature=data.get(
                "skip_if_frozen_temperature", defaults.skip_if_frozen_temperature
            ),
            auto_close_if_too_hot_enabled=data.get(
                "auto_close_if_too_hot_enabled", defaults.auto_close_if_too_hot_enabled
            ),
            auto_close_if_too_hot_temperature=data.get(
                "auto_close_if_too_hot_temperature", defaults.auto_close_if_too_hot_temperature
            ),
        )


# =============================================================================
# Decisions
# =============================================================================


class DecisionReason(Enum):
    """Which rule produced a roller shutter decision."""

    HEAT_PROTECTION = "heat_protection"
    FROST_SUPPRESSION = "frost_suppression"
    SCHEDULE = "schedule"
    WAITING_FOR_BOUNDARY = "waiting_for_boundary"  # Not engaged yet, keep current state

    @property
    def retains_state(self) -> bool:
        """True if the rule keeps the current state instead of commanding one."""
        return self in (DecisionReason.FROST_SUPPRESSION, DecisionReason.WAITING_FOR_BOUNDARY)


@dataclass(frozen=True)
class Decision:
    """
    Outcome of one roller shutter evaluation.

    Attributes:
        target: Target state (the current state for retaining rules)
        reason: Rule that determined the target
        temperature: Outside temperature used (None if unavailable)
        commanded: True if an actuator command was issued
        suppressed_by: Why no command was issued (None if commanded)
    """

    target: ActuatorState
    reason: DecisionReason
    temperature: Optional[float] = None
    commanded: bool = False
    suppressed_by: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "target": self.target.value,
            "reason": self.reason.value,
            "temperature": self.temperature,
            "commanded": self.commanded,
            "suppressed_by": self.suppressed_by,
        }


# =============================================================================
# Command Records
# =============================================================================


@dataclass(frozen=True)
class CommandRecord:
    """Record of an issued actuator command (for history/debugging)."""

    target: ActuatorState
    reason: DecisionReason
    temperature: Optional[float]
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "target": self.target.value,
            "reason": self.reason.value,
            "temperature": self.temperature,
            "timestamp": self.timestamp.isoformat(),
        }
