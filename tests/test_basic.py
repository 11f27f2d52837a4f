"""
Basic smoke tests for home-automations wiring.
"""

from datetime import datetime, time, timedelta, UTC

from home_automations import AutomationContext, Controller, EventBus, ManualTimer
from home_automations.actuators import ActuatorState, MockActuator
from home_automations.automations import (
    SpecialSettings,
    setup_conditional_automation,
    setup_roller_shutter_automation,
    time_range,
)
from home_automations.services import StaticDaylightService, StaticWeatherService

MORNING = datetime(2025, 6, 15, 6, 0, tzinfo=UTC)


def make_controller():
    context = AutomationContext(
        timer=ManualTimer(MORNING),
        daylight=StaticDaylightService(sunrise=time(6, 30), sunset=time(20, 0)),
        weather=StaticWeatherService(15.0),
        bus=EventBus(),
    )
    return Controller(context)


def test_package_version():
    """Test the package exposes a version."""
    import home_automations

    assert home_automations.__version__ == "0.1.0"


def test_timer_drives_areas():
    """Test a full day driven through the timer."""
    controller = make_controller()
    controller.attach()
    timer = controller.context.timer

    bedroom = controller.create_area("bedroom", name="Bedroom")
    shutter = MockActuator("cover.bedroom", ActuatorState.CLOSED)
    setup_roller_shutter_automation(
        bedroom, shutter, SpecialSettings().with_do_not_open_before("07:00")
    )

    lamp = MockActuator("switch.porch_lamp", ActuatorState.CLOSED)
    porch = controller.create_area("porch")
    setup_conditional_automation(
        porch, time_range("19:00", "23:00"), on_action=lamp.open, off_action=lamp.close
    )

    # One tick every 15 minutes for 18 hours
    for _ in range(18 * 4):
        timer.advance(timedelta(minutes=15))

    assert shutter.get_commands() == [ActuatorState.OPEN, ActuatorState.CLOSED]
    assert lamp.get_commands() == [ActuatorState.OPEN, ActuatorState.CLOSED]


def test_detach_stops_evaluation():
    """Test detached controllers no longer receive ticks."""
    controller = make_controller()
    controller.attach()
    area = controller.create_area("bedroom")
    shutter = MockActuator("cover.bedroom", ActuatorState.CLOSED)
    setup_roller_shutter_automation(area, shutter)

    controller.detach()
    controller.context.timer.advance(timedelta(hours=1))

    assert shutter.get_commands() == []


def test_unregister_releases_actuator():
    """Test an actuator can be reused after its automation is unregistered."""
    controller = make_controller()
    area = controller.create_area("bedroom")
    shutter = MockActuator("cover.bedroom")

    handle = setup_roller_shutter_automation(area, shutter)
    assert controller.actuator_owner("cover.bedroom") == handle.automation.id

    assert handle.unregister()
    assert not handle.active
    assert controller.actuator_owner("cover.bedroom") is None

    second = setup_roller_shutter_automation(area, shutter)
    assert second.active
