#!/usr/bin/env python3
"""
Quick example demonstrating home-automations basic usage.

Run with: PYTHONPATH=src python3 example.py
"""

import logging
from datetime import datetime, time, timedelta, UTC

from home_automations import AutomationContext, Controller, EventBus, EventFilter, ManualTimer
from home_automations.actuators import ActuatorState, MockActuator
from home_automations.automations import (
    SpecialSettings,
    all_of,
    is_night,
    setup_conditional_automation,
    setup_roller_shutter_automation,
    time_range,
)
from home_automations.services import StaticDaylightService, StaticWeatherService

logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

print("=" * 60)
print("home-automations Example")
print("=" * 60)

# 1. Services
print("\n1. Creating services...")
timer = ManualTimer(datetime(2025, 6, 15, 5, 0, tzinfo=UTC))
daylight = StaticDaylightService(sunrise=time(5, 45), sunset=time(21, 15))
weather = StaticWeatherService(14.0)
bus = EventBus()
controller = Controller(AutomationContext(timer=timer, daylight=daylight, weather=weather, bus=bus))
controller.attach()
print("   ✓ Timer, daylight, weather and EventBus created")

# 2. Areas and automations
print("\n2. Registering automations...")
bedroom = controller.create_area("bedroom", name="Bedroom")
shutter = MockActuator("cover.bedroom", ActuatorState.CLOSED)
handle = setup_roller_shutter_automation(
    bedroom,
    shutter,
    SpecialSettings()
    .with_do_not_open_before("07:30")
    .with_do_not_open_if_outside_temperature_below(2.0)
    .with_close_if_outside_temperature_above(26.0),
)
print(f"   ✓ Registered: {handle.automation.id}")

garden = controller.create_area("garden", name="Garden")
lamp = MockActuator("switch.garden_lamp", ActuatorState.CLOSED)
lamp_handle = setup_conditional_automation(
    garden,
    all_of(is_night(daylight), time_range("21:00", "23:30", daylight)),
    on_action=lamp.open,
    off_action=lamp.close,
)
print(f"   ✓ Registered: {lamp_handle.automation.id}")

# 3. Watch events
bus.subscribe(
    lambda e: print(
        f"   → {e.timestamp:%H:%M} {e.automation_id}: "
        f"{e.payload['target']} ({e.payload['reason']})"
    ),
    EventFilter(event_type="roller_shutter.command_issued"),
)
bus.subscribe(
    lambda e: print(f"   → {e.timestamp:%H:%M} {e.automation_id}: {e.payload['edge']} edge"),
    EventFilter(event_type="conditional.fired"),
)

# 4. Run a day, with a hot afternoon
print("\n3. Running one day (one tick per minute)...")
for minute in range(20 * 60):
    now = timer.advance(timedelta(minutes=1))
    if now.hour == 13 and now.minute == 0:
        weather.set_temperature(29.0)
    elif now.hour == 16 and now.minute == 0:
        weather.set_temperature(22.0)

# 5. Inspect state
print("\n4. Exported state...")
state = handle.automation.export_state()
print(f"   ✓ Shutter: {state['actuator_state']} (last decision: {state['last_decision']['reason']})")
print(f"   ✓ Commands issued: {[c.value for c in shutter.get_commands()]}")
print(f"   ✓ Lamp commands: {[c.value for c in lamp.get_commands()]}")

print("\n" + "=" * 60)
print("Example complete!")
print("=" * 60)
