"""Tests for the event bus."""

from home_automations import Event, EventBus, EventFilter


def make_event(event_type="automation.error", area_id="kitchen", automation_id="kitchen.x"):
    return Event(
        type=event_type,
        source="test",
        area_id=area_id,
        automation_id=automation_id,
        payload={"value": 1},
    )


class TestEventFilter:
    """Tests for filter matching."""

    def test_empty_filter_matches_everything(self):
        assert EventFilter().matches(make_event())

    def test_filter_by_type(self):
        event_filter = EventFilter(event_type="automation.error")

        assert event_filter.matches(make_event("automation.error"))
        assert not event_filter.matches(make_event("automation.registered"))

    def test_filter_by_area(self):
        event_filter = EventFilter(area_id="kitchen")

        assert event_filter.matches(make_event(area_id="kitchen"))
        assert not event_filter.matches(make_event(area_id="hall"))
        assert not event_filter.matches(make_event(area_id=None))

    def test_filter_by_automation(self):
        event_filter = EventFilter(automation_id="kitchen.x")

        assert event_filter.matches(make_event(automation_id="kitchen.x"))
        assert not event_filter.matches(make_event(automation_id="kitchen.y"))


class TestEventBus:
    """Tests for publish/subscribe."""

    def test_publish_reaches_matching_subscribers(self):
        bus = EventBus()
        errors, everything = [], []
        bus.subscribe(errors.append, EventFilter(event_type="automation.error"))
        bus.subscribe(everything.append)

        bus.publish(make_event("automation.error"))
        bus.publish(make_event("automation.registered"))

        assert len(errors) == 1
        assert len(everything) == 2

    def test_failing_handler_is_isolated(self):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("subscriber bug")

        bus.subscribe(broken)
        bus.subscribe(received.append)

        bus.publish(make_event())

        assert len(received) == 1

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        bus.subscribe(received.append)

        bus.unsubscribe(received.append)
        bus.publish(make_event())

        assert received == []
