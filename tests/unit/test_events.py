"""Tests for event system."""

import pytest

from earlyspring_core.events.bus import EventBus
from earlyspring_core.events.types import (AlarmEvent, Event, EventType,
                                           SessionEvent, WarningEvent)
from earlyspring_core.utils.exceptions import EventError


def triggered(alarm_id="alarm-1"):
    return AlarmEvent(event_type=EventType.ALARM_TRIGGERED, alarm_id=alarm_id, label="Gym")


@pytest.mark.asyncio
class TestEventBus:
    """Tests for EventBus."""

    async def test_publish_and_subscribe(self):
        """Test basic publish/subscribe."""
        bus = EventBus()
        received_events = []

        async def handler(event):
            received_events.append(event)

        bus.subscribe(EventType.ALARM_TRIGGERED, handler)

        await bus.publish(triggered())

        assert len(received_events) == 1
        assert received_events[0].alarm_id == "alarm-1"

    async def test_sync_handler(self):
        """Plain functions are valid handlers."""
        bus = EventBus()
        received_events = []

        bus.subscribe(EventType.ALARM_TRIGGERED, received_events.append)
        await bus.publish(triggered())

        assert len(received_events) == 1

    async def test_other_event_types_not_delivered(self):
        """Handlers only see their own event type."""
        bus = EventBus()
        received_events = []

        bus.subscribe(EventType.SESSION_CONFIRMED, received_events.append)
        await bus.publish(triggered())

        assert received_events == []

    async def test_handler_priority(self):
        """Higher priority handlers run first."""
        bus = EventBus()
        order = []

        bus.subscribe(EventType.ALARM_TRIGGERED, lambda e: order.append("low"), priority=1)
        bus.subscribe(EventType.ALARM_TRIGGERED, lambda e: order.append("high"), priority=10)

        await bus.publish(triggered())

        assert order == ["high", "low"]

    async def test_wildcard_subscription(self):
        """subscribe_all receives every event."""
        bus = EventBus()
        received_events = []

        bus.subscribe_all(received_events.append)
        await bus.publish(triggered())
        await bus.publish(Event(event_type=EventType.ENGINE_STOPPED))

        assert [e.event_type for e in received_events] == ["alarm.triggered", "engine.stopped"]

    async def test_failing_handler_isolated(self):
        """A failing handler does not stop delivery to the next one."""
        bus = EventBus()
        received_events = []

        def broken(event):
            raise RuntimeError("UI crashed")

        bus.subscribe(EventType.ALARM_TRIGGERED, broken, priority=5)
        bus.subscribe(EventType.ALARM_TRIGGERED, received_events.append)

        await bus.publish(triggered())

        assert len(received_events) == 1
        stats = bus.get_statistics()
        assert stats["errors"] == 1
        assert stats["handled"] == 1

    async def test_unsubscribe(self):
        """Test unsubscribing handlers."""
        bus = EventBus()
        received_events = []

        bus.subscribe(EventType.ALARM_TRIGGERED, received_events.append)

        assert bus.unsubscribe(EventType.ALARM_TRIGGERED, received_events.append) is True
        assert bus.unsubscribe(EventType.SESSION_SNOOZED, received_events.append) is False

        await bus.publish(triggered())
        assert received_events == []

    async def test_publish_nowait_and_drain(self):
        """Events scheduled from sync code arrive after drain()."""
        bus = EventBus()
        received_events = []

        bus.subscribe(EventType.SESSION_SNOOZED, received_events.append)
        task = bus.publish_nowait(
            SessionEvent(
                event_type=EventType.SESSION_SNOOZED,
                session_id="s1",
                alarm_id="alarm-1",
                state="snoozed",
                delta=-5,
            )
        )

        assert task is not None
        await bus.drain()

        assert received_events[0].delta == -5

    async def test_history(self):
        """History is most recent first and bounded."""
        bus = EventBus(enable_history=True, max_history=2)

        await bus.publish(triggered("a1"))
        await bus.publish(triggered("a2"))
        await bus.publish(WarningEvent(event_type=EventType.WARNING_OCCURRED,
                                       component="lifecycle", message="Score not saved"))

        history = bus.get_history()
        assert len(history) == 2
        assert history[0].event_type == "warning.occurred"
        assert [e.alarm_id for e in bus.get_history(EventType.ALARM_TRIGGERED)] == ["a2"]

        bus.clear_history()
        assert bus.get_history() == []

    async def test_subscriber_count(self):
        bus = EventBus()

        bus.subscribe(EventType.ALARM_TRIGGERED, print)
        bus.subscribe(EventType.ALARM_SCHEDULED, print)
        bus.subscribe_all(print)

        assert bus.get_subscriber_count(EventType.ALARM_TRIGGERED) == 1
        assert bus.get_subscriber_count() == 3


class TestEventBusWithoutLoop:
    """Tests for synchronous use of the bus."""

    def test_non_callable_handler(self):
        """Subscribing something that is not callable raises EventError."""
        with pytest.raises(EventError):
            EventBus().subscribe(EventType.ALARM_TRIGGERED, "not a handler")

    def test_publish_nowait_without_loop(self):
        """Without a running loop the event is dropped."""
        assert EventBus().publish_nowait(triggered()) is None
