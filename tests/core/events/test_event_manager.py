"""
Unit tests for the Event Manager system.

Tests the publisher-subscriber routing the combat event bus is built on.
"""

from dataclasses import dataclass
from unittest.mock import Mock

from src.core.events.event_manager import EventPriority, QueuedEvent
from src.core.events.events import GameEvent, EventType, TurnStarted


@dataclass(frozen=True)
class MockEvent(GameEvent):
    """Mock event for testing."""
    data: str = "test"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.TURN_STARTED)


class TestQueuedEvent:
    """Test QueuedEvent functionality."""

    def test_queued_event_creation(self):
        """Test basic queued event creation."""
        event = MockEvent(turn=1)
        queued = QueuedEvent(event=event, priority=EventPriority.HIGH, source="test")

        assert queued.event == event
        assert queued.priority == EventPriority.HIGH
        assert queued.source == "test"

    def test_queued_event_ordering_by_priority(self):
        """Test that higher priorities sort first."""
        high_event = QueuedEvent(MockEvent(1), EventPriority.HIGH)
        normal_event = QueuedEvent(MockEvent(1), EventPriority.NORMAL)
        critical_event = QueuedEvent(MockEvent(1), EventPriority.CRITICAL)
        low_event = QueuedEvent(MockEvent(1), EventPriority.LOW)

        assert critical_event < high_event
        assert high_event < normal_event
        assert normal_event < low_event

    def test_queued_event_ordering_by_sequence(self):
        """Test that events with the same priority keep publication order."""
        event1 = QueuedEvent(MockEvent(1), EventPriority.NORMAL, sequence=1)
        event2 = QueuedEvent(MockEvent(1), EventPriority.NORMAL, sequence=2)

        assert event1 < event2
        assert not event2 < event1


class TestEventManager:
    """Test EventManager functionality."""

    def test_event_manager_creation(self, event_manager):
        """Test event manager initialization."""
        assert not event_manager.enable_debug_logging
        assert event_manager.get_statistics()['events_published'] == 0
        assert event_manager.get_statistics()['events_processed'] == 0

    def test_subscribe_to_event_type(self, event_manager):
        """Test subscribing to specific event types."""
        event_manager.subscribe(EventType.TURN_STARTED, Mock())

        assert event_manager.get_statistics()['subscribers_count'] == 1

    def test_subscribe_to_all_events(self, event_manager):
        """Test subscribing to all events (universal subscriber)."""
        event_manager.subscribe_all(Mock())

        assert event_manager.get_statistics()['universal_subscribers_count'] == 1

    def test_publish_event(self, event_manager):
        """Test publishing events to the queue."""
        event_manager.publish(MockEvent(turn=1), priority=EventPriority.HIGH, source="test")

        stats = event_manager.get_statistics()
        assert stats['events_published'] == 1
        assert stats['events_queued'] == 1
        assert event_manager.has_queued_events()

    def test_publish_immediate(self, event_manager):
        """Test immediate event publishing and processing."""
        subscriber = Mock()
        event_manager.subscribe(EventType.TURN_STARTED, subscriber)

        event = MockEvent(turn=1)
        event_manager.publish_immediate(event, source="test")

        subscriber.assert_called_once_with(event)

    def test_process_events(self, event_manager):
        """Test processing queued events."""
        subscriber = Mock()
        event_manager.subscribe(EventType.TURN_STARTED, subscriber)

        event_manager.publish(MockEvent(turn=1, data="first"))
        event_manager.publish(MockEvent(turn=2, data="second"))

        processed_count = event_manager.process_events()

        assert processed_count == 2
        assert subscriber.call_count == 2
        assert not event_manager.has_queued_events()

    def test_process_events_with_limit(self, event_manager):
        """Test processing a limited number of events."""
        subscriber = Mock()
        event_manager.subscribe(EventType.TURN_STARTED, subscriber)

        for i in range(5):
            event_manager.publish(MockEvent(turn=i))

        processed_count = event_manager.process_events(max_events=2)

        assert processed_count == 2
        assert subscriber.call_count == 2
        assert event_manager.has_queued_events()

    def test_same_priority_events_delivered_in_publication_order(self, event_manager):
        """Events queued during one action come out in the order they went in."""
        results = []
        event_manager.subscribe(EventType.TURN_STARTED, lambda event: results.append(event.data))

        for name in ["attack", "damage", "effect", "expired"]:
            event_manager.publish(MockEvent(1, name))
        event_manager.process_events()

        assert results == ["attack", "damage", "effect", "expired"]

    def test_critical_events_dispatched_before_low(self, event_manager):
        """Queued events come out highest priority first."""
        results = []
        event_manager.subscribe(EventType.TURN_STARTED, lambda event: results.append(event.data))

        event_manager.publish(MockEvent(1, "low"), priority=EventPriority.LOW)
        event_manager.publish(MockEvent(1, "normal"))
        event_manager.publish(MockEvent(1, "critical"), priority=EventPriority.CRITICAL)
        event_manager.process_events()

        assert results == ["critical", "normal", "low"]

    def test_universal_subscriber_receives_all_events(self, event_manager):
        """Test that universal subscribers receive all event types."""
        universal_subscriber = Mock()
        specific_subscriber = Mock()

        event_manager.subscribe_all(universal_subscriber)
        event_manager.subscribe(EventType.TURN_STARTED, specific_subscriber)

        event_manager.publish_immediate(TurnStarted(turn=1))
        event_manager.publish_immediate(MockEvent(turn=1))

        assert universal_subscriber.call_count == 2
        assert specific_subscriber.call_count == 2  # Both are TURN_STARTED events

    def test_unsubscribe(self, event_manager):
        """Test unsubscribing from events."""
        subscriber = Mock()

        event_manager.subscribe(EventType.TURN_STARTED, subscriber)
        assert event_manager.unsubscribe(EventType.TURN_STARTED, subscriber)

        event_manager.publish_immediate(MockEvent(turn=1))
        subscriber.assert_not_called()

    def test_unsubscribe_all(self, event_manager):
        """Test unsubscribing from all events."""
        subscriber = Mock()

        event_manager.subscribe_all(subscriber)
        assert event_manager.unsubscribe_all(subscriber)

        event_manager.publish_immediate(MockEvent(turn=1))
        subscriber.assert_not_called()

    def test_subscriber_exception_handling(self, event_manager):
        """Test that subscriber exceptions don't break event processing."""
        failing_subscriber = Mock(side_effect=Exception("Test error"))
        working_subscriber = Mock()

        event_manager.subscribe(EventType.TURN_STARTED, failing_subscriber)
        event_manager.subscribe(EventType.TURN_STARTED, working_subscriber)

        event_manager.publish_immediate(MockEvent(turn=1))

        working_subscriber.assert_called_once()
        assert event_manager.get_statistics()['subscriber_errors'] == 1

    def test_clear_queue(self, event_manager):
        """Test clearing the event queue."""
        event_manager.publish(MockEvent(turn=1))
        event_manager.publish(MockEvent(turn=2))

        assert event_manager.clear_queue() == 2
        assert not event_manager.has_queued_events()

    def test_get_recent_events(self, event_manager):
        """Test getting recent event history."""
        for i in range(5):
            event_manager.publish_immediate(MockEvent(turn=i))

        recent = event_manager.get_recent_events(count=3)

        assert len(recent) == 3
        assert all('event_type' in event_info for event_info in recent)
        assert [event_info['turn'] for event_info in recent] == [2, 3, 4]

    def test_debug_callback_receives_messages(self):
        """Debug logging routes through the configured callback."""
        from src.core.events.event_manager import EventManager

        lines = []
        manager = EventManager(enable_debug_logging=True)
        manager.set_debug_callback(lines.append)
        manager.subscribe(EventType.TURN_STARTED, Mock(), subscriber_name="probe")

        assert any("probe" in line for line in lines)

    def test_shutdown(self, event_manager):
        """Test event manager shutdown."""
        event_manager.subscribe(EventType.TURN_STARTED, Mock())
        event_manager.publish(MockEvent(turn=1))

        event_manager.shutdown()

        stats = event_manager.get_statistics()
        assert stats['subscribers_count'] == 0
        assert stats['events_queued'] == 0
