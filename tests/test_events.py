"""
Unit Tests for Domain Events and the Event Bus

Tests for:
- Event defaults and immutability
- Subscribe / unsubscribe / publish
- Handler failure isolation
"""

import pytest
from pydantic import ValidationError

from swipe_discovery.domain.shared.events import (
    CardCommitted,
    EventBus,
    PreferencesChanged,
    QueueRefilled,
)


class TestDomainEvents:
    def test_event_ids_are_unique(self):
        assert CardCommitted().event_id != CardCommitted().event_id

    def test_events_are_frozen(self):
        event = QueueRefilled(added=2, queue_length=5)

        with pytest.raises(ValidationError):
            event.added = 3

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            QueueRefilled(added=-1)


class TestEventBus:
    """Tests for the in-process EventBus."""

    @pytest.fixture
    def bus(self):
        return EventBus()

    @pytest.mark.asyncio
    async def test_publish_reaches_subscribers(self, bus):
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(CardCommitted, handler)
        event = CardCommitted(track_id="abc", direction="right", rating=0.8, label="loved_it")

        await bus.publish(event)

        assert received == [event]

    @pytest.mark.asyncio
    async def test_publish_is_type_scoped(self, bus):
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(PreferencesChanged, handler)

        await bus.publish(CardCommitted())

        assert received == []

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self, bus):
        """Should log handler exceptions and keep delivering."""
        received = []

        async def broken(event):
            raise RuntimeError("handler bug")

        async def healthy(event):
            received.append(event)

        bus.subscribe(CardCommitted, broken)
        bus.subscribe(CardCommitted, healthy)

        await bus.publish(CardCommitted())

        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_unsubscribe(self, bus):
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(CardCommitted, handler)
        bus.unsubscribe(CardCommitted, handler)

        await bus.publish(CardCommitted())

        assert received == []
        assert bus.has_subscribers(CardCommitted) is False

    def test_clear(self, bus):
        async def handler(event):
            return None

        bus.subscribe(QueueRefilled, handler)
        bus.clear()

        assert bus.has_subscribers(QueueRefilled) is False
