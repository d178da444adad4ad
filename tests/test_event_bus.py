"""Tests for EventBus."""

import pytest

from probe_monitor.event_bus import BusMessage, EventBus, Topic
from probe_monitor.transport import BusChannelPublisher


@pytest.fixture
def event_bus():
    """Create EventBus."""
    return EventBus()


class TestEventBusSubscribe:
    """Tests for EventBus subscription."""

    @pytest.mark.asyncio
    async def test_subscribe_multiple_handlers(self, event_bus):
        """Test subscribing multiple handlers to same topic."""

        async def handler1(msg: BusMessage):
            pass

        async def handler2(msg: BusMessage):
            pass

        event_bus.subscribe(Topic.PROBES, handler1)
        event_bus.subscribe(Topic.PROBES, handler2)

        assert len(event_bus._subscribers[Topic.PROBES]) == 2

    @pytest.mark.asyncio
    async def test_unsubscribe(self, event_bus):
        """Test that unsubscribed handlers no longer receive messages."""
        calls = []

        async def handler(msg: BusMessage):
            calls.append(msg)

        event_bus.subscribe(Topic.PROBES, handler)
        event_bus.unsubscribe(Topic.PROBES, handler)
        event_bus.unsubscribe(Topic.PROBES, handler)  # second call is a no-op

        await event_bus.publish(
            BusMessage(topic=Topic.PROBES, payload={}, source="test")
        )

        assert calls == []


class TestEventBusPublish:
    """Tests for EventBus publishing."""

    @pytest.mark.asyncio
    async def test_publish_single_subscriber(self, event_bus):
        """Test publishing to a single subscriber."""
        calls = []

        async def handler(msg: BusMessage):
            calls.append(msg)

        event_bus.subscribe(Topic.PROBES, handler)

        await event_bus.publish(
            BusMessage(topic=Topic.PROBES, payload={"timestamp": 1000}, source="test")
        )

        assert len(calls) == 1
        assert calls[0].payload == {"timestamp": 1000}
        assert calls[0].id  # generated

    @pytest.mark.asyncio
    async def test_publish_different_topics(self, event_bus):
        """Test that subscribers only receive messages from their topic."""
        probe_calls = []
        callback_calls = []

        async def probe_handler(msg: BusMessage):
            probe_calls.append(msg)

        async def callback_handler(msg: BusMessage):
            callback_calls.append(msg)

        event_bus.subscribe(Topic.PROBES, probe_handler)
        event_bus.subscribe(Topic.CALLBACKS, callback_handler)

        await event_bus.publish(
            BusMessage(topic=Topic.PROBES, payload={}, source="test")
        )

        assert len(probe_calls) == 1
        assert len(callback_calls) == 0

    @pytest.mark.asyncio
    async def test_publish_without_subscribers(self, event_bus):
        """Test that publishing to an empty topic is a no-op."""
        # Should not raise error
        await event_bus.publish(
            BusMessage(topic=Topic.CALLBACKS, payload={}, source="test")
        )

    @pytest.mark.asyncio
    async def test_publish_error_in_handler(self, event_bus):
        """Test that errors in one handler don't affect others."""
        calls = []

        async def failing_handler(msg: BusMessage):
            calls.append("failing")
            raise RuntimeError("Test error")

        async def normal_handler(msg: BusMessage):
            calls.append("normal")

        event_bus.subscribe(Topic.PROBES, failing_handler)
        event_bus.subscribe(Topic.PROBES, normal_handler)

        # Should not raise error
        await event_bus.publish(
            BusMessage(topic=Topic.PROBES, payload={}, source="test")
        )

        assert "failing" in calls
        assert "normal" in calls


class TestBusChannelPublisher:
    """Tests for publishing probes onto the bus."""

    @pytest.mark.asyncio
    async def test_publish_returns_before_delivery(self, event_bus):
        """Test that subscribers run after publish() has returned."""
        received = []

        async def handler(msg: BusMessage):
            received.append(msg.payload)

        event_bus.subscribe(Topic.PROBES, handler)
        publisher = BusChannelPublisher(event_bus)

        await publisher.publish({"timestamp": 1000, "probe_id": "1000-1"})
        assert received == []
        assert publisher.in_flight == 1

        await publisher.drain()
        assert received == [{"timestamp": 1000, "probe_id": "1000-1"}]
        assert publisher.in_flight == 0
