"""EventBus module."""

from .event_bus import BusMessage, EventBus, IEventBus, Topic, TopicHandler

__all__ = ["BusMessage", "EventBus", "IEventBus", "Topic", "TopicHandler"]
