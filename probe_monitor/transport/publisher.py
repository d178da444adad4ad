"""Channel publishers: how a probe payload leaves the monitor."""

import asyncio
from typing import Protocol

import httpx

from ..event_bus import BusMessage, IEventBus, Topic
from ..logging_config import get_logger
from .http import post_json

logger = get_logger(__name__)


class IProbePublisher(Protocol):
    """Publishes one probe payload to the pub/sub channel."""

    async def publish(self, payload: dict) -> None:
        """Publish payload; raise TransportError on failure."""
        ...


class HttpChannelPublisher:
    """Publishes probes to an HTTP endpoint fronting the channel."""

    def __init__(
        self,
        channel_url: str,
        client: httpx.AsyncClient,
        timeout: float | None = None,
    ):
        self._channel_url = channel_url
        self._client = client
        self._timeout = timeout

    async def publish(self, payload: dict) -> None:
        await post_json(self._client, self._channel_url, payload, timeout=self._timeout)
        logger.debug("Published probe payload to %s", self._channel_url)


class BusChannelPublisher:
    """
    Publishes probes onto the in-process event bus (loopback mode).

    Delivery runs as its own task and ``publish`` returns without waiting
    for subscribers, like a real channel accepting a message. The echo is
    therefore handled after the engine has recorded the probe.
    """

    def __init__(self, event_bus: IEventBus, source: str = "monitor"):
        self._event_bus = event_bus
        self._source = source
        self._deliveries: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        return len(self._deliveries)

    async def publish(self, payload: dict) -> None:
        message = BusMessage(topic=Topic.PROBES, payload=payload, source=self._source)
        task = asyncio.create_task(self._event_bus.publish(message))
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)

    async def drain(self) -> None:
        """Wait for every scheduled delivery to finish."""
        while self._deliveries:
            await asyncio.gather(*self._deliveries, return_exceptions=True)
