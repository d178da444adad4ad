"""Echo responder: the downstream consumer that answers probes."""

import time
from typing import Any, Callable, Protocol

import httpx

from ..alerting import IAlertSink, fire_alert
from ..event_bus import BusMessage, IEventBus, Topic
from ..health import HealthCheckRunner
from ..logging_config import get_logger
from ..models import AlertEvent, AlertKind, InboundMessage, ProbeCallback, decode_inbound
from ..transport import post_json
from .envelope import unwrap_delivery

logger = get_logger(__name__)


class ICallbackTarget(Protocol):
    """Where the responder delivers callbacks."""

    async def deliver(self, callback: ProbeCallback) -> None:
        """Deliver one callback; raise on failure."""
        ...


class HttpCallbackTarget:
    """POSTs callbacks to the monitor's /callback endpoint."""

    def __init__(
        self,
        callback_url: str,
        client: httpx.AsyncClient,
        timeout: float | None = None,
    ):
        self._callback_url = callback_url
        self._client = client
        self._timeout = timeout

    async def deliver(self, callback: ProbeCallback) -> None:
        await post_json(
            self._client, self._callback_url, callback.to_payload(), timeout=self._timeout
        )


class BusCallbackTarget:
    """Publishes callbacks on the in-process bus (loopback mode)."""

    def __init__(self, event_bus: IEventBus, source: str = "responder"):
        self._event_bus = event_bus
        self._source = source

    async def deliver(self, callback: ProbeCallback) -> None:
        await self._event_bus.publish(
            BusMessage(
                topic=Topic.CALLBACKS,
                payload=callback.to_payload(),
                source=self._source,
            )
        )


class EchoResponder:
    """Answers probe messages with callbacks and health-checks on lifecycle events."""

    def __init__(
        self,
        alert_sink: IAlertSink,
        callback_target: ICallbackTarget | None = None,
        health_checks: HealthCheckRunner | None = None,
        event_bus: IEventBus | None = None,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._alerts = alert_sink
        self._callback_target = callback_target
        self._health_checks = health_checks or HealthCheckRunner(None)
        self._event_bus = event_bus
        self._client = client
        self._clock = clock

    @property
    def health_checks(self) -> HealthCheckRunner:
        return self._health_checks

    async def start(self) -> None:
        """Subscribe to PROBES topic when running on the in-process bus."""
        if self._event_bus:
            self._event_bus.subscribe(Topic.PROBES, self._handle_bus_message)

    async def stop(self) -> None:
        """Unsubscribe and cancel a running health check."""
        if self._event_bus:
            self._event_bus.unsubscribe(Topic.PROBES, self._handle_bus_message)
        await self._health_checks.stop()

    async def handle_delivery(self, raw: Any) -> int:
        """Handle one channel delivery. Returns the number of messages handled."""
        delivery = unwrap_delivery(raw)
        if delivery.subscribe_url:
            await self._confirm_subscription(delivery.subscribe_url)

        for message in delivery.messages:
            await self.handle_message(message)
        return len(delivery.messages)

    async def handle_message(self, raw: Any) -> InboundMessage:
        """Decode a single channel message and route it."""
        message = decode_inbound(raw)
        if isinstance(message, ProbeCallback):
            await self._answer_probe(message)
        else:
            self._health_checks.trigger(message)
        return message

    async def _handle_bus_message(self, bus_message: BusMessage) -> None:
        await self.handle_message(bus_message.payload)

    async def _answer_probe(self, probe: ProbeCallback) -> None:
        callback = probe.with_receipt(int(self._clock() * 1000))
        logger.info(
            "Received probe timestamp %s, latency: %.2f seconds",
            callback.timestamp,
            callback.latency_seconds,
            extra={"context": {"probe_id": callback.probe_id}},
        )

        if self._callback_target is None:
            logger.warning("CALLBACK_URL is not set, dropping callback")
            return

        try:
            await self._callback_target.deliver(callback)
        except Exception as e:
            logger.error("Callback delivery failed: %s", e)
            subject = "Error delivering callback"
            await fire_alert(
                self._alerts,
                AlertEvent(
                    AlertKind.CALLBACK_DELIVERY,
                    subject,
                    f"{subject} for timestamp {callback.timestamp}: {e}",
                ),
            )

    async def _confirm_subscription(self, subscribe_url: str) -> None:
        if self._client is None:
            logger.warning("No HTTP client, cannot confirm subscription")
            return
        try:
            response = await self._client.get(subscribe_url)
            response.raise_for_status()
            logger.info("Subscription confirmed")
        except httpx.HTTPError as e:
            logger.error("Subscription confirmation failed: %s", e)
