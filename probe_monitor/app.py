"""Application bootstrap and lifecycle management."""

import asyncio
import time
from typing import Any, Callable, Protocol

import httpx

from .alerting import IAlertSink, build_alert_sink
from .config import Settings
from .engine import DispatchLoop, ExpirySweeper, ProbeEngine
from .event_bus import BusMessage, EventBus, Topic
from .health import HealthCheckRunner, HealthProber
from .logging_config import get_logger
from .models import ProbeCallback, Resolution, decode_inbound
from .responder import BusCallbackTarget, EchoResponder, HttpCallbackTarget
from .transport import BusChannelPublisher, HttpChannelPublisher, IProbePublisher

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...


def build_health_checks(
    settings: Settings,
    client: httpx.AsyncClient,
    alert_sink: IAlertSink,
) -> HealthCheckRunner:
    """HealthCheckRunner for ADDR; without ADDR lifecycle events are only logged."""
    if not settings.health_target_url:
        return HealthCheckRunner(None)

    def factory() -> HealthProber:
        return HealthProber(
            target_url=settings.health_target_url,
            client=client,
            alert_sink=alert_sink,
            poll_interval_seconds=settings.health_poll_interval_seconds,
            total_wait_seconds=settings.health_wait_seconds,
            request_timeout=settings.http_timeout_seconds,
        )

    return HealthCheckRunner(factory)


class MonitorApplication:
    """Dispatches probes, correlates callbacks and sweeps expired probes."""

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        alert_sink: IAlertSink | None = None,
        publisher: IProbePublisher | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._settings = settings
        self._client = client
        self._owns_client = client is None
        self._alert_sink = alert_sink
        self._owns_sink = False
        self._publisher = publisher
        self._clock = clock

        # Components (will be initialized in start())
        self._stop_event: asyncio.Event | None = None
        self._event_bus: EventBus | None = None
        self._bus_publisher: BusChannelPublisher | None = None
        self._engine: ProbeEngine | None = None
        self._sweeper: ExpirySweeper | None = None
        self._dispatch_loop: DispatchLoop | None = None
        self._health_checks: HealthCheckRunner | None = None
        self._responder: EchoResponder | None = None
        self._running = False

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Initialize components in dependency order."""
        if self._running:
            return
        logger.info("Starting monitor")

        # 1. HTTP client and alert sink (no dependencies)
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.http_timeout_seconds)
            self._owns_client = True
        if self._alert_sink is None or self._owns_sink:
            self._alert_sink = build_alert_sink(self._settings, self._client)
            self._owns_sink = True
        self._health_checks = build_health_checks(
            self._settings, self._client, self._alert_sink
        )

        # 2. Transport (loopback wires the responder onto the in-process bus)
        publisher = self._publisher
        if publisher is None:
            if self._settings.loopback:
                publisher = await self._start_loopback()
            else:
                publisher = HttpChannelPublisher(
                    self._settings.channel_url,
                    self._client,
                    timeout=self._settings.http_timeout_seconds,
                )

        # 3. Engine (depends on transport + alert sink)
        self._engine = ProbeEngine(
            publisher=publisher,
            alert_sink=self._alert_sink,
            latency_threshold_seconds=self._settings.latency_threshold_seconds,
            expiry_timeout_seconds=self._settings.expiry_timeout_seconds,
            clock=self._clock,
        )

        # 4. Background loops share one stop event
        self._stop_event = asyncio.Event()
        self._sweeper = ExpirySweeper(
            self._engine,
            interval_seconds=self._settings.sweep_interval_seconds,
            stop_event=self._stop_event,
        )
        self._dispatch_loop = DispatchLoop(
            self._engine,
            interval_seconds=self._settings.publish_interval_seconds,
            stop_event=self._stop_event,
        )
        await self._sweeper.start()
        await self._dispatch_loop.start()

        self._running = True
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order. Pending probes are abandoned."""
        if self._stop_event:
            self._stop_event.set()
        if self._dispatch_loop:
            await self._dispatch_loop.stop()
        if self._sweeper:
            await self._sweeper.stop()
        if self._health_checks:
            await self._health_checks.stop()
        if self._bus_publisher:
            await self._bus_publisher.drain()
        if self._responder:
            await self._responder.stop()
        if self._event_bus:
            self._event_bus.unsubscribe(Topic.CALLBACKS, self._handle_bus_callback)
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

        if self._engine and self._engine.pending_count:
            logger.info("Abandoning %s pending probe(s)", self._engine.pending_count)
        self._running = False
        logger.info("Monitor stopped")

    async def handle_inbound(self, raw: Any) -> Resolution | None:
        """
        Route one inbound body by shape.

        Bodies with a timestamp go to the correlator and return its
        Resolution; anything else triggers a health check and returns None.
        """
        message = decode_inbound(raw)
        if isinstance(message, ProbeCallback):
            return await self.engine.resolve_callback(message)

        self.health_checks.trigger(message)
        return None

    async def _start_loopback(self) -> IProbePublisher:
        self._event_bus = EventBus()
        self._responder = EchoResponder(
            alert_sink=self._alert_sink,
            callback_target=BusCallbackTarget(self._event_bus),
            event_bus=self._event_bus,
            clock=self._clock,
        )
        await self._responder.start()
        self._event_bus.subscribe(Topic.CALLBACKS, self._handle_bus_callback)
        self._bus_publisher = BusChannelPublisher(self._event_bus)
        logger.info("Loopback channel enabled")
        return self._bus_publisher

    async def _handle_bus_callback(self, bus_message: BusMessage) -> None:
        await self.handle_inbound(bus_message.payload)

    @property
    def engine(self) -> ProbeEngine:
        """Get engine instance."""
        if not self._engine:
            raise RuntimeError("Application not started")
        return self._engine

    @property
    def health_checks(self) -> HealthCheckRunner:
        """Get health check runner."""
        if not self._health_checks:
            raise RuntimeError("Application not started")
        return self._health_checks

    @property
    def event_bus(self) -> EventBus | None:
        return self._event_bus


class ResponderApplication:
    """Consumes channel messages and answers probes."""

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        alert_sink: IAlertSink | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._settings = settings
        self._client = client
        self._owns_client = client is None
        self._alert_sink = alert_sink
        self._owns_sink = False
        self._clock = clock
        self._responder: EchoResponder | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    async def start(self) -> None:
        """Initialize components in dependency order."""
        if self._responder:
            return
        logger.info("Starting responder")

        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.http_timeout_seconds)
            self._owns_client = True
        if self._alert_sink is None or self._owns_sink:
            self._alert_sink = build_alert_sink(self._settings, self._client)
            self._owns_sink = True

        callback_target = None
        if self._settings.callback_url:
            callback_target = HttpCallbackTarget(
                self._settings.callback_url,
                self._client,
                timeout=self._settings.http_timeout_seconds,
            )
        else:
            logger.warning("CALLBACK_URL is not set, probes will not be answered")

        self._responder = EchoResponder(
            alert_sink=self._alert_sink,
            callback_target=callback_target,
            health_checks=build_health_checks(
                self._settings, self._client, self._alert_sink
            ),
            client=self._client,
            clock=self._clock,
        )
        await self._responder.start()
        logger.info("Responder started")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._responder:
            await self._responder.stop()
            self._responder = None
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None
        logger.info("Responder stopped")

    @property
    def responder(self) -> EchoResponder:
        """Get responder instance."""
        if not self._responder:
            raise RuntimeError("Application not started")
        return self._responder
