"""Alert sink protocol and the fan-out implementation."""

import asyncio
from typing import Protocol, Sequence, runtime_checkable

from ..logging_config import get_logger
from ..models import AlertEvent

logger = get_logger(__name__)


@runtime_checkable
class IAlertSink(Protocol):
    """Where alert notifications go."""

    async def send_alert(self, subject: str, body: str) -> None:
        """Deliver one alert. Must not raise for backend failures."""
        ...


@runtime_checkable
class IAlertBackend(Protocol):
    """A single notification channel (chat webhook, pager, ...)."""

    name: str

    async def deliver(self, subject: str, body: str) -> None:
        """Deliver one alert; raise AlertDeliveryError on failure."""
        ...


class LogAlertBackend:
    """Writes alerts to the service log. Always enabled."""

    name = "log"

    async def deliver(self, subject: str, body: str) -> None:
        logger.warning("ALERT %s: %s", subject, body)


class FanOutAlertSink:
    """Sends each alert to every backend; one failure never blocks the rest."""

    def __init__(self, backends: Sequence[IAlertBackend], source: str | None = None):
        self._backends = list(backends)
        self._source = source

    @property
    def backends(self) -> list[IAlertBackend]:
        return list(self._backends)

    async def send_alert(self, subject: str, body: str) -> None:
        if self._source:
            subject = f"[{self._source}] {subject}"

        results = await asyncio.gather(
            *[backend.deliver(subject, body) for backend in self._backends],
            return_exceptions=True,
        )

        for backend, result in zip(self._backends, results):
            if isinstance(result, Exception):
                logger.error("%s alert failed: %s", backend.name, result)


async def fire_alert(sink: IAlertSink, event: AlertEvent) -> None:
    """Log an alert event and hand it to the sink. Delivery errors stop here."""
    logger.info(
        "Firing %s alert: %s",
        event.kind.value,
        event.subject,
        extra={"context": {"kind": event.kind.value, "body": event.body}},
    )
    try:
        await sink.send_alert(event.subject, event.body)
    except Exception as e:
        logger.error("Alert sending failed: %s", e, exc_info=True)
