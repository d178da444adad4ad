"""Bounded-retry health prober for lifecycle events."""

import asyncio
import time
from enum import Enum
from typing import Awaitable, Callable

import httpx

from ..alerting import IAlertSink, fire_alert
from ..logging_config import get_logger
from ..models import AlertEvent, AlertKind

logger = get_logger(__name__)


class ProberState(str, Enum):
    """Lifecycle of a single probing run."""

    IDLE = "idle"
    POLLING = "polling"
    HEALTHY = "healthy"
    TIMEOUT = "timeout"


class HealthProber:
    """Polls a target until it answers 2xx or the wait window runs out."""

    def __init__(
        self,
        target_url: str,
        client: httpx.AsyncClient,
        alert_sink: IAlertSink,
        poll_interval_seconds: float = 10.0,
        total_wait_seconds: float = 300.0,
        request_timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._target_url = target_url
        self._client = client
        self._alerts = alert_sink
        self._poll_interval = poll_interval_seconds
        self._total_wait = total_wait_seconds
        self._request_timeout = request_timeout
        self._clock = clock
        self._sleep = sleep
        self._state = ProberState.IDLE
        self._attempts = 0

    @property
    def state(self) -> ProberState:
        return self._state

    @property
    def attempts(self) -> int:
        return self._attempts

    async def run(self) -> ProberState:
        """Poll until healthy or timed out. Returns the exit state."""
        self._state = ProberState.POLLING
        self._attempts = 0
        start = self._clock()

        while self._clock() - start < self._total_wait:
            if await self._poll():
                logger.info(
                    "Target %s responded successfully after %s attempt(s)",
                    self._target_url,
                    self._attempts,
                )
                self._state = ProberState.HEALTHY
                return self._state

            logger.info(
                "Target response failed or not 2xx. Retrying in %gs...",
                self._poll_interval,
            )
            await self._sleep(self._poll_interval)

        self._state = ProberState.TIMEOUT
        minutes = self._total_wait / 60.0
        logger.error("Target %s unresponsive for %g minutes", self._target_url, minutes)
        await fire_alert(
            self._alerts,
            AlertEvent(
                AlertKind.UNRESPONSIVE,
                "Target unresponsive",
                f"Target {self._target_url} unresponsive for {minutes:g} minutes",
            ),
        )
        return self._state

    async def _poll(self) -> bool:
        self._attempts += 1
        try:
            response = await self._client.get(
                self._target_url, timeout=self._request_timeout
            )
        except httpx.HTTPError as e:
            logger.debug("Health poll of %s failed: %s", self._target_url, e)
            return False
        return response.is_success
